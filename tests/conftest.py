"""Shared fixtures: fake search clients and a clean environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from grok_search.models.search import SearchResult

_ENV_VARS = (
    "XAI_API_KEY",
    "XAI_MODEL",
    "XAI_BASE_URL",
    "XAI_TIMEOUT_S",
    "GROK_SEARCH_LOG_LEVEL",
    "GROK_SEARCH_ENV_FILE",
)


class FakeClient:
    """SearchClient returning canned results and recording calls."""

    def __init__(self, *results: SearchResult | Exception) -> None:
        self._results = list(results)
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def generate(self, prompt: str, *, model: str) -> SearchResult:
        self.calls.append((prompt, model))
        outcome = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Unset grok-search variables and run from an empty directory (no `.env`)."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
