"""Tests for the query runner."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeClient
from grok_search import search as search_module
from grok_search.config import DEFAULT_MODEL, Settings
from grok_search.errors import ConfigurationError, RequestError
from grok_search.models.search import SearchResult, SourceRef
from grok_search.search import NO_SOURCES_NOTICE, format_result, perform_web_search

PARIS = SearchResult(
    answer="Paris is the capital.",
    sources=[SourceRef(source_type="url", url="https://example.com/a", title="A")],
)


def _settings(**env: str) -> Settings:
    return Settings.from_environ({"XAI_API_KEY": "test-key", **env})


def test_format_result_numbers_url_sources_in_order() -> None:
    """It should print one line per url source, 1-indexed, with title lines."""

    result = SearchResult(
        answer="answer",
        sources=[
            SourceRef(url="https://one.test", title="One"),
            SourceRef(url="https://two.test"),
        ],
    )

    lines = format_result(result)
    assert lines[:3] == ["📝 Answer:", "", "answer"]
    assert "📚 Sources:" in lines
    assert lines[-3:] == ["1. https://one.test", "   Title: One", "2. https://two.test"]
    assert NO_SOURCES_NOTICE not in lines


def test_format_result_skips_non_url_sources() -> None:
    """It should list only url-typed sources and number them contiguously."""

    result = SearchResult(
        answer="a",
        sources=[
            SourceRef(source_type="document", title="Doc"),
            SourceRef(url="https://u.test"),
        ],
    )

    lines = format_result(result)
    assert "1. https://u.test" in lines
    assert not any("Doc" in line for line in lines)


@pytest.mark.parametrize(
    "sources",
    [[], [SourceRef(source_type="document", title="only a document")]],
)
def test_format_result_without_url_sources_prints_notice(sources: list[SourceRef]) -> None:
    """It should print the notice and no numbered lines."""

    lines = format_result(SearchResult(answer="answer", sources=sources))
    assert lines[-1] == NO_SOURCES_NOTICE
    assert "📚 Sources:" not in lines
    assert not any(line.startswith("1. ") for line in lines)


def test_format_result_is_deterministic() -> None:
    """It should render the same result identically every time."""

    assert format_result(PARIS) == format_result(PARIS.model_copy(deep=True))


def test_missing_api_key_fails_before_any_call() -> None:
    """It should raise ConfigurationError and never touch the client."""

    client = FakeClient(PARIS)
    with pytest.raises(ConfigurationError, match="XAI_API_KEY"):
        asyncio.run(perform_web_search("test", settings=Settings.from_environ({}), client=client))
    assert client.calls == []


def test_missing_api_key_never_builds_a_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """It should fail before constructing the real client."""

    def explode(settings: Settings) -> None:
        raise AssertionError("client must not be built")

    monkeypatch.setattr(search_module, "build_client", explode)
    with pytest.raises(ConfigurationError):
        asyncio.run(perform_web_search("test", settings=Settings.from_environ({})))


def test_uses_model_override(capsys: pytest.CaptureFixture[str]) -> None:
    """It should pass XAI_MODEL through and print answer and sources."""

    client = FakeClient(PARIS)
    result = asyncio.run(
        perform_web_search("capital of France?", settings=_settings(XAI_MODEL="custom-model"), client=client)
    )

    assert client.calls == [("capital of France?", "custom-model")]
    assert len(result.sources) == 1

    out = capsys.readouterr().out
    assert "🔍 Searching with custom-model: capital of France?" in out
    assert "Paris is the capital." in out
    assert "1. https://example.com/a" in out
    assert "   Title: A" in out
    assert out.index("Paris is the capital.") < out.index("1. https://example.com/a")


def test_uses_default_model() -> None:
    """It should use the default model when XAI_MODEL is unset."""

    client = FakeClient(PARIS)
    asyncio.run(perform_web_search("q", settings=_settings(), client=client))
    assert client.calls == [("q", DEFAULT_MODEL)]


def test_empty_sources_prints_notice(capsys: pytest.CaptureFixture[str]) -> None:
    """It should report that no web sources were used."""

    client = FakeClient(SearchResult(answer="answer", sources=[]))
    result = asyncio.run(perform_web_search("q", settings=_settings(), client=client))

    assert result.sources == []
    out = capsys.readouterr().out
    assert "No web sources were used" in out


def test_request_failure_is_reported_and_propagated(capsys: pytest.CaptureFixture[str]) -> None:
    """It should print the error to stderr and raise RequestError."""

    cause = ConnectionError("connection reset")
    client = FakeClient(cause)

    with pytest.raises(RequestError, match="connection reset") as excinfo:
        asyncio.run(perform_web_search("q", settings=_settings(), client=client))

    assert excinfo.value.__cause__ is cause
    assert len(client.calls) == 1
    err = capsys.readouterr().err
    assert "❌ Error performing web search: connection reset" in err


def test_builds_and_closes_own_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """It should build a client from settings when none is given, and close it."""

    client = FakeClient(PARIS)
    monkeypatch.setattr(search_module, "build_client", lambda settings: client)

    asyncio.run(perform_web_search("q", settings=_settings()))
    assert client.calls == [("q", DEFAULT_MODEL)]
    assert client.closed is True


def test_does_not_close_injected_client() -> None:
    """It should leave a caller-provided client open."""

    client = FakeClient(PARIS)
    asyncio.run(perform_web_search("q", settings=_settings(), client=client))
    assert client.closed is False


def test_request_failure_without_message_names_the_error(capsys: pytest.CaptureFixture[str]) -> None:
    """It should fall back to the exception type when the error has no message."""

    with pytest.raises(RequestError, match="TimeoutError"):
        asyncio.run(perform_web_search("q", settings=_settings(), client=FakeClient(TimeoutError())))

    assert "❌ Error performing web search: TimeoutError" in capsys.readouterr().err
