"""xAI Grok client with the server-side web search tool.

This wraps the `openai` Python SDK pointed at xAI's OpenAI-compatible Responses API.
"""

from __future__ import annotations

import time
from typing import Any, Protocol

from openai import AsyncOpenAI

from grok_search.config import Settings
from grok_search.errors import MISSING_API_KEY_MESSAGE, ConfigurationError
from grok_search.logging import get_logger
from grok_search.models.search import SearchResult, SourceRef

logger = get_logger(__name__)

WEB_SEARCH_TOOL: dict[str, Any] = {
    "type": "web_search",
    "enable_image_understanding": True,
}


class SearchClient(Protocol):
    """Generates an answer with web search for a prompt."""

    async def generate(self, prompt: str, *, model: str) -> SearchResult:
        """Ask `model` to answer `prompt`, consulting the web."""


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def parse_response(response: Any) -> SearchResult:
    """Convert a Responses API payload to a SearchResult.

    Sources come from `url_citation` annotations on the message output, deduplicated by
    URL in first-seen order. When there are none, the top-level `citations` URL list that
    xAI attaches to search-backed responses is used instead.
    """

    answer = _field(response, "output_text") or ""

    sources: list[SourceRef] = []
    seen: set[str] = set()
    for item in _field(response, "output") or []:
        if _field(item, "type") != "message":
            continue
        for part in _field(item, "content") or []:
            for ann in _field(part, "annotations") or []:
                if _field(ann, "type") != "url_citation":
                    continue
                url = _field(ann, "url")
                if not url or url in seen:
                    continue
                seen.add(url)
                sources.append(SourceRef(source_type="url", url=url, title=_field(ann, "title") or None))

    if not sources:
        for url in _field(response, "citations") or []:
            if isinstance(url, str) and url and url not in seen:
                seen.add(url)
                sources.append(SourceRef(source_type="url", url=url))

    return SearchResult(answer=answer, sources=sources)


class XAIResponsesClient:
    """SearchClient backed by xAI's Responses API."""

    def __init__(self, *, api_key: str, base_url: str, timeout_s: float | None = None) -> None:
        kwargs: dict[str, Any] = {"api_key": api_key, "base_url": base_url}
        if timeout_s is not None:
            kwargs["timeout"] = timeout_s
        self._client = AsyncOpenAI(**kwargs)

    async def generate(self, prompt: str, *, model: str) -> SearchResult:
        """Generate an answer.

        Args:
            prompt: User query.
            model: xAI model identifier.

        Returns:
            Answer text and cited sources.
        """

        started = time.monotonic()
        resp = await self._client.responses.create(
            model=model,
            input=prompt,
            tools=[WEB_SEARCH_TOOL],
        )
        result = parse_response(resp)
        logger.info(
            "xAI response ok model=%s sources=%d latency_ms=%d",
            model,
            len(result.sources),
            int((time.monotonic() - started) * 1000),
        )
        return result

    async def aclose(self) -> None:
        await self._client.close()


def build_client(settings: Settings) -> XAIResponsesClient:
    """Factory to create the xAI client from settings."""

    if not settings.has_api_key:
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)
    return XAIResponsesClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout_s=settings.timeout_s,
    )
