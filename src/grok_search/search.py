"""Query runner: one web-search-augmented question, printed with its sources."""

from __future__ import annotations

import typer

from grok_search.config import Settings
from grok_search.errors import MISSING_API_KEY_MESSAGE, ConfigurationError, RequestError
from grok_search.llm.client import SearchClient, build_client
from grok_search.logging import get_logger
from grok_search.models.search import SearchRequest, SearchResult

logger = get_logger(__name__)

NO_SOURCES_NOTICE = "ℹ️  No web sources were used for this query."


def format_result(result: SearchResult) -> list[str]:
    """Render a result as output lines.

    Only url-typed sources are listed, numbered from 1 in the order supplied. A result
    without any such source gets the "no sources" notice instead.
    """

    lines = ["📝 Answer:", "", result.answer, "", ""]

    url_sources = result.url_sources()
    if not url_sources:
        lines.append(NO_SOURCES_NOTICE)
        return lines

    lines += ["📚 Sources:", ""]
    for i, source in enumerate(url_sources, start=1):
        lines.append(f"{i}. {source.url}")
        if source.title:
            lines.append(f"   Title: {source.title}")
    return lines


async def perform_web_search(
    query: str,
    *,
    settings: Settings,
    client: SearchClient | None = None,
) -> SearchResult:
    """Answer `query` with Grok's web search and print the answer and sources.

    Args:
        query: Non-empty user query.
        settings: Resolved settings; the API key must be set.
        client: Search client to use. Built from settings (and closed afterwards) if omitted.

    Returns:
        The answer and its sources.

    Raises:
        ConfigurationError: No API key is configured. Raised before any network call.
        RequestError: The service call failed.
    """

    if not settings.has_api_key:
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)

    request = SearchRequest(query=query, model=settings.model, api_key=settings.api_key)
    typer.echo(f"🔍 Searching with {request.model}: {request.query}\n")

    owned = build_client(settings) if client is None else None
    active = client or owned

    try:
        result = await active.generate(request.query, model=request.model)
    except Exception as e:
        message = str(e) or type(e).__name__
        typer.echo(f"❌ Error performing web search: {message}", err=True)
        logger.debug("search failed", exc_info=True)
        if isinstance(e, RequestError):
            raise
        raise RequestError(message) from e
    finally:
        if owned is not None:
            await owned.aclose()

    for line in format_result(result):
        typer.echo(line)

    return result
