"""CLI entrypoints for grok-search."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from grok_search.config import Settings, load_settings
from grok_search.errors import MISSING_API_KEY_MESSAGE, GrokSearchError, RequestError, UsageError
from grok_search.installer import SKILL_INSTALL_DIR, install_skill
from grok_search.llm.client import build_client
from grok_search.logging import command_context, configure_logging, get_logger
from grok_search.search import perform_web_search
from grok_search.smoke import run_single_query, run_suite

app = typer.Typer(add_completion=False, help="Web search answers from xAI Grok, with cited sources")
logger = get_logger(__name__)

USAGE = (
    'Usage: grok-search search "<your query>"\n'
    'Example: grok-search search "What are the latest AI developments?"'
)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"❌ {message}", err=True)
    return typer.Exit(code=1)


def _settings() -> Settings:
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
    except ValueError as e:  # includes pydantic's ValidationError
        raise _fail(f"Invalid configuration: {e}") from e
    return settings


def _join_query(words: list[str] | None) -> str:
    query = " ".join(words or [])
    if not query:
        raise UsageError(USAGE)
    return query


@app.command()
def search(
    query: list[str] | None = typer.Argument(
        None,
        help="Query words; joined with spaces.",
        show_default=False,
    ),
) -> None:
    """Answer a query using Grok with web search, then list the cited sources."""

    try:
        text = _join_query(query)
    except UsageError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    settings = _settings()
    with command_context("search"):
        logger.info("search requested model=%s query_len=%d", settings.model, len(text))
        try:
            asyncio.run(perform_web_search(text, settings=settings))
        except RequestError as e:
            # Already reported by perform_web_search
            raise typer.Exit(code=1) from e
        except GrokSearchError as e:
            raise _fail(str(e)) from e


@app.command()
def install(
    target: Path = typer.Option(SKILL_INSTALL_DIR, "--target", help="Skill install directory"),
    source: Path | None = typer.Option(
        None,
        "--source",
        help="Project checkout to install from. Defaults to the checkout this tool runs from.",
        show_default=False,
    ),
    skip_deps: bool = typer.Option(False, "--skip-deps", help="Copy files only, do not pip install"),
) -> None:
    """Install the skill into the Claude Code skills directory."""

    settings = _settings()
    with command_context("install"):
        try:
            install_skill(
                source.expanduser() if source else None,
                target.expanduser(),
                install_deps=not skip_deps,
                has_api_key=settings.has_api_key,
            )
        except GrokSearchError as e:
            raise _fail(f"Installation failed: {e}") from e


async def _run_smoke(settings: Settings, query: str) -> int:
    client = build_client(settings)
    try:
        if query:
            await run_single_query(client, query, model=settings.model)
            return 0
        report = await run_suite(client, model=settings.model)
        return 1 if report.failed else 0
    finally:
        await client.aclose()


@app.command()
def smoke(
    query: list[str] | None = typer.Argument(
        None,
        help="Custom query to test. Runs the predefined suite when omitted.",
        show_default=False,
    ),
) -> None:
    """Run live queries against the xAI API to sanity-check the setup."""

    settings = _settings()
    if not settings.has_api_key:
        raise _fail(MISSING_API_KEY_MESSAGE)

    with command_context("smoke"):
        try:
            code = asyncio.run(_run_smoke(settings, " ".join(query or [])))
        except RequestError as e:
            raise typer.Exit(code=1) from e
        except GrokSearchError as e:
            raise _fail(f"Test suite failed with error: {e}") from e
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
