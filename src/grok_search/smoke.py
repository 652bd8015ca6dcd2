"""Live smoke suite: a few real queries against the xAI API.

Runs the default cases sequentially with a pause between them to stay clear of rate limits,
or a single custom query.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Sequence

import typer

from grok_search.errors import RequestError
from grok_search.llm.client import SearchClient
from grok_search.logging import get_logger
from grok_search.models.smoke import CaseOutcome, SmokeCase, SmokeReport

logger = get_logger(__name__)

DEFAULT_DELAY_S = 2.0
RULE = "=" * 60

DEFAULT_CASES: tuple[SmokeCase, ...] = (
    SmokeCase(name="English current events", query="What happened in tech news today?"),
    SmokeCase(name="Chinese current events", query="今天有什么重要新闻？"),
    SmokeCase(name="Technology topic", query="What are the latest developments in AI?"),
    SmokeCase(name="Specific company", query="What is SpaceX doing recently?"),
)

Sleep = Callable[[float], Awaitable[None]]


async def run_case(
    client: SearchClient,
    case: SmokeCase,
    *,
    index: int,
    total: int,
    model: str,
    report: SmokeReport,
) -> SmokeReport:
    """Run one case and return `report` extended with its outcome."""

    typer.echo(f"\n📋 Test {index + 1}/{total}: {case.name}")
    typer.echo(f'Query: "{case.query}"')

    started = time.monotonic()
    try:
        result = await client.generate(case.query, model=model)
    except Exception as e:
        duration = round(time.monotonic() - started, 2)
        message = str(e) or type(e).__name__
        typer.echo(f"❌ FAILED ({duration:.2f}s)")
        typer.echo(f"   - Error: {message}")
        logger.debug("smoke case %r failed", case.name, exc_info=True)
        return report.with_outcome(
            CaseOutcome(name=case.name, query=case.query, passed=False, duration_s=duration, error=message)
        )

    duration = round(time.monotonic() - started, 2)
    sources_count = len(result.sources)

    issues: list[str] = []
    if not result.answer:
        issues.append("No text returned")
    if case.expected_sources and sources_count == 0:
        issues.append("Expected sources but got none")
    passed = not issues

    if passed:
        typer.echo(f"✅ PASSED ({duration:.2f}s)")
        typer.echo(f"   - Text length: {len(result.answer)} characters")
        typer.echo(f"   - Sources: {sources_count}")
    else:
        typer.echo(f"❌ FAILED ({duration:.2f}s)")
        for issue in issues:
            typer.echo(f"   - {issue}")

    if sources_count:
        typer.echo("   - Sample sources:")
        for i, source in enumerate(result.url_sources()[:3], start=1):
            typer.echo(f"     {i}. {source.url}")
        if sources_count > 3:
            typer.echo(f"     ... and {sources_count - 3} more")

    return report.with_outcome(
        CaseOutcome(
            name=case.name,
            query=case.query,
            passed=passed,
            duration_s=duration,
            text_length=len(result.answer),
            sources_count=sources_count,
            issues=issues,
        )
    )


def summarize(report: SmokeReport) -> list[str]:
    """Render the end-of-suite summary."""

    lines = [
        "",
        RULE,
        "",
        "📊 Test Summary",
        "",
        f"Total Tests: {report.total}",
        f"✅ Passed: {report.passed} ({report.percent(report.passed):.1f}%)",
        f"❌ Failed: {report.failed} ({report.percent(report.failed):.1f}%)",
    ]

    successful = [d for d in report.details if d.passed]
    if successful:
        avg_duration = sum(d.duration_s for d in successful) / len(successful)
        avg_sources = sum(d.sources_count for d in successful) / len(successful)
        lines += [
            "",
            "📈 Performance Metrics (successful tests):",
            f"   - Average duration: {avg_duration:.2f}s",
            f"   - Average sources: {avg_sources:.1f}",
        ]

    failures = [d for d in report.details if not d.passed]
    if failures:
        lines += ["", "❌ Failed Tests:"]
        for i, detail in enumerate(failures, start=1):
            lines += ["", f"{i}. {detail.name}", f'   Query: "{detail.query}"']
            if detail.error:
                lines.append(f"   Error: {detail.error}")
            lines += [f"   - {issue}" for issue in detail.issues]

    lines += ["", RULE]
    return lines


async def run_suite(
    client: SearchClient,
    cases: Sequence[SmokeCase] = DEFAULT_CASES,
    *,
    model: str,
    delay_s: float = DEFAULT_DELAY_S,
    sleep: Sleep = asyncio.sleep,
) -> SmokeReport:
    """Run `cases` one after another and print a summary.

    Returns:
        The final report; the caller decides the exit status from `report.failed`.
    """

    typer.echo("🧪 Grok WebSearch Skill - Test Suite\n")
    typer.echo(f"Model: {model}")
    typer.echo(f"Total Tests: {len(cases)}\n")
    typer.echo(RULE)

    report = SmokeReport(total=len(cases))
    for i, case in enumerate(cases):
        report = await run_case(client, case, index=i, total=len(cases), model=model, report=report)
        if i < len(cases) - 1:
            typer.echo(f"\n⏳ Waiting {delay_s:g} seconds before next test...")
            await sleep(delay_s)

    for line in summarize(report):
        typer.echo(line)
    return report


async def run_single_query(client: SearchClient, query: str, *, model: str) -> None:
    """Run one custom query and print a short digest of the answer.

    Raises:
        RequestError: The call failed.
    """

    typer.echo("🚀 Single Query Test\n")
    typer.echo(f"Model: {model}")
    typer.echo(f'Query: "{query}"\n')

    started = time.monotonic()
    try:
        result = await client.generate(query, model=model)
    except Exception as e:
        duration = time.monotonic() - started
        message = str(e) or type(e).__name__
        typer.echo(f"\n❌ Failed ({duration:.2f}s)", err=True)
        typer.echo(f"Error: {message}", err=True)
        raise RequestError(message) from e

    duration = time.monotonic() - started
    text = result.answer
    total_sources = len(result.sources)

    typer.echo(f"✅ Success ({duration:.2f}s)\n")
    typer.echo("📝 Answer:\n")
    typer.echo(text[:500] + ("...\n" if len(text) > 500 else "\n"))

    if total_sources:
        typer.echo(f"\n📚 Sources ({total_sources} total):\n")
        for i, source in enumerate(result.url_sources()[:5], start=1):
            typer.echo(f"{i}. {source.url}")
        if total_sources > 5:
            typer.echo(f"... and {total_sources - 5} more")
    else:
        typer.echo("\nℹ️  No sources returned")

    typer.echo(f"\n⏱️  Duration: {duration:.2f}s")
    typer.echo(f"📏 Text length: {len(text)} characters")
    typer.echo(f"📚 Sources: {total_sources}")
