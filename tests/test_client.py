"""Tests for the xAI client adapter."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from grok_search.config import Settings
from grok_search.errors import ConfigurationError
from grok_search.llm.client import WEB_SEARCH_TOOL, XAIResponsesClient, build_client, parse_response


def _citation(url: str, title: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(type="url_citation", url=url, title=title, start_index=0, end_index=1)


def _message(*annotations: SimpleNamespace) -> SimpleNamespace:
    part = SimpleNamespace(type="output_text", text="...", annotations=list(annotations))
    return SimpleNamespace(type="message", content=[part])


def test_parse_response_collects_url_citations_in_order() -> None:
    """It should turn url_citation annotations into url sources, in order."""

    response = SimpleNamespace(
        output_text="Paris is the capital.",
        output=[
            SimpleNamespace(type="web_search_call"),
            _message(_citation("https://example.com/a", "A"), _citation("https://example.com/b")),
        ],
    )

    result = parse_response(response)
    assert result.answer == "Paris is the capital."
    assert [(s.source_type, s.url, s.title) for s in result.sources] == [
        ("url", "https://example.com/a", "A"),
        ("url", "https://example.com/b", None),
    ]


def test_parse_response_deduplicates_by_url() -> None:
    """It should keep the first occurrence of a repeated URL."""

    response = SimpleNamespace(
        output_text="x",
        output=[
            _message(_citation("https://a.test", "First"), _citation("https://b.test")),
            _message(_citation("https://a.test", "Second")),
        ],
    )

    result = parse_response(response)
    assert [s.url for s in result.sources] == ["https://a.test", "https://b.test"]
    assert result.sources[0].title == "First"


def test_parse_response_falls_back_to_citations_list() -> None:
    """It should use the top-level citations list when there are no annotations."""

    response = {
        "output_text": "answer",
        "output": [{"type": "message", "content": [{"type": "output_text", "annotations": []}]}],
        "citations": ["https://x.test/1", "https://x.test/2", "https://x.test/1"],
    }

    result = parse_response(response)
    assert [s.url for s in result.sources] == ["https://x.test/1", "https://x.test/2"]
    assert all(s.title is None for s in result.sources)


def test_parse_response_handles_empty_payload() -> None:
    """It should produce an empty answer and no sources."""

    result = parse_response(SimpleNamespace(output_text=None, output=None))
    assert result.answer == ""
    assert result.sources == []


def test_build_client_requires_api_key() -> None:
    """It should refuse to build a client without a key."""

    with pytest.raises(ConfigurationError, match="XAI_API_KEY"):
        build_client(Settings.from_environ({}))


def test_generate_sends_web_search_tool() -> None:
    """It should call the Responses API with the model, prompt and web search tool."""

    captured: dict = {}

    async def fake_create(**kwargs: object) -> SimpleNamespace:
        captured.update(kwargs)
        return SimpleNamespace(output_text="ok", output=[_message(_citation("https://s.test", "S"))])

    client = XAIResponsesClient(api_key="k", base_url="https://api.x.ai/v1")
    client._client = SimpleNamespace(responses=SimpleNamespace(create=fake_create))

    result = asyncio.run(client.generate("what's new?", model="grok-test"))

    assert captured == {"model": "grok-test", "input": "what's new?", "tools": [WEB_SEARCH_TOOL]}
    assert WEB_SEARCH_TOOL == {"type": "web_search", "enable_image_understanding": True}
    assert result.answer == "ok"
    assert result.sources[0].url == "https://s.test"
