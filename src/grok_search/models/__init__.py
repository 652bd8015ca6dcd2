"""Pydantic models used across the project."""

from __future__ import annotations

from grok_search.models.search import SearchRequest, SearchResult, SourceRef
from grok_search.models.smoke import CaseOutcome, SmokeCase, SmokeReport

__all__ = [
    "CaseOutcome",
    "SearchRequest",
    "SearchResult",
    "SmokeCase",
    "SmokeReport",
    "SourceRef",
]
