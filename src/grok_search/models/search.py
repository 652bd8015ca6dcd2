"""Search-related models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from grok_search.config import DEFAULT_MODEL


class SourceRef(BaseModel):
    """A citation the model attributed its answer to."""

    source_type: str = "url"
    url: str | None = None
    title: str | None = None

    @property
    def is_url(self) -> bool:
        return self.source_type == "url" and bool(self.url)


class SearchRequest(BaseModel):
    """A single web-search-augmented question."""

    query: str = Field(min_length=1)
    model: str = DEFAULT_MODEL
    api_key: str = Field(min_length=1, repr=False)


class SearchResult(BaseModel):
    """Answer text plus the sources the model cited, in the order given."""

    answer: str = ""
    sources: list[SourceRef] = Field(default_factory=list)

    def url_sources(self) -> list[SourceRef]:
        """Sources that are rendered (url-typed, with a url)."""

        return [s for s in self.sources if s.is_url]
