"""Models for the live smoke suite."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SmokeCase(BaseModel):
    """A fixed query run against the live API."""

    name: str
    query: str
    expected_sources: bool = True


class CaseOutcome(BaseModel):
    """Result of running one smoke case."""

    model_config = ConfigDict(frozen=True)

    name: str
    query: str
    passed: bool
    duration_s: float
    text_length: int = 0
    sources_count: int = 0
    issues: list[str] = Field(default_factory=list)
    error: str | None = None


class SmokeReport(BaseModel):
    """Accumulated results. Each step returns a new report."""

    model_config = ConfigDict(frozen=True)

    total: int
    details: tuple[CaseOutcome, ...] = ()

    @property
    def passed(self) -> int:
        return sum(1 for d in self.details if d.passed)

    @property
    def failed(self) -> int:
        return sum(1 for d in self.details if not d.passed)

    def with_outcome(self, outcome: CaseOutcome) -> SmokeReport:
        return self.model_copy(update={"details": (*self.details, outcome)})

    def percent(self, count: int) -> float:
        if self.total == 0:
            return 0.0
        return count / self.total * 100
