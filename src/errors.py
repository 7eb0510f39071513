"""Error taxonomy and per-run error reporting.

Transport and parse failures are recovered inside each fetcher (the
source contributes zero items). Configuration errors escape the fetcher
and are recorded on the ``AggregationReport`` by the assembler, which
keeps going with the remaining sources.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class HeadlinerError(Exception):
    """Base error for the aggregation pipeline."""


class FetchError(HeadlinerError):
    """A single source could not be fetched or read."""

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class TransportError(FetchError):
    """Network failure, timeout or non-2xx HTTP status."""

    def __init__(
        self, message: str, *, source: str = "", status: int | None = None
    ) -> None:
        super().__init__(message, source=source)
        self.status = status


class ParseError(FetchError):
    """Malformed feed or API body."""


class ConfigurationError(HeadlinerError):
    """A source is enabled but cannot run with its current configuration."""

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class SourceError(BaseModel):
    """One recorded failure for a source during an aggregation run."""

    source: str
    message: str
    error_type: str = "error"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class AggregationReport(BaseModel):
    """Collects per-source outcomes of one aggregation run."""

    errors: list[SourceError] = Field(default_factory=list)
    source_counts: dict[str, int] = Field(default_factory=dict)

    def add_error(
        self, source: str, message: str, *, error_type: str = "error"
    ) -> None:
        self.errors.append(
            SourceError(source=source, message=message, error_type=error_type)
        )

    def record_count(self, source: str, count: int) -> None:
        self.source_counts[source] = count

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def failed_sources(self) -> list[str]:
        seen: list[str] = []
        for err in self.errors:
            if err.source not in seen:
                seen.append(err.source)
        return seen
