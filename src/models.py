"""Pure data models for the aggregation pipeline.

All Pydantic models and enums live here. No I/O, no business logic.
Fetchers, the trending detector, the deduplicator and the assembler
import from this module; this module only imports from stdlib and
third-party packages.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Source enums
# ---------------------------------------------------------------------------


class SourceKind(StrEnum):
    """Supported source kinds. One fetcher implementation per kind."""

    REDDIT = "reddit"
    HACKERNEWS = "hackernews"
    PUBLICATION = "publication"
    SEARCH = "search"


# ---------------------------------------------------------------------------
# Core item model
# ---------------------------------------------------------------------------


class Item(BaseModel):
    """A single headline flowing through the pipeline.

    Created once by a source fetcher and never edited afterwards. The
    trending detector attaches ``trending``/``trending_count`` through
    ``mark_trending()``, which returns a copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    source_name: str
    kind: SourceKind
    engagement_score: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    url: str
    created_at: int = 0
    permalink: str = ""
    source_rank: int = Field(default=1, ge=1)
    trending: bool = False
    trending_count: int | None = None

    @model_validator(mode="after")
    def _check_trending(self) -> Item:
        if self.trending and (self.trending_count is None or self.trending_count < 2):
            raise ValueError("trending items need a trending_count of at least 2")
        if not self.trending and self.trending_count is not None:
            raise ValueError("trending_count is only set on trending items")
        return self

    @property
    def weighted_score(self) -> int:
        """Engagement with comments counted twice."""
        return self.engagement_score + self.comment_count * 2

    def mark_trending(self, count: int) -> Item:
        """Return a copy flagged as trending across ``count`` sources."""
        if count < 2:
            raise ValueError(f"trending count must be >= 2, got {count}")
        return self.model_copy(update={"trending": True, "trending_count": count})


# ---------------------------------------------------------------------------
# Topic grouping
# ---------------------------------------------------------------------------


class TopicGroup(BaseModel):
    """Items from distinct sources that report the same story."""

    key: str
    items: list[Item] = Field(default_factory=list)

    @property
    def representative_title(self) -> str:
        return self.items[0].title if self.items else ""

    @property
    def source_names(self) -> set[str]:
        return {item.source_name for item in self.items}

    @property
    def size(self) -> int:
        return len(self.items)
