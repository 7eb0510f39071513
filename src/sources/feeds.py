"""Publication RSS/Atom feed fetcher (TechCrunch, The Verge, ...)."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import feedparser

from headliner.config import PublicationConfig
from headliner.errors import ConfigurationError
from headliner.filters import KeywordFilter
from headliner.models import Item, SourceKind
from headliner.sources.base import SourceFetcher, Strategy
from headliner.sources.transport import fetch_feed

logger = logging.getLogger(__name__)


class PublicationFeedFetcher(SourceFetcher):
    """Latest articles of one publication feed.

    Feeds carry no popularity signal, so every item gets the configured
    constant engagement; ``slash:comments`` is used when present.
    """

    def __init__(
        self,
        *,
        config: PublicationConfig,
        keyword_filter: KeywordFilter,
        timeout: int = 15,
    ) -> None:
        super().__init__(
            keyword_filter=keyword_filter,
            quota=config.quota,
            max_age_hours=config.max_age_hours,
            timeout=timeout,
        )
        self._config = config

    @property
    def kind(self) -> SourceKind:
        return SourceKind.PUBLICATION

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    def validate(self) -> None:
        parsed = urlparse(self._config.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"Publication {self.name!r} has no usable feed url: {self._config.url!r}",
                source=self.name,
            )

    def strategies(self) -> list[tuple[str, Strategy]]:
        return [("rss", self._fetch_feed)]

    def _fetch_feed(self) -> list[Item]:
        feed = fetch_feed(self._config.url, timeout=self._timeout, source=self.name)
        items: list[Item] = []
        for rank, entry in enumerate(feed.entries[: self._config.limit], start=1):
            item = self._entry_to_item(entry, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _entry_to_item(self, entry: feedparser.FeedParserDict, *, rank: int) -> Item | None:
        title = entry.get("title", "").strip()
        link = entry.get("link", "")
        if not link:
            return None
        created_at = self._entry_timestamp(entry)
        if not self._admit(title, created_at):
            return None

        return Item(
            id=self._stable_id(self.name, entry.get("id", "") or link),
            title=title,
            source_name=self.name,
            kind=SourceKind.PUBLICATION,
            engagement_score=self._config.rss_engagement,
            comment_count=_comment_count(entry),
            url=link,
            created_at=created_at,
            permalink=entry.get("comments", "") or link,
            source_rank=rank,
        )


def _comment_count(entry: feedparser.FeedParserDict) -> int:
    """Comment count from the ``slash:comments`` extension, else 0."""
    raw = entry.get("slash_comments", "")
    try:
        return max(int(str(raw).strip()), 0)
    except ValueError:
        return 0
