"""Google News search feed fetcher."""

from __future__ import annotations

import logging
from urllib.parse import quote_plus

import feedparser

from headliner.config import SearchSectionConfig
from headliner.errors import ConfigurationError
from headliner.filters import KeywordFilter
from headliner.models import Item, SourceKind
from headliner.sources.base import SourceFetcher, Strategy
from headliner.sources.transport import fetch_feed

logger = logging.getLogger(__name__)

GOOGLE_NEWS_SEARCH_URL = (
    "https://news.google.com/rss/search?q={query}&hl={language}&gl={country}&ceid={country}:{lang}"
)


def strip_publisher_suffix(title: str, publisher: str = "") -> str:
    """Drop the trailing `` - Publisher`` Google News appends to headlines."""
    title = title.strip()
    if publisher and title.endswith(f" - {publisher}"):
        return title[: -len(f" - {publisher}")].rstrip()
    if not publisher and " - " in title:
        head, _, tail = title.rpartition(" - ")
        # Only a short tail looks like a publisher name
        if head and len(tail.split()) <= 4:
            return head.rstrip()
    return title


class SearchFeedFetcher(SourceFetcher):
    """Headlines matching a Google News search query."""

    def __init__(
        self,
        *,
        config: SearchSectionConfig,
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
        return SourceKind.SEARCH

    @property
    def name(self) -> str:
        return "google-news"

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def feed_url(self) -> str:
        language = self._config.language
        return GOOGLE_NEWS_SEARCH_URL.format(
            query=quote_plus(self._config.query.strip()),
            language=language,
            country=self._config.country,
            lang=language.split("-")[0],
        )

    def validate(self) -> None:
        if not self._config.query.strip():
            raise ConfigurationError(
                "Search source is enabled but no query is configured",
                source=self.name,
            )

    def strategies(self) -> list[tuple[str, Strategy]]:
        return [("rss", self._fetch_feed)]

    def _fetch_feed(self) -> list[Item]:
        feed = fetch_feed(self.feed_url, timeout=self._timeout, source=self.name)
        items: list[Item] = []
        for rank, entry in enumerate(feed.entries[: self._config.limit], start=1):
            item = self._entry_to_item(entry, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _entry_to_item(self, entry: feedparser.FeedParserDict, *, rank: int) -> Item | None:
        link = entry.get("link", "")
        if not link:
            return None
        publisher = ""
        source = entry.get("source")
        if source:
            publisher = source.get("title", "")
        title = strip_publisher_suffix(entry.get("title", ""), publisher)
        created_at = self._entry_timestamp(entry)
        if not self._admit(title, created_at):
            return None

        return Item(
            id=self._stable_id("gnews", entry.get("id", "") or link),
            title=title,
            source_name=self.name,
            kind=SourceKind.SEARCH,
            engagement_score=self._config.rss_engagement,
            comment_count=0,
            url=link,
            created_at=created_at,
            permalink=link,
            source_rank=rank,
        )
