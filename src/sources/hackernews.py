"""Hacker News front page fetcher."""

from __future__ import annotations

import logging
import re
from typing import Any

import feedparser

from headliner.config import HackerNewsSectionConfig
from headliner.errors import ParseError
from headliner.filters import KeywordFilter
from headliner.models import Item, SourceKind
from headliner.sources.base import SourceFetcher, Strategy
from headliner.sources.links import is_internal_url
from headliner.sources.transport import fetch_feed, fetch_json

logger = logging.getLogger(__name__)

HN_ALGOLIA_URL = "https://hn.algolia.com/api/v1/search?tags=front_page&hitsPerPage={limit}"
HN_RSS_URL = "https://hnrss.org/frontpage"
HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"
HN_DOMAINS = ("news.ycombinator.com",)

_POINTS_RE = re.compile(r"Points:\s*(\d+)", re.IGNORECASE)
_COMMENTS_RE = re.compile(r"#\s*Comments:\s*(\d+)", re.IGNORECASE)
_ITEM_ID_RE = re.compile(r"item\?id=(\d+)")


class HackerNewsFetcher(SourceFetcher):
    """Front-page stories with at least ``min_points`` points."""

    def __init__(
        self,
        *,
        config: HackerNewsSectionConfig,
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
        return SourceKind.HACKERNEWS

    @property
    def name(self) -> str:
        return "hackernews"

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    def strategies(self) -> list[tuple[str, Strategy]]:
        return [("algolia", self._fetch_algolia), ("rss", self._fetch_rss)]

    def _fetch_algolia(self) -> list[Item]:
        url = HN_ALGOLIA_URL.format(limit=self._config.limit)
        data = fetch_json(url, timeout=self._timeout, source=self.name)
        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            raise ParseError(f"Missing hits in response from {url}", source=self.name)

        items: list[Item] = []
        for rank, hit in enumerate(hits[: self._config.limit], start=1):
            if not isinstance(hit, dict):
                continue
            item = self._hit_to_item(hit, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _hit_to_item(self, hit: dict[str, Any], *, rank: int) -> Item | None:
        title = str(hit.get("title") or "")
        created_at = int(hit.get("created_at_i") or 0)
        if not self._admit(title, created_at):
            return None

        # Ask HN / Show HN text posts have no external url
        url = str(hit.get("url") or "")
        if not url or is_internal_url(url, HN_DOMAINS):
            return None

        points = max(int(hit.get("points") or 0), 0)
        if points < self._config.min_points:
            return None

        object_id = str(hit.get("objectID", ""))
        return Item(
            id=f"hn-{object_id}",
            title=title,
            source_name=self.name,
            kind=SourceKind.HACKERNEWS,
            engagement_score=points,
            comment_count=max(int(hit.get("num_comments") or 0), 0),
            url=url,
            created_at=created_at,
            permalink=HN_ITEM_URL.format(id=object_id),
            source_rank=rank,
        )

    def _fetch_rss(self) -> list[Item]:
        feed = fetch_feed(HN_RSS_URL, timeout=self._timeout, source=self.name)
        items: list[Item] = []
        for rank, entry in enumerate(feed.entries[: self._config.limit], start=1):
            item = self._entry_to_item(entry, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _entry_to_item(self, entry: feedparser.FeedParserDict, *, rank: int) -> Item | None:
        """hnrss entries link to the article; points live in the description."""
        title = entry.get("title", "")
        created_at = self._entry_timestamp(entry)
        if not self._admit(title, created_at):
            return None

        url = entry.get("link", "")
        if not url or is_internal_url(url, HN_DOMAINS):
            return None

        description = entry.get("summary", "")
        points = _first_int(_POINTS_RE, description)
        if points is not None and points < self._config.min_points:
            return None

        permalink = entry.get("comments", "") or entry.get("id", "")
        id_match = _ITEM_ID_RE.search(permalink)
        item_id = f"hn-{id_match.group(1)}" if id_match else self._stable_id("hn", url)

        return Item(
            id=item_id,
            title=title,
            source_name=self.name,
            kind=SourceKind.HACKERNEWS,
            engagement_score=points or 0,
            comment_count=_first_int(_COMMENTS_RE, description) or 0,
            url=url,
            created_at=created_at,
            permalink=permalink,
            source_rank=rank,
        )


def _first_int(pattern: re.Pattern[str], text: str) -> int | None:
    match = pattern.search(text or "")
    return int(match.group(1)) if match else None
