"""Subreddit fetcher: JSON listing first, RSS feed as fallback."""

from __future__ import annotations

import logging
import re
from typing import Any

import feedparser

from headliner.config import RedditSectionConfig
from headliner.errors import ConfigurationError, ParseError
from headliner.filters import KeywordFilter
from headliner.models import Item, SourceKind
from headliner.sources.base import SourceFetcher, Strategy
from headliner.sources.links import extract_external_url, is_internal_url
from headliner.sources.transport import fetch_feed, fetch_json

logger = logging.getLogger(__name__)

REDDIT_BASE_URL = "https://www.reddit.com"
REDDIT_JSON_URL = REDDIT_BASE_URL + "/r/{subreddit}/top.json?t=day&limit={limit}"
REDDIT_RSS_URL = REDDIT_BASE_URL + "/r/{subreddit}/top/.rss?t=day"
REDDIT_DOMAINS = ("reddit.com", "redd.it")

_POST_ID_RE = re.compile(r"comments/([a-z0-9]+)", re.IGNORECASE)


def extract_post_id(link: str) -> str:
    """Pull the base36 post id out of a comments permalink."""
    match = _POST_ID_RE.search(link)
    return match.group(1) if match else link


class RedditFetcher(SourceFetcher):
    """Top posts of the day from a single subreddit."""

    def __init__(
        self,
        subreddit: str,
        *,
        config: RedditSectionConfig,
        keyword_filter: KeywordFilter,
        timeout: int = 15,
    ) -> None:
        super().__init__(
            keyword_filter=keyword_filter,
            quota=config.quota,
            max_age_hours=config.max_age_hours,
            timeout=timeout,
        )
        self._subreddit = subreddit.strip().removeprefix("r/")
        self._config = config

    @property
    def kind(self) -> SourceKind:
        return SourceKind.REDDIT

    @property
    def name(self) -> str:
        return f"r/{self._subreddit}"

    @property
    def is_configured(self) -> bool:
        return self._config.enabled and bool(self._subreddit)

    def validate(self) -> None:
        if not re.fullmatch(r"[A-Za-z0-9_]+", self._subreddit):
            raise ConfigurationError(
                f"Invalid subreddit name: {self._subreddit!r}", source=self.name
            )

    def strategies(self) -> list[tuple[str, Strategy]]:
        return [("json", self._fetch_listing), ("rss", self._fetch_rss)]

    # ------------------------------------------------------------------
    # JSON listing
    # ------------------------------------------------------------------

    def _fetch_listing(self) -> list[Item]:
        url = REDDIT_JSON_URL.format(subreddit=self._subreddit, limit=self._config.limit)
        payload = fetch_json(url, timeout=self._timeout, source=self.name)
        try:
            children = payload["data"]["children"]
        except (KeyError, TypeError) as exc:
            raise ParseError(f"Unexpected listing shape from {url}", source=self.name) from exc
        if not isinstance(children, list):
            raise ParseError(f"Unexpected listing shape from {url}", source=self.name)

        items: list[Item] = []
        for rank, child in enumerate(children[: self._config.limit], start=1):
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict):
                continue
            item = self._post_to_item(post, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _post_to_item(self, post: dict[str, Any], *, rank: int) -> Item | None:
        """Convert a listing child's ``data`` dict to an Item, or None if rejected."""
        if post.get("stickied"):
            return None

        title = str(post.get("title") or "")
        created_at = int(post.get("created_utc") or 0)
        if not self._admit(title, created_at):
            return None

        permalink = REDDIT_BASE_URL + str(post.get("permalink") or "")
        url = str(post.get("url") or "")
        internal = bool(post.get("is_self")) or not url or is_internal_url(url, REDDIT_DOMAINS)
        if internal:
            if not self._config.allow_self_posts:
                return None
            url = permalink

        score = max(int(post.get("score") or 0), 0)
        if score < self._config.min_score:
            return None

        return Item(
            id=f"reddit-{post.get('id') or extract_post_id(permalink)}",
            title=title,
            source_name=self.name,
            kind=SourceKind.REDDIT,
            engagement_score=score,
            comment_count=max(int(post.get("num_comments") or 0), 0),
            url=url,
            created_at=created_at,
            permalink=permalink,
            source_rank=rank,
        )

    # ------------------------------------------------------------------
    # RSS fallback
    # ------------------------------------------------------------------

    def _fetch_rss(self) -> list[Item]:
        url = REDDIT_RSS_URL.format(subreddit=self._subreddit)
        feed = fetch_feed(url, timeout=self._timeout, source=self.name)

        items: list[Item] = []
        for rank, entry in enumerate(feed.entries[: self._config.limit], start=1):
            item = self._entry_to_item(entry, rank=rank)
            if item is not None:
                items.append(item)
        return items

    def _entry_to_item(self, entry: feedparser.FeedParserDict, *, rank: int) -> Item | None:
        """Convert a feed entry to an Item. The feed has no score or comment data."""
        title = entry.get("title", "")
        created_at = self._entry_timestamp(entry)
        if not self._admit(title, created_at):
            return None

        link = entry.get("link", "")
        url = extract_external_url(_entry_body(entry), internal_domains=REDDIT_DOMAINS)
        if url is None:
            if not self._config.allow_self_posts:
                return None
            url = link

        return Item(
            id=f"reddit-{extract_post_id(link)}",
            title=title,
            source_name=self.name,
            kind=SourceKind.REDDIT,
            engagement_score=self._config.rss_engagement,
            comment_count=0,
            url=url,
            created_at=created_at,
            permalink=link,
            source_rank=rank,
        )


def _entry_body(entry: feedparser.FeedParserDict) -> str:
    """Raw HTML body of a feed entry (content block, else summary)."""
    content_list = entry.get("content", [])
    if content_list:
        return content_list[0].get("value", "")
    return entry.get("summary", "")
