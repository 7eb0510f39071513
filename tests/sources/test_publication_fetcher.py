"""Tests for publication feed fetching."""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

import feedparser
import pytest

from headliner.config import PublicationConfig
from headliner.errors import ConfigurationError, ParseError
from headliner.filters import KeywordFilter
from headliner.models import SourceKind
from headliner.sources.feeds import PublicationFeedFetcher

NOW = int(time.time())


def _fetcher(**overrides) -> PublicationFeedFetcher:
    data = {"name": "techcrunch", "url": "https://techcrunch.com/feed/"}
    data.update(overrides)
    return PublicationFeedFetcher(
        config=PublicationConfig(**data),
        keyword_filter=KeywordFilter({"celebrity": ["kardashian"]}),
    )


def _entry(title: str, link: str, *, age: int = 600, **extra) -> feedparser.FeedParserDict:
    return feedparser.FeedParserDict(
        title=title,
        link=link,
        id=link,
        published_parsed=time.gmtime(NOW - age),
        **extra,
    )


class TestPublicationFeedFetcher:
    @patch("headliner.sources.feeds.fetch_feed")
    def test_entries_become_items(self, mock_feed: MagicMock):
        mock_feed.return_value = feedparser.FeedParserDict(
            entries=[
                _entry("Startup raises Series B for robotics", "https://techcrunch.com/a", slash_comments="12"),
                _entry("Chipmaker reports record revenue", "https://techcrunch.com/b"),
            ]
        )
        items = _fetcher(rss_engagement=10).fetch()

        assert [i.url for i in items] == ["https://techcrunch.com/a", "https://techcrunch.com/b"]
        assert items[0].kind == SourceKind.PUBLICATION
        assert items[0].source_name == "techcrunch"
        assert items[0].engagement_score == 10
        assert items[0].comment_count == 12
        assert items[1].comment_count == 0
        assert [i.source_rank for i in items] == [1, 2]
        assert items[0].id.startswith("techcrunch-")

    @patch("headliner.sources.feeds.fetch_feed")
    def test_stable_ids(self, mock_feed: MagicMock):
        mock_feed.return_value = feedparser.FeedParserDict(
            entries=[_entry("Same story twice", "https://techcrunch.com/same")]
        )
        assert _fetcher().fetch()[0].id == _fetcher().fetch()[0].id

    @patch("headliner.sources.feeds.fetch_feed")
    def test_drops_blocked_stale_and_linkless(self, mock_feed: MagicMock):
        mock_feed.return_value = feedparser.FeedParserDict(
            entries=[
                _entry("Kardashian launches a phone", "https://techcrunch.com/k"),
                _entry("Old news about compilers", "https://techcrunch.com/old", age=4 * 86400),
                feedparser.FeedParserDict(title="No link here"),
                _entry("", "https://techcrunch.com/untitled"),
                _entry("Fresh news about compilers", "https://techcrunch.com/fresh"),
            ]
        )
        items = _fetcher().fetch()
        assert [i.title for i in items] == ["Fresh news about compilers"]

    @patch("headliner.sources.feeds.fetch_feed")
    def test_parse_error_yields_nothing(self, mock_feed: MagicMock):
        mock_feed.side_effect = ParseError("not a feed")
        assert _fetcher().fetch() == []

    def test_missing_url_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            _fetcher(url="").fetch()

    def test_non_http_url_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            _fetcher(url="file:///etc/passwd").fetch()

    def test_limit_caps_entries(self):
        with patch("headliner.sources.feeds.fetch_feed") as mock_feed:
            mock_feed.return_value = feedparser.FeedParserDict(
                entries=[_entry(f"Story number {n} headline", f"https://techcrunch.com/{n}") for n in range(10)]
            )
            assert len(_fetcher(limit=3).fetch()) == 3
