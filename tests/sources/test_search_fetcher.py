"""Tests for the Google News search fetcher."""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

import feedparser
import pytest

from headliner.config import SearchSectionConfig
from headliner.errors import ConfigurationError
from headliner.filters import KeywordFilter
from headliner.models import SourceKind
from headliner.sources.search import SearchFeedFetcher, strip_publisher_suffix


def _fetcher(**overrides) -> SearchFeedFetcher:
    return SearchFeedFetcher(
        config=SearchSectionConfig(**overrides),
        keyword_filter=KeywordFilter({}),
    )


class TestStripPublisherSuffix:
    def test_known_publisher(self):
        assert strip_publisher_suffix("Chip shortage eases - Reuters", "Reuters") == "Chip shortage eases"

    def test_unknown_publisher_short_tail(self):
        assert strip_publisher_suffix("Chip shortage eases - The Verge") == "Chip shortage eases"

    def test_long_tail_kept(self):
        title = "Rust vs Go - a comparison of two very different languages"
        assert strip_publisher_suffix(title) == title

    def test_no_suffix(self):
        assert strip_publisher_suffix("  Plain headline  ") == "Plain headline"


class TestSearchFeedFetcher:
    def test_feed_url_encodes_query(self):
        url = _fetcher(query="open source AI").feed_url
        assert url.startswith("https://news.google.com/rss/search?q=open+source+AI")
        assert "hl=en-US" in url
        assert "gl=US" in url
        assert "ceid=US:en" in url

    def test_empty_query_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            _fetcher(query="   ").fetch()

    @patch("headliner.sources.search.fetch_feed")
    def test_entries_become_items(self, mock_feed: MagicMock):
        mock_feed.return_value = feedparser.FeedParserDict(
            entries=[
                feedparser.FeedParserDict(
                    title="Open model beats benchmark - Ars Technica",
                    link="https://news.google.com/rss/articles/abc",
                    id="abc",
                    source=feedparser.FeedParserDict(title="Ars Technica"),
                    published_parsed=time.gmtime(time.time() - 600),
                ),
                feedparser.FeedParserDict(title="Entry with no link"),
            ]
        )
        items = _fetcher(rss_engagement=5).fetch()

        assert len(items) == 1
        assert items[0].title == "Open model beats benchmark"
        assert items[0].kind == SourceKind.SEARCH
        assert items[0].source_name == "google-news"
        assert items[0].engagement_score == 5
        assert items[0].id.startswith("gnews-")
        mock_feed.assert_called_once()
