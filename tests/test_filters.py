"""Tests for the keyword blocklist filter."""

from __future__ import annotations

from headliner.config import DEFAULT_BLOCKLIST
from headliner.filters import KeywordFilter


class TestKeywordFilter:
    def test_blocks_matching_keyword(self):
        kf = KeywordFilter({"crypto": ["bitcoin"]})
        assert kf.is_blocked("Bitcoin hits new all-time high")

    def test_case_insensitive(self):
        kf = KeywordFilter({"crypto": ["BitCoin"]})
        assert kf.is_blocked("why BITCOIN miners are moving north")

    def test_substring_match(self):
        kf = KeywordFilter({"crypto": ["nft"]})
        assert kf.is_blocked("NFTs are back, apparently")

    def test_clean_title_passes(self):
        kf = KeywordFilter({"crypto": ["bitcoin"], "politics": ["senate"]})
        assert not kf.is_blocked("SQLite adds a new JSON function")

    def test_blocked_category(self):
        kf = KeywordFilter({"politics": ["senate"], "crypto": ["bitcoin"]})
        assert kf.blocked_category("Senate hearing on bitcoin") == "politics"
        assert kf.blocked_category("Bitcoin ETF approved") == "crypto"
        assert kf.blocked_category("Rust 1.80 released") is None

    def test_empty_blocklist_blocks_nothing(self):
        kf = KeywordFilter({})
        assert not kf.is_blocked("anything at all")
        assert kf.categories == []

    def test_empty_keywords_ignored(self):
        kf = KeywordFilter({"noise": [""]})
        assert not kf.is_blocked("Linux 6.10 released")

    def test_default_blocklist_categories(self):
        kf = KeywordFilter(DEFAULT_BLOCKLIST)
        assert set(kf.categories) == {"politics", "crypto", "celebrity"}
        assert kf.is_blocked("Bitcoin ETF sees record inflows")
        assert not kf.is_blocked("PostgreSQL 17 improves vacuum performance")
