"""Tests for external link extraction."""

from __future__ import annotations

from headliner.sources.links import extract_external_url, is_internal_url

REDDIT = ("reddit.com", "redd.it")


class TestIsInternalUrl:
    def test_subdomain_is_internal(self):
        assert is_internal_url("https://www.reddit.com/r/x", REDDIT)
        assert is_internal_url("https://i.redd.it/a.png", REDDIT)

    def test_external(self):
        assert not is_internal_url("https://example.com/reddit.com", REDDIT)
        assert not is_internal_url("https://notreddit.com/", REDDIT)

    def test_relative_is_internal(self):
        assert is_internal_url("/r/technology", REDDIT)


class TestExtractExternalUrl:
    def test_link_marker_preferred(self):
        body = (
            '<a href="https://other.example/first">first</a>'
            '<a href="https://example.com/story?a=1&amp;b=2"> [link] </a>'
        )
        assert extract_external_url(body, internal_domains=REDDIT) == "https://example.com/story?a=1&b=2"

    def test_first_external_href_fallback(self):
        body = (
            '<a href="https://www.reddit.com/user/x">/u/x</a>'
            '<a href="https://example.com/article">read</a>'
        )
        assert extract_external_url(body, internal_domains=REDDIT) == "https://example.com/article"

    def test_internal_link_marker_skipped(self):
        body = '<a href="https://www.reddit.com/gallery/abc">[link]</a>'
        assert extract_external_url(body, internal_domains=REDDIT) is None

    def test_non_http_hrefs_ignored(self):
        body = '<a href="mailto:me@example.com">mail</a><a href="#top">top</a>'
        assert extract_external_url(body, internal_domains=REDDIT) is None

    def test_empty_body(self):
        assert extract_external_url("", internal_domains=REDDIT) is None
