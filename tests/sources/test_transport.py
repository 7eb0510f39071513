"""Tests for the shared HTTP transport."""

from __future__ import annotations

import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from headliner.errors import ParseError, TransportError
from headliner.sources.transport import (
    ACCEPT_JSON,
    USER_AGENT,
    fetch_bytes,
    fetch_feed,
    fetch_json,
)

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Feed</title>
<item><title>First headline</title><link>https://example.com/1</link></item>
<item><title>Second headline</title><link>https://example.com/2</link></item>
</channel></rss>"""


def _response(body: bytes, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


class TestFetchBytes:
    @patch("urllib.request.urlopen")
    def test_sends_browser_headers(self, mock_open: MagicMock):
        mock_open.return_value = _response(b"ok")
        assert fetch_bytes("https://example.com", accept=ACCEPT_JSON, timeout=3) == b"ok"

        request = mock_open.call_args[0][0]
        assert request.get_header("User-agent") == USER_AGENT
        assert request.get_header("Accept") == ACCEPT_JSON
        assert mock_open.call_args[1]["timeout"] == 3

    @patch("urllib.request.urlopen")
    def test_http_error(self, mock_open: MagicMock):
        mock_open.side_effect = urllib.error.HTTPError(
            "https://example.com", 429, "Too Many Requests", {}, None
        )
        with pytest.raises(TransportError) as exc_info:
            fetch_bytes("https://example.com", source="r/technology")
        assert exc_info.value.status == 429
        assert exc_info.value.source == "r/technology"

    @patch("urllib.request.urlopen")
    def test_non_2xx_status(self, mock_open: MagicMock):
        mock_open.return_value = _response(b"", status=304)
        with pytest.raises(TransportError):
            fetch_bytes("https://example.com")

    @patch("urllib.request.urlopen")
    def test_network_error(self, mock_open: MagicMock):
        mock_open.side_effect = urllib.error.URLError("connection refused")
        with pytest.raises(TransportError):
            fetch_bytes("https://example.com")

    @patch("urllib.request.urlopen")
    def test_timeout(self, mock_open: MagicMock):
        mock_open.side_effect = TimeoutError("timed out")
        with pytest.raises(TransportError):
            fetch_bytes("https://example.com")


class TestFetchJson:
    @patch("urllib.request.urlopen")
    def test_decodes(self, mock_open: MagicMock):
        mock_open.return_value = _response(b'{"hits": []}')
        assert fetch_json("https://example.com") == {"hits": []}

    @patch("urllib.request.urlopen")
    def test_invalid_json(self, mock_open: MagicMock):
        mock_open.return_value = _response(b"<html>blocked</html>")
        with pytest.raises(ParseError):
            fetch_json("https://example.com")


class TestFetchFeed:
    @patch("urllib.request.urlopen")
    def test_parses_rss(self, mock_open: MagicMock):
        mock_open.return_value = _response(RSS)
        feed = fetch_feed("https://example.com/feed")
        assert [e.title for e in feed.entries] == ["First headline", "Second headline"]

    @patch("urllib.request.urlopen")
    def test_garbage_raises_parse_error(self, mock_open: MagicMock):
        mock_open.return_value = _response(b"<html><body><p>Access denied")
        with pytest.raises(ParseError):
            fetch_feed("https://example.com/feed")
