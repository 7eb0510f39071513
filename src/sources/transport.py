"""HTTP transport shared by all source fetchers.

Every request carries the same browser-like header set; some sources
reject the default urllib user agent outright.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

import feedparser

from headliner.errors import ParseError, TransportError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
ACCEPT_FEED = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"
ACCEPT_JSON = "application/json, text/plain, */*"
DEFAULT_TIMEOUT = 15


def request_headers(accept: str) -> dict[str, str]:
    return {"User-Agent": USER_AGENT, "Accept": accept}


def fetch_bytes(
    url: str,
    *,
    accept: str = ACCEPT_FEED,
    timeout: int = DEFAULT_TIMEOUT,
    source: str = "",
) -> bytes:
    """GET ``url`` and return the raw body.

    Raises:
        TransportError: On network errors, timeouts or a non-2xx status.
    """
    req = urllib.request.Request(url, headers=request_headers(accept))
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if status is not None and not 200 <= status < 300:
                raise TransportError(
                    f"Status code {status} for {url}", source=source, status=status
                )
            return resp.read()
    except urllib.error.HTTPError as exc:
        raise TransportError(
            f"Status code {exc.code} for {url}", source=source, status=exc.code
        ) from exc
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        raise TransportError(f"Request failed for {url}: {exc}", source=source) from exc


def fetch_json(
    url: str, *, timeout: int = DEFAULT_TIMEOUT, source: str = ""
) -> Any:
    """GET ``url`` and decode the JSON body.

    Raises:
        TransportError: See ``fetch_bytes``.
        ParseError: If the body is not valid JSON.
    """
    body = fetch_bytes(url, accept=ACCEPT_JSON, timeout=timeout, source=source)
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError(f"Invalid JSON from {url}: {exc}", source=source) from exc


def fetch_feed(
    url: str, *, timeout: int = DEFAULT_TIMEOUT, source: str = ""
) -> feedparser.FeedParserDict:
    """GET ``url`` and parse it as an RSS/Atom feed.

    A feed with parse errors is still accepted when it yielded entries.

    Raises:
        TransportError: See ``fetch_bytes``.
        ParseError: If the body could not be parsed into any entries.
    """
    body = fetch_bytes(url, accept=ACCEPT_FEED, timeout=timeout, source=source)
    feed = feedparser.parse(body)
    if feed.bozo and not feed.entries:
        raise ParseError(
            f"Feed error for {url}: {feed.get('bozo_exception')}", source=source
        )
    if feed.bozo:
        logger.debug("Feed %s parsed with warnings: %s", url, feed.get("bozo_exception"))
    return feed
