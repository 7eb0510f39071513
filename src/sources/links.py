"""External article link extraction from feed entry bodies.

Some feeds (reddit's RSS in particular) only expose the discussion
thread as the entry link. The article itself is buried in the HTML
body, either behind a literal ``[link]`` anchor or as the first href
that leaves the site.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from urllib.parse import urlparse

_LINK_MARKER_RE = re.compile(
    r"<a\s[^>]*?href=[\"']([^\"']+)[\"'][^>]*>\s*\[link\]\s*</a>",
    re.IGNORECASE,
)
_HREF_RE = re.compile(r"href=[\"']([^\"']+)[\"']", re.IGNORECASE)


def is_internal_url(url: str, internal_domains: Iterable[str]) -> bool:
    """Whether ``url`` points at one of ``internal_domains`` (or a subdomain).

    Relative URLs count as internal.
    """
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return True
    for domain in internal_domains:
        domain = domain.lower()
        if host == domain or host.endswith("." + domain):
            return True
    return False


def extract_external_url(
    body: str, *, internal_domains: Iterable[str]
) -> str | None:
    """Find the external article URL in an entry's HTML body.

    Tries the ``[link]`` anchor first, then the first href outside
    ``internal_domains``. Returns None when neither heuristic finds an
    external URL.
    """
    if not body:
        return None
    domains = list(internal_domains)

    match = _LINK_MARKER_RE.search(body)
    if match:
        url = html.unescape(match.group(1)).strip()
        if url and not is_internal_url(url, domains):
            return url

    for href in _HREF_RE.findall(body):
        url = html.unescape(href).strip()
        if url.startswith(("http://", "https://")) and not is_internal_url(url, domains):
            return url

    return None
