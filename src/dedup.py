"""Topic and URL deduplication."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from headliner.models import Item
from headliner.topics import normalize_title, same_topic

logger = logging.getLogger(__name__)


def dedupe_items(
    items: list[Item],
    *,
    secondary_key: Callable[[Item], Any] | None = None,
) -> list[Item]:
    """Collapse items to one representative per topic and per URL.

    Items are visited trending first, then by ascending ``source_rank``,
    then by ``secondary_key`` (input order when omitted). An exact URL
    repeat is skipped. A topic repeat is dropped, except that a trending
    newcomer replaces a non-trending representative, so the kept item
    for a topic is trending whenever any candidate was.

    Args:
        items: Candidate items.
        secondary_key: Tie-break applied after trending status and
            source rank.

    Returns:
        Surviving representatives in the order they were kept.
    """
    def priority(indexed: tuple[int, Item]) -> tuple[Any, ...]:
        index, item = indexed
        tie = secondary_key(item) if secondary_key is not None else index
        return (not item.trending, item.source_rank, tie)

    ordered = [item for _, item in sorted(enumerate(items), key=priority)]

    kept: dict[str, Item] = {}  # signature -> representative
    seen_urls: set[str] = set()
    dropped = 0

    for item in ordered:
        if item.url in seen_urls:
            dropped += 1
            continue

        matches = [sig for sig in kept if same_topic(item.title, sig)]
        if not matches:
            kept[normalize_title(item.title)] = item
            seen_urls.add(item.url)
            continue

        # A trending item may bridge several kept topics; it only wins
        # when none of them is trending already.
        if item.trending and not any(kept[sig].trending for sig in matches):
            for sig in matches:
                existing = kept.pop(sig)
                seen_urls.discard(existing.url)
                logger.debug("Replaced %r with trending %r", existing.title, item.title)
                dropped += 1
            kept[normalize_title(item.title)] = item
            seen_urls.add(item.url)
            continue
        dropped += 1

    logger.debug(
        "Deduplicated %d items down to %d (%d dropped)", len(items), len(kept), dropped
    )
    return list(kept.values())
