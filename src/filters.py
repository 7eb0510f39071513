"""Keyword blocklist filtering for headlines."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class KeywordFilter:
    """Rejects titles containing any blocklisted keyword.

    Matching is a case-insensitive substring test, so ``"nft"`` also
    blocks ``"NFTs"``. The blocklist maps a category name to its
    literal keywords; categories only matter for logging.
    """

    def __init__(self, blocklist: Mapping[str, Sequence[str]]) -> None:
        self._blocklist: dict[str, tuple[str, ...]] = {
            category: tuple(k.lower() for k in keywords if k)
            for category, keywords in blocklist.items()
        }

    @property
    def categories(self) -> list[str]:
        return list(self._blocklist)

    def blocked_category(self, title: str) -> str | None:
        """Return the first category with a keyword in ``title``."""
        lowered = title.lower()
        for category, keywords in self._blocklist.items():
            for keyword in keywords:
                if keyword in lowered:
                    return category
        return None

    def is_blocked(self, title: str) -> bool:
        category = self.blocked_category(title)
        if category is not None:
            logger.debug("Blocked (%s): %s", category, title)
            return True
        return False
