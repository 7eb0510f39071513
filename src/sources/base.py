"""Base class for source fetchers."""

from __future__ import annotations

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from calendar import timegm
from collections.abc import Callable

import feedparser

from headliner.errors import FetchError
from headliner.filters import KeywordFilter
from headliner.models import Item, SourceKind

logger = logging.getLogger(__name__)

Strategy = Callable[[], list[Item]]


class SourceFetcher(ABC):
    """Base class for source-specific fetchers.

    Each source implements ``strategies()`` (an ordered list of ways to
    retrieve its items) plus the identity properties. ``fetch()`` walks
    the strategies until one yields items. Transport and parse failures
    never escape ``fetch()``; only ``ConfigurationError`` from
    ``validate()`` does.
    """

    def __init__(
        self,
        *,
        keyword_filter: KeywordFilter,
        quota: int,
        max_age_hours: int | None = None,
        timeout: int = 15,
    ) -> None:
        self._filter = keyword_filter
        self._quota = quota
        self._max_age_hours = max_age_hours
        self._timeout = timeout

    @property
    @abstractmethod
    def kind(self) -> SourceKind:
        """The source kind this fetcher handles."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Origin tag stamped on every item (``Item.source_name``)."""

    @property
    def quota(self) -> int:
        """How many items this source may contribute before backfill."""
        return self._quota

    @property
    def is_configured(self) -> bool:
        return True

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if this source cannot run."""

    @abstractmethod
    def strategies(self) -> list[tuple[str, Strategy]]:
        """Ordered ``(label, callable)`` pairs tried by ``fetch()``."""

    def fetch(self) -> list[Item]:
        """Retrieve admitted items from this source.

        Returns:
            Items in the source's own order, or ``[]`` if every strategy
            failed or came back empty.

        Raises:
            ConfigurationError: If the source is misconfigured.
        """
        self.validate()

        for label, strategy in self.strategies():
            try:
                items = strategy()
            except FetchError as exc:
                logger.warning("%s: %s strategy failed: %s", self.name, label, exc)
                continue
            except Exception:
                logger.warning(
                    "%s: %s strategy raised unexpectedly", self.name, label, exc_info=True
                )
                continue
            if items:
                logger.info("%s: %d items via %s", self.name, len(items), label)
                return items
            logger.info("%s: %s strategy returned no items", self.name, label)

        logger.warning("%s: all strategies exhausted, contributing no items", self.name)
        return []

    # ------------------------------------------------------------------
    # Admission helpers shared by every source
    # ------------------------------------------------------------------

    def _is_blocked(self, title: str) -> bool:
        return self._filter.is_blocked(title)

    def _is_stale(self, created_at: int, *, now: float | None = None) -> bool:
        """Whether ``created_at`` falls outside the recency window.

        Items without a timestamp (``0``) are never stale.
        """
        if not self._max_age_hours or created_at <= 0:
            return False
        now = time.time() if now is None else now
        return now - created_at > self._max_age_hours * 3600

    @staticmethod
    def _entry_timestamp(entry: feedparser.FeedParserDict) -> int:
        """Unix seconds of a feed entry's publish (or update) date, else 0."""
        for field in ("published_parsed", "updated_parsed"):
            time_struct = entry.get(field)
            if time_struct:
                try:
                    return int(timegm(time_struct))
                except (ValueError, OverflowError, TypeError):
                    continue
        return 0

    @staticmethod
    def _stable_id(prefix: str, key: str) -> str:
        """Short deterministic id for entries without a native one."""
        return f"{prefix}-{hashlib.sha256(key.encode()).hexdigest()[:16]}"

    def _admit(self, title: str, created_at: int) -> bool:
        if not title.strip():
            return False
        if self._is_blocked(title):
            return False
        if self._is_stale(created_at):
            logger.debug("%s: stale item dropped: %s", self.name, title)
            return False
        return True
