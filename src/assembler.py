"""Aggregation cycle: fetch every source, balance, rank, dedupe, backfill.

One call to ``Aggregator.assemble()`` is one fetch cycle:

1. Run every fetcher concurrently and wait for all of them.
2. Sort each source's items by weighted engagement.
3. Take each source's quota slice from the front.
4. Flag cross-source trending topics over the merged slices.
5. Order: trending first, larger trending count first, then engagement.
6. Deduplicate by topic and URL.
7. Truncate to the target count.
8. Backfill from everything fetched when short of the target.

Failures stay local to their source. A cycle where every source fails
returns an empty list rather than raising.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, Field

from headliner.config import HeadlinerConfig, load_config
from headliner.dedup import dedupe_items
from headliner.errors import AggregationReport, ConfigurationError
from headliner.models import Item
from headliner.sources import SourceFetcher, get_configured_fetchers
from headliner.topics import same_topic
from headliner.trending import detect_trending

logger = logging.getLogger(__name__)

DEFAULT_TARGET_COUNT = 25


class AggregationResult(BaseModel):
    """Outcome of one aggregation cycle."""

    items: list[Item] = Field(default_factory=list)
    report: AggregationReport = Field(default_factory=AggregationReport)
    fetched_count: int = 0
    target_count: int = 0

    @property
    def is_short(self) -> bool:
        """True when fewer items than requested could be assembled."""
        return len(self.items) < self.target_count


def _ranking_key(item: Item) -> tuple[bool, int, int]:
    return (not item.trending, -(item.trending_count or 0), -item.weighted_score)


class Aggregator:
    """Builds one balanced, deduplicated list from many sources.

    Args:
        fetchers: Source fetchers to run. Each contributes at most its
            ``quota`` items before backfill.
        target_count: Desired result size.
        max_workers: Upper bound on concurrent fetches.
    """

    def __init__(
        self,
        fetchers: list[SourceFetcher],
        *,
        target_count: int = DEFAULT_TARGET_COUNT,
        max_workers: int = 8,
    ) -> None:
        if target_count < 0:
            raise ValueError(f"target_count must be >= 0, got {target_count}")
        self.fetchers = list(fetchers)
        self.target_count = target_count
        self.max_workers = max(1, max_workers)

        total_quota = sum(f.quota for f in self.fetchers)
        if self.fetchers and total_quota < target_count:
            logger.warning(
                "Source quotas sum to %d, below target %d; relying on backfill",
                total_quota,
                target_count,
            )

    @classmethod
    def from_config(cls, config: HeadlinerConfig) -> Aggregator:
        return cls(
            get_configured_fetchers(config),
            target_count=config.aggregator.target_count,
            max_workers=config.aggregator.max_workers,
        )

    # ------------------------------------------------------------------
    # PUBLIC ENTRY POINT
    # ------------------------------------------------------------------

    def assemble(self) -> AggregationResult:
        """Run one fetch cycle.

        Returns:
            ``AggregationResult`` whose ``items`` hold
            ``min(target_count, unique admissible items)`` entries.
        """
        report = AggregationReport()
        per_source = self._fetch_all(report)

        pool: list[Item] = []
        sliced: list[Item] = []
        for fetcher, items in per_source:
            ranked = sorted(items, key=lambda i: i.weighted_score, reverse=True)
            pool.extend(ranked)
            sliced.extend(ranked[: fetcher.quota])

        logger.info(
            "Fetched %d items from %d sources; %d in quota slices",
            len(pool),
            len(per_source),
            len(sliced),
        )

        ordered = sorted(detect_trending(sliced), key=_ranking_key)
        position = {item.id: n for n, item in enumerate(ordered)}
        unique = dedupe_items(ordered, secondary_key=lambda i: position[i.id])
        selected = unique[: self.target_count]

        if len(selected) < self.target_count:
            selected = self._backfill(selected, pool)

        logger.info("Assembled %d/%d items", len(selected), self.target_count)
        return AggregationResult(
            items=selected,
            report=report,
            fetched_count=len(pool),
            target_count=self.target_count,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _fetch_all(
        self, report: AggregationReport
    ) -> list[tuple[SourceFetcher, list[Item]]]:
        """Fan out to every fetcher and join on all of them.

        Results come back in fetcher order, independent of completion
        order. A fetcher that raises contributes an empty list.
        """
        if not self.fetchers:
            return []

        workers = min(self.max_workers, len(self.fetchers))
        results: list[tuple[SourceFetcher, list[Item]]] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(f, executor.submit(f.fetch)) for f in self.fetchers]
            for fetcher, future in futures:
                try:
                    items = future.result()
                except ConfigurationError as exc:
                    logger.error("Skipping %s: %s", fetcher.name, exc)
                    report.add_error(fetcher.name, str(exc), error_type="configuration")
                    items = []
                except Exception as exc:
                    logger.warning("Fetcher %s crashed", fetcher.name, exc_info=True)
                    report.add_error(fetcher.name, str(exc), error_type="fetch_error")
                    items = []
                else:
                    if not items:
                        report.add_error(
                            fetcher.name, "no items retrieved", error_type="empty"
                        )
                report.record_count(fetcher.name, len(items))
                results.append((fetcher, items))
        return results

    def _backfill(self, selected: list[Item], pool: list[Item]) -> list[Item]:
        """Top up ``selected`` from the full pool until the target is reached."""
        result = list(selected)
        kept_ids = {i.id for i in result}
        kept_urls = {i.url for i in result}

        candidates = sorted(
            (i for i in pool if i.id not in kept_ids),
            key=lambda i: i.weighted_score,
            reverse=True,
        )
        added = 0
        for item in candidates:
            if len(result) >= self.target_count:
                break
            if item.id in kept_ids or item.url in kept_urls:
                continue
            if any(same_topic(item.title, k.title) for k in result):
                continue
            result.append(item)
            kept_ids.add(item.id)
            kept_urls.add(item.url)
            added += 1

        logger.info("Backfilled %d items from a pool of %d", added, len(candidates))
        return result


def aggregate(config: HeadlinerConfig | None = None) -> AggregationResult:
    """Run one aggregation cycle with the given (or loaded) config."""
    if config is None:
        config = load_config()
    return Aggregator.from_config(config).assemble()


def fetch_aggregated_items(config: HeadlinerConfig | None = None) -> list[Item]:
    """Fetch, balance and deduplicate items from every configured source.

    This is the single entry point for consumers such as the storage
    layer. A short or empty list is a valid result, not an error.
    """
    return aggregate(config).items
