"""Source fetchers: fan-out to every feed, fan-in to canonical Item model."""

from __future__ import annotations

from headliner.config import HeadlinerConfig
from headliner.filters import KeywordFilter
from headliner.sources.base import SourceFetcher


def create_fetchers(
    config: HeadlinerConfig,
    *,
    keyword_filter: KeywordFilter | None = None,
) -> list[SourceFetcher]:
    """Build one fetcher per configured source.

    Reddit contributes one fetcher per subreddit; every publication
    entry becomes its own fetcher. Caller should check
    ``fetcher.is_configured`` before calling ``fetch()``.

    Args:
        config: Full headliner configuration.
        keyword_filter: Shared blocklist filter. Built from
            ``config.blocklist`` when omitted.

    Returns:
        Fetchers in a stable order: subreddits, Hacker News,
        publications, search.
    """
    from headliner.sources.feeds import PublicationFeedFetcher
    from headliner.sources.hackernews import HackerNewsFetcher
    from headliner.sources.reddit import RedditFetcher
    from headliner.sources.search import SearchFeedFetcher

    kf = keyword_filter or KeywordFilter(config.blocklist)
    timeout = config.aggregator.timeout

    fetchers: list[SourceFetcher] = []
    seen_subreddits: set[str] = set()
    for subreddit in config.reddit.subreddits:
        key = subreddit.strip().removeprefix("r/").lower()
        if not key or key in seen_subreddits:
            continue
        seen_subreddits.add(key)
        fetchers.append(
            RedditFetcher(
                subreddit, config=config.reddit, keyword_filter=kf, timeout=timeout
            )
        )

    fetchers.append(
        HackerNewsFetcher(config=config.hackernews, keyword_filter=kf, timeout=timeout)
    )
    for publication in config.publications:
        fetchers.append(
            PublicationFeedFetcher(config=publication, keyword_filter=kf, timeout=timeout)
        )
    fetchers.append(
        SearchFeedFetcher(config=config.search, keyword_filter=kf, timeout=timeout)
    )
    return fetchers


def get_configured_fetchers(
    config: HeadlinerConfig,
    *,
    keyword_filter: KeywordFilter | None = None,
) -> list[SourceFetcher]:
    """Return all fetchers whose source is enabled."""
    return [
        f
        for f in create_fetchers(config, keyword_filter=keyword_filter)
        if f.is_configured
    ]


__all__ = ["SourceFetcher", "create_fetchers", "get_configured_fetchers"]
