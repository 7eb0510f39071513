"""Unified configuration loaded from .headliner.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".headliner.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "headliner" / "config.toml"

DEFAULT_SUBREDDITS: list[str] = [
    "technology",
    "programming",
    "technews",
    "MachineLearning",
    "artificial",
    "netsec",
    "futurology",
    "cybersecurity",
    "gadgets",
]

DEFAULT_BLOCKLIST: dict[str, list[str]] = {
    "politics": [
        "trump",
        "biden",
        "kamala",
        "presidential",
        "republican",
        "democrats",
        "congress",
        "senator",
        "white house",
        "midterm",
    ],
    "crypto": [
        "bitcoin",
        "cryptocurrency",
        "crypto market",
        "crypto exchange",
        "ethereum",
        "dogecoin",
        "memecoin",
        "nfts",
        "nft collection",
        "web3",
    ],
    "celebrity": [
        "kardashian",
        "taylor swift",
        "celebrity",
        "royal family",
        "red carpet",
        "influencer",
    ],
}


class AggregatorSectionConfig(BaseModel):
    """[aggregator] section."""

    target_count: int = 25
    max_workers: int = 8
    timeout: int = 15


class RedditSectionConfig(BaseModel):
    """[reddit] section. One fetcher is built per subreddit."""

    enabled: bool = True
    subreddits: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBREDDITS))
    quota: int = 6
    limit: int = 25
    min_score: int = 20
    max_age_hours: int = 36
    rss_engagement: int = 0
    allow_self_posts: bool = False

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.subreddits)


class HackerNewsSectionConfig(BaseModel):
    """[hackernews] section."""

    enabled: bool = True
    quota: int = 6
    limit: int = 30
    min_points: int = 50
    max_age_hours: int = 48

    @property
    def is_configured(self) -> bool:
        return self.enabled


class PublicationConfig(BaseModel):
    """A single publication feed (an entry of [[publications]])."""

    name: str
    url: str = ""
    enabled: bool = True
    quota: int = 4
    limit: int = 20
    max_age_hours: int = 48
    rss_engagement: int = 10

    @property
    def is_configured(self) -> bool:
        return self.enabled


class SearchSectionConfig(BaseModel):
    """[search] section: Google News search feed."""

    enabled: bool = True
    query: str = "technology OR AI OR software"
    quota: int = 4
    limit: int = 20
    max_age_hours: int = 24
    rss_engagement: int = 5
    language: str = "en-US"
    country: str = "US"

    @property
    def is_configured(self) -> bool:
        return self.enabled


def _default_publications() -> list[PublicationConfig]:
    return [
        PublicationConfig(name="techcrunch", url="https://techcrunch.com/feed/"),
        PublicationConfig(
            name="theverge", url="https://www.theverge.com/rss/index.xml"
        ),
    ]


class HeadlinerConfig(BaseModel):
    """Top-level configuration model for the aggregation engine."""

    aggregator: AggregatorSectionConfig = Field(
        default_factory=AggregatorSectionConfig
    )
    reddit: RedditSectionConfig = Field(default_factory=RedditSectionConfig)
    hackernews: HackerNewsSectionConfig = Field(
        default_factory=HackerNewsSectionConfig
    )
    publications: list[PublicationConfig] = Field(
        default_factory=_default_publications
    )
    search: SearchSectionConfig = Field(default_factory=SearchSectionConfig)
    blocklist: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BLOCKLIST.items()}
    )

    @property
    def total_quota(self) -> int:
        """Sum of every enabled source's quota slice."""
        total = 0
        if self.reddit.is_configured:
            total += self.reddit.quota * len(self.reddit.subreddits)
        if self.hackernews.is_configured:
            total += self.hackernews.quota
        total += sum(p.quota for p in self.publications if p.is_configured)
        if self.search.is_configured:
            total += self.search.quota
        return total


def load_config(path: str | Path | None = None) -> HeadlinerConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .headliner.toml in CWD
    3. ~/.config/headliner/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged HeadlinerConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = HeadlinerConfig.model_validate(data) if data else HeadlinerConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: HeadlinerConfig, **cli_kwargs: object) -> HeadlinerConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "target_count": ("aggregator", "target_count"),
        "timeout": ("aggregator", "timeout"),
        "max_workers": ("aggregator", "max_workers"),
        "search_query": ("search", "query"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return HeadlinerConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: HeadlinerConfig) -> HeadlinerConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    int_mapping: dict[str, tuple[str, str]] = {
        "HEADLINER_TARGET_COUNT": ("aggregator", "target_count"),
        "HEADLINER_TIMEOUT": ("aggregator", "timeout"),
        "HEADLINER_MAX_WORKERS": ("aggregator", "max_workers"),
    }
    for env_var, (section, field) in int_mapping.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        try:
            data[section][field] = int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r", env_var, raw)

    subs_raw = os.environ.get("HEADLINER_SUBREDDITS")
    if subs_raw is not None:
        data["reddit"]["subreddits"] = [
            s.strip() for s in subs_raw.split(",") if s.strip()
        ]

    query = os.environ.get("HEADLINER_SEARCH_QUERY")
    if query is not None:
        data["search"]["query"] = query

    return HeadlinerConfig.model_validate(data)
