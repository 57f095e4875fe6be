"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching and politeness settings
- SchedulerConfig: Harvest cycle cadence
- StorageConfig: Database connection settings
- LoggingConfig: Logging behavior
- SourceConfig: Declarative extraction rules for one external source
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml

from .core.types import ContentType
from .errors import ConfigError


DEFAULT_DATABASE_URL = "sqlite:///spotlight_harvest.db"


@dataclass
class FetchConfig:
    """Configuration for HTTP page fetching.

    Attributes:
        timeout_seconds: Per-request timeout, bounds a stalled source
        user_agent: Default HTTP User-Agent header string
        trust_env: Whether to respect system proxy settings
        delay_seconds: Minimum pause between two requests to one domain
        random_delay_seconds: Upper bound of extra random pause added to delay_seconds
    """

    timeout_seconds: float = 20.0
    user_agent: str = "Mozilla/5.0 (compatible; SpotlightAfrica/1.0; +https://spotlightafrica.com)"
    trust_env: bool = True
    delay_seconds: float = 3.0
    random_delay_seconds: float = 2.0


@dataclass
class SchedulerConfig:
    """Configuration for the background harvest loop.

    Attributes:
        interval_hours: Pause between the end of one cycle and the start of the next
        run_on_start: Whether to run a cycle immediately when the worker starts
    """

    interval_hours: float = 6.0
    run_on_start: bool = True

    @property
    def interval_seconds(self) -> float:
        return self.interval_hours * 3600


@dataclass
class StorageConfig:
    """Configuration for the content database.

    Attributes:
        database_url: SQLAlchemy URL, falls back to HARVEST_DATABASE_URL
        echo: Whether SQLAlchemy logs emitted SQL
    """

    database_url: str | None = None
    echo: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory holding the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "harvest.jsonl"
    directory: str = "logs"


@dataclass
class SourceConfig:
    """Declarative extraction rules for one external source.

    Selectors are CSS selectors. item_selector matches the repeated element
    (an article card); the other selectors are evaluated inside it.

    Attributes:
        name: Stable source identifier stored on every record
        allowed_domains: Hosts the collector may request
        seed_urls: Pages visited each cycle, in order
        item_selector: Selector for one content card
        title_selector: Selector for the title text within a card
        link_selector: Selector for the anchor carrying href within a card
        description_selector: Selector for the summary text within a card
        image_selector: Selector for the img carrying src, empty to skip
        date_selector: Selector for a publish date, empty to use harvest time
        organizer_selector: Selector for an event organizer, empty to skip
        location_selector: Selector for an event location, empty to skip
        content_type: "news" or "event" for every item of this source
        category: Category stored on every item
        tags: Comma-separated tags stored on every item
        user_agent: Overrides FetchConfig.user_agent when set
        delay_seconds: Overrides FetchConfig.delay_seconds when set
        random_delay_seconds: Overrides FetchConfig.random_delay_seconds when set
    """

    name: str = ""
    allowed_domains: list[str] = field(default_factory=list)
    seed_urls: list[str] = field(default_factory=list)
    item_selector: str = "article"
    title_selector: str = "h2, h3"
    link_selector: str = "a"
    description_selector: str = "p"
    image_selector: str = ""
    date_selector: str = ""
    organizer_selector: str = ""
    location_selector: str = ""
    content_type: str = ContentType.NEWS.value
    category: str = "article"
    tags: str = ""
    user_agent: str | None = None
    delay_seconds: float | None = None
    random_delay_seconds: float | None = None


def default_sources() -> list[SourceConfig]:
    """Production source table."""
    return [
        SourceConfig(
            name="african-business",
            allowed_domains=["african.business", "www.african.business"],
            seed_urls=[
                "https://african.business/",
                "https://african.business/technology/",
            ],
            item_selector="article, .post-card, .article-card",
            title_selector="h2, h3, .title, .post-title",
            description_selector="p, .excerpt, .description",
            link_selector="a",
            image_selector="img",
        ),
        SourceConfig(
            name="business-daily",
            allowed_domains=["businessdailyafrica.com", "www.businessdailyafrica.com"],
            seed_urls=["https://www.businessdailyafrica.com/bd/corporate/technology"],
            item_selector="article, .story, .article-item",
            title_selector="h2, h3, .headline",
            description_selector="p, .summary",
            link_selector="a",
            user_agent="Mozilla/5.0 (compatible; SpotlightAfrica/1.0)",
        ),
        SourceConfig(
            name="techcabal",
            allowed_domains=["techcabal.com", "www.techcabal.com"],
            seed_urls=["https://techcabal.com/"],
            item_selector="article, .post",
            title_selector="h2, h3, .entry-title",
            description_selector="p, .excerpt",
            link_selector="a",
            tags="technology,startup",
            user_agent="Mozilla/5.0 (compatible; SpotlightAfrica/1.0)",
        ),
    ]


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sources: list[SourceConfig] = field(default_factory=default_sources)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    A `sources` list in the file replaces the default source table entirely.
    """
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top-level YAML value must be a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            fetch=FetchConfig(**data["fetch"]),
            scheduler=SchedulerConfig(**data["scheduler"]),
            storage=StorageConfig(**data["storage"]),
            logging=LoggingConfig(**data["logging"]),
            sources=[SourceConfig(**item) for item in data.get("sources") or []],
        )
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def validate_config(cfg: AppConfig) -> None:
    """Reject configuration that would make the worker unusable.

    Raises:
        ConfigError: On the first problem found
    """
    if cfg.scheduler.interval_hours <= 0:
        raise ConfigError("scheduler.interval_hours must be positive")
    if cfg.fetch.delay_seconds < 0 or cfg.fetch.random_delay_seconds < 0:
        raise ConfigError("fetch delays must not be negative")

    seen: set[str] = set()
    for source in cfg.sources:
        if not source.name:
            raise ConfigError("every source needs a name")
        if source.name in seen:
            raise ConfigError(f"duplicate source name: {source.name}")
        seen.add(source.name)
        for attr in ("item_selector", "title_selector", "link_selector"):
            if not getattr(source, attr):
                raise ConfigError(f"source {source.name}: {attr} is required")
        if source.content_type not in {c.value for c in ContentType}:
            raise ConfigError(
                f"source {source.name}: unknown content_type {source.content_type!r}"
            )
        for attr in ("delay_seconds", "random_delay_seconds"):
            value = getattr(source, attr)
            if value is not None and value < 0:
                raise ConfigError(f"source {source.name}: {attr} must not be negative")


def get_database_url(cfg: StorageConfig) -> str:
    """Get database URL from inline config or environment variable."""
    if cfg.database_url:
        return cfg.database_url
    return os.getenv("HARVEST_DATABASE_URL") or DEFAULT_DATABASE_URL
