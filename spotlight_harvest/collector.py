"""
Source collectors: one per configured external site.

A collector walks its seed URLs in order, fetches each page through its own
PageFetcher (so rate limiting is per source) and extracts items with the
source's selector table. Page failures are logged and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from .config import AppConfig, FetchConfig, SourceConfig, validate_config
from .core.types import ScrapedItem
from .fetch.extractor import extract_items
from .fetch.fetcher import PageFetcher
from .logging_utils import get_logger, log_event


@dataclass
class PageStats:
    """Per-call page counters of a collector."""

    pages_ok: int = 0
    pages_failed: int = 0


class SourceCollector:
    """Fetches and extracts content from one external source."""

    def __init__(
        self,
        source: SourceConfig,
        fetcher: PageFetcher,
        logger: logging.Logger | None = None,
    ):
        self.source = source
        self.fetcher = fetcher
        self.logger = logger or get_logger("collector")
        self.stats = PageStats()

    @property
    def name(self) -> str:
        return self.source.name

    def collect(self) -> list[ScrapedItem]:
        """Visit every seed URL and return the extracted items.

        Items are de-duplicated by fingerprint within the call, keeping the
        first occurrence. A source without seed URLs yields no items.
        """
        self.stats = PageStats()
        items: list[ScrapedItem] = []
        seen: set[str] = set()
        for url in self.source.seed_urls:
            for item in self._collect_page(url):
                if item.fingerprint in seen:
                    continue
                seen.add(item.fingerprint)
                items.append(item)
        return items

    def _collect_page(self, url: str) -> list[ScrapedItem]:
        log_event(self.logger, f"Visiting {url}", event="page_visit", source=self.name, url=url)
        result = self.fetcher.fetch(url)
        if not result.ok:
            self.stats.pages_failed += 1
            log_event(
                self.logger,
                f"Error visiting {url}: {result.error}",
                level=logging.WARNING,
                event="fetch_failed",
                source=self.name,
                url=url,
                status_code=result.status_code,
                error=result.error,
                error_category=result.error_category,
            )
            return []

        try:
            items = extract_items(result.text or "", result.url, self.source)
        except Exception as exc:  # noqa: BLE001
            self.stats.pages_failed += 1
            log_event(
                self.logger,
                f"Failed to parse {url}: {exc}",
                level=logging.WARNING,
                event="parse_failed",
                source=self.name,
                url=url,
                error=f"{type(exc).__name__}: {exc}",
            )
            return []

        self.stats.pages_ok += 1
        return items


def build_fetcher(
    source: SourceConfig,
    fetch_cfg: FetchConfig,
    transport: httpx.BaseTransport | None = None,
) -> PageFetcher:
    """Create the fetcher for a source, applying its per-source overrides."""
    return PageFetcher(
        source.allowed_domains,
        user_agent=source.user_agent or fetch_cfg.user_agent,
        timeout=fetch_cfg.timeout_seconds,
        delay=fetch_cfg.delay_seconds if source.delay_seconds is None else source.delay_seconds,
        random_delay=(
            fetch_cfg.random_delay_seconds
            if source.random_delay_seconds is None
            else source.random_delay_seconds
        ),
        trust_env=fetch_cfg.trust_env,
        transport=transport,
    )


def build_collectors(
    cfg: AppConfig,
    transport: httpx.BaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> list[SourceCollector]:
    """Build one collector per configured source, in configuration order.

    Raises:
        ConfigError: If the configuration is invalid
    """
    validate_config(cfg)
    return [
        SourceCollector(source, build_fetcher(source, cfg.fetch, transport), logger=logger)
        for source in cfg.sources
    ]
