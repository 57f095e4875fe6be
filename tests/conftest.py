"""Shared fixtures for harvester tests."""

from __future__ import annotations

import logging

import httpx
import pytest

from spotlight_harvest.config import AppConfig, FetchConfig, LoggingConfig, SourceConfig
from spotlight_harvest.logging_utils import LOGGER_NAME, setup_logging
from spotlight_harvest.storage.store import create_store


LISTING_HTML = """
<html><body>
  <article class="post-card">
    <h2> {prefix} story one </h2>
    <p>First summary</p>
    <a href="/news/{prefix}-one">Read</a>
  </article>
  <article class="post-card">
    <h2>{prefix} story two</h2>
    <p>Second summary</p>
    <a href="/news/{prefix}-two">Read</a>
  </article>
  <article class="post-card">
    <h3>{prefix} story three</h3>
    <a href="https://{host}/news/{prefix}-three">Read</a>
  </article>
  <article class="post-card"><p>No title, no link</p></article>
</body></html>
"""


def listing(host: str, prefix: str = "item") -> str:
    return LISTING_HTML.format(host=host, prefix=prefix)


def make_source(name: str, host: str, seed_paths: list[str], **overrides) -> SourceConfig:
    params = dict(
        name=name,
        allowed_domains=[host],
        seed_urls=[f"https://{host}{path}" for path in seed_paths],
        item_selector="article",
        title_selector="h2, h3",
        description_selector="p",
        link_selector="a",
        delay_seconds=0,
        random_delay_seconds=0,
    )
    params.update(overrides)
    return SourceConfig(**params)


def make_config(*sources: SourceConfig) -> AppConfig:
    return AppConfig(
        fetch=FetchConfig(delay_seconds=0, random_delay_seconds=0, trust_env=False),
        sources=list(sources),
    )


def routing_transport(routes: dict[str, object]) -> httpx.MockTransport:
    """Serve routes keyed by full URL.

    A route value may be an HTML string (200), an int status code, or an
    exception instance to raise.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return httpx.Response(route, text="error")
        return httpx.Response(200, text=route, headers={"Content-Type": "text/html"})

    return httpx.MockTransport(handler)


@pytest.fixture
def store():
    return create_store("sqlite://")


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.handlers[:], logger.level, logger.propagate)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers, logger.level, logger.propagate = saved


@pytest.fixture
def harvest_log(tmp_path, restore_logger):
    """Enable DEBUG file logging so every log_event record is built and formatted.

    Returns the path of the JSONL log file.
    """
    setup_logging(LoggingConfig(level="DEBUG", console=False, file=True, directory=str(tmp_path)))
    return tmp_path / LoggingConfig().filename
