"""Tests for YAML configuration loading and validation."""

import tempfile
from pathlib import Path

import pytest

from spotlight_harvest.config import (
    AppConfig,
    SourceConfig,
    StorageConfig,
    get_database_url,
    load_config,
    validate_config,
)
from spotlight_harvest.errors import ConfigError


def _write(tmpdir: str, text: str) -> str:
    path = Path(tmpdir) / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults():
    cfg = load_config(None)
    assert cfg.scheduler.interval_seconds == 6 * 3600
    assert cfg.scheduler.run_on_start is True
    assert cfg.fetch.timeout_seconds == 20.0
    assert [s.name for s in cfg.sources] == ["african-business", "business-daily", "techcabal"]
    validate_config(cfg)


def test_yaml_sections_merge_over_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "scheduler:\n  interval_hours: 1\nfetch:\n  delay_seconds: 0.5\n")
        cfg = load_config(path)
    assert cfg.scheduler.interval_hours == 1
    assert cfg.scheduler.run_on_start is True
    assert cfg.fetch.delay_seconds == 0.5
    assert cfg.fetch.random_delay_seconds == 2.0
    assert len(cfg.sources) == 3


def test_yaml_sources_replace_the_default_table():
    text = """
sources:
  - name: hub-events
    allowed_domains: [hub.example]
    seed_urls: [https://hub.example/events]
    content_type: event
    location_selector: .venue
"""
    with tempfile.TemporaryDirectory() as tmpdir:
        cfg = load_config(_write(tmpdir, text))
    assert len(cfg.sources) == 1
    source = cfg.sources[0]
    assert source.name == "hub-events"
    assert source.content_type == "event"
    assert source.location_selector == ".venue"
    assert source.item_selector == "article"


def test_unknown_key_is_a_config_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "fetch:\n  retries: 3\n")
        with pytest.raises(ConfigError):
            load_config(path)


def test_non_mapping_yaml_is_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(path)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda cfg: setattr(cfg.scheduler, "interval_hours", 0),
        lambda cfg: setattr(cfg.fetch, "delay_seconds", -1),
        lambda cfg: cfg.sources.append(SourceConfig(name="techcabal")),
        lambda cfg: cfg.sources.append(SourceConfig(name="")),
        lambda cfg: cfg.sources.append(SourceConfig(name="x", link_selector="")),
        lambda cfg: cfg.sources.append(SourceConfig(name="x", content_type="podcast")),
        lambda cfg: cfg.sources.append(SourceConfig(name="x", random_delay_seconds=-2)),
    ],
)
def test_validation_rejects_bad_config(mutate):
    cfg = AppConfig()
    mutate(cfg)
    with pytest.raises(ConfigError):
        validate_config(cfg)


def test_database_url_resolution(monkeypatch):
    monkeypatch.delenv("HARVEST_DATABASE_URL", raising=False)
    assert get_database_url(StorageConfig()) == "sqlite:///spotlight_harvest.db"

    monkeypatch.setenv("HARVEST_DATABASE_URL", "postgresql://db/harvest")
    assert get_database_url(StorageConfig()) == "postgresql://db/harvest"
    assert get_database_url(StorageConfig(database_url="sqlite://")) == "sqlite://"
