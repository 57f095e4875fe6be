"""Tests for cycle orchestration and cross-source isolation."""

import json

import httpx
import pytest

from spotlight_harvest.collector import SourceCollector, build_collectors
from spotlight_harvest.runner import HarvestRunner
from spotlight_harvest.storage.store import RecordKind
from spotlight_harvest.writer import ContentWriter

from conftest import listing, make_config, make_source, routing_transport


pytestmark = pytest.mark.usefixtures("harvest_log")


def _runner(cfg, routes, store):
    collectors = build_collectors(cfg, transport=routing_transport(routes))
    return HarvestRunner(collectors, ContentWriter(store))


def test_failing_source_does_not_stop_the_cycle(store):
    cfg = make_config(
        make_source("down", "down.example", ["/"]),
        make_source("up", "up.example", ["/"]),
    )
    routes = {
        "https://down.example/": httpx.ConnectTimeout("timed out"),
        "https://up.example/": listing("up.example"),
    }
    report = _runner(cfg, routes, store).run_cycle()

    assert [s.source for s in report.sources] == ["down", "up"]
    assert report.sources[0].pages_failed == 1
    assert report.sources[0].collected == 0
    assert report.created == 3
    assert store.count(RecordKind.NEWS) == 3


def test_second_cycle_creates_nothing_new(store):
    cfg = make_config(make_source("up", "up.example", ["/"]))
    runner = _runner(cfg, {"https://up.example/": listing("up.example")}, store)

    first = runner.run_cycle()
    second = runner.run_cycle()

    assert first.created == 3
    assert second.created == 0
    assert second.existing == 3
    assert store.count(RecordKind.NEWS) == 3


class ExplodingCollector(SourceCollector):
    def collect(self):
        raise RuntimeError("selector table corrupt")


def test_collector_exception_is_isolated(store):
    cfg = make_config(
        make_source("broken", "broken.example", ["/"]),
        make_source("up", "up.example", ["/"]),
    )
    collectors = build_collectors(cfg, transport=routing_transport(
        {"https://up.example/": listing("up.example")}
    ))
    collectors[0] = ExplodingCollector(collectors[0].source, collectors[0].fetcher)
    runner = HarvestRunner(collectors, ContentWriter(store))

    report = runner.run_cycle()

    assert report.failed_sources == ["broken"]
    assert "selector table corrupt" in report.sources[0].error
    assert report.sources[1].created == 3


def test_event_source_fills_events_table(store):
    cfg = make_config(
        make_source("events", "events.example", ["/"], content_type="event", category="conference"),
        make_source("news", "news.example", ["/"]),
    )
    routes = {
        "https://events.example/": listing("events.example", "summit"),
        "https://news.example/": listing("news.example", "story"),
    }
    report = _runner(cfg, routes, store).run_cycle()

    assert report.created == 6
    assert store.count(RecordKind.EVENT) == 3
    assert store.count(RecordKind.NEWS) == 3


def test_no_sources_is_an_empty_cycle(store):
    report = HarvestRunner([], ContentWriter(store)).run_cycle()
    assert report.sources == []
    assert report.collected == 0
    assert report.duration_seconds >= 0


class OfflineStore:
    def count_by_external_key(self, kind, external_id):
        return 0

    def create(self, kind, record):
        raise ConnectionError("storage unreachable")


def test_non_database_write_errors_skip_only_the_item():
    cfg = make_config(
        make_source("a", "a.example", ["/"]),
        make_source("b", "b.example", ["/"]),
    )
    routes = {
        "https://a.example/": listing("a.example"),
        "https://b.example/": listing("b.example"),
    }
    collectors = build_collectors(cfg, transport=routing_transport(routes))
    report = HarvestRunner(collectors, ContentWriter(OfflineStore())).run_cycle()

    assert [s.source for s in report.sources] == ["a", "b"]
    assert [s.collected for s in report.sources] == [3, 3]
    assert report.failed == 6
    assert report.created == 0
    assert report.failed_sources == []


def test_cycle_events_reach_the_log_file(store, harvest_log):
    cfg = make_config(
        make_source("a", "a.example", ["/"]),
        make_source("b", "b.example", ["/"]),
    )
    routes = {
        "https://a.example/": listing("a.example", "first"),
        "https://b.example/": listing("b.example", "second"),
    }
    report = _runner(cfg, routes, store).run_cycle()
    assert report.created == 6
    assert store.count(RecordKind.NEWS) == 6

    records = [json.loads(line) for line in harvest_log.read_text(encoding="utf-8").splitlines()]
    events = [r.get("event") for r in records]
    assert events.count("source_complete") == 2
    assert events.count("item_created") == 6
    summary = next(r for r in records if r.get("event") == "cycle_complete")
    assert summary["items_created"] == 6
    assert summary["items_collected"] == 6
