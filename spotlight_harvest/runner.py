"""
Harvest cycle orchestration.

One cycle:
1. Run every registered collector, in registration order
2. Normalize each collected item (classify, slug, clip)
3. Hand each item to the writer, which creates it if its fingerprint is new

A collector that raises is recorded as failed and the cycle moves on to the
next collector; a failed write only affects its own item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
import time

from rich.console import Console
from rich.table import Table

from .collector import SourceCollector
from .core.normalize import normalize_item
from .core.types import utc_now
from .logging_utils import get_logger, log_event
from .writer import ContentWriter


@dataclass
class SourceReport:
    """Statistics for one source within a cycle.

    Attributes:
        source: Source name
        collected: Items returned by the collector
        created: New records written
        existing: Items whose fingerprint was already stored
        failed: Items whose write failed
        pages_ok: Pages fetched and parsed
        pages_failed: Pages that could not be fetched or parsed
        error: Set when the collector itself raised
    """

    source: str
    collected: int = 0
    created: int = 0
    existing: int = 0
    failed: int = 0
    pages_ok: int = 0
    pages_failed: int = 0
    error: str | None = None


@dataclass
class CycleReport:
    """Statistics for one full cycle."""

    started_at: datetime = field(default_factory=utc_now)
    duration_seconds: float = 0.0
    sources: list[SourceReport] = field(default_factory=list)

    @property
    def collected(self) -> int:
        return sum(s.collected for s in self.sources)

    @property
    def created(self) -> int:
        return sum(s.created for s in self.sources)

    @property
    def existing(self) -> int:
        return sum(s.existing for s in self.sources)

    @property
    def failed(self) -> int:
        return sum(s.failed for s in self.sources)

    @property
    def failed_sources(self) -> list[str]:
        return [s.source for s in self.sources if s.error is not None]


class HarvestRunner:
    """Runs harvest cycles over a fixed, ordered list of collectors."""

    def __init__(
        self,
        collectors: list[SourceCollector],
        writer: ContentWriter,
        logger: logging.Logger | None = None,
    ):
        self.collectors = list(collectors)
        self.writer = writer
        self.logger = logger or get_logger("runner")

    def run_cycle(self) -> CycleReport:
        """Run every collector once and persist what they found.

        Never raises for source or storage failures.
        """
        report = CycleReport()
        start = time.monotonic()
        log_event(
            self.logger,
            "Starting scrape cycle",
            event="cycle_start",
            sources=[c.name for c in self.collectors],
        )

        for collector in self.collectors:
            report.sources.append(self._run_source(collector))

        report.duration_seconds = time.monotonic() - start
        log_event(
            self.logger,
            f"Scrape cycle complete: collected={report.collected} created={report.created} "
            f"existing={report.existing} failed={report.failed}",
            event="cycle_complete",
            items_collected=report.collected,
            items_created=report.created,
            items_existing=report.existing,
            items_failed=report.failed,
            failed_sources=report.failed_sources,
            duration_seconds=round(report.duration_seconds, 3),
        )
        return report

    def _run_source(self, collector: SourceCollector) -> SourceReport:
        source_report = SourceReport(source=collector.name)
        log_event(self.logger, f"Scraping: {collector.name}", event="source_start", source=collector.name)

        try:
            items = collector.collect()
        except Exception as exc:  # noqa: BLE001
            source_report.error = f"{type(exc).__name__}: {exc}"
            self.logger.exception(
                "Source %s failed",
                collector.name,
                extra={"event": "source_failed", "source": collector.name},
            )
            return source_report
        finally:
            source_report.pages_ok = collector.stats.pages_ok
            source_report.pages_failed = collector.stats.pages_failed

        source_report.collected = len(items)
        log_event(
            self.logger,
            f"Processing {len(items)} scraped items from {collector.name}",
            event="source_items",
            source=collector.name,
            count=len(items),
        )
        for item in items:
            result = self.writer.upsert(normalize_item(item))
            if result.created:
                source_report.created += 1
            elif result.error:
                source_report.failed += 1
            else:
                source_report.existing += 1

        log_event(
            self.logger,
            f"{collector.name}: collected={source_report.collected} created={source_report.created} "
            f"existing={source_report.existing} failed={source_report.failed} "
            f"pages_failed={source_report.pages_failed}",
            event="source_complete",
            source=collector.name,
            items_collected=source_report.collected,
            items_created=source_report.created,
            items_existing=source_report.existing,
            items_failed=source_report.failed,
            pages_ok=source_report.pages_ok,
            pages_failed=source_report.pages_failed,
        )
        return source_report


def render_cycle_report(report: CycleReport, console: Console) -> None:
    """Print a per-source summary table for a cycle."""
    table = Table(title="Harvest cycle")
    table.add_column("Source")
    table.add_column("Pages ok", justify="right")
    table.add_column("Pages failed", justify="right")
    table.add_column("Collected", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Existing", justify="right")
    table.add_column("Write failed", justify="right")
    for s in report.sources:
        name = s.source if s.error is None else f"[red]{s.source}[/red]"
        table.add_row(
            name,
            str(s.pages_ok),
            str(s.pages_failed),
            str(s.collected),
            str(s.created),
            str(s.existing),
            str(s.failed),
        )
    console.print(table)
    console.print(
        "[bold]Cycle summary[/bold]: "
        f"collected={report.collected}, created={report.created}, existing={report.existing}, "
        f"failed={report.failed}, duration={report.duration_seconds:.1f}s"
    )
