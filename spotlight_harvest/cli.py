"""
Command-line interface for the content harvester.

Uses Typer to expose the worker (`run`), a single cycle (`once`), a dry run
of one source (`preview`) and the configured source table (`sources`).
Supports loading .env files for database configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
import signal
import threading

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .collector import build_collectors
from .config import AppConfig, get_database_url, load_config, validate_config
from .core.normalize import normalize_item
from .core.types import EventDraft
from .errors import ConfigError
from .logging_utils import setup_logging
from .runner import HarvestRunner, render_cycle_report
from .storage.store import create_store
from .worker import HarvestWorker
from .writer import ContentWriter

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    log_level: str | None = None,
    log_file: bool | None = None,
    database_url: str | None = None,
) -> AppConfig:
    load_dotenv()
    try:
        cfg = load_config(str(config) if config else None)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    if database_url:
        cfg.storage.database_url = database_url
    return cfg


def build_runner(cfg: AppConfig, logger: logging.Logger) -> HarvestRunner:
    """Wire store, writer and collectors for cfg.

    Raises:
        ConfigError: If the configuration is invalid
    """
    collectors = build_collectors(cfg, logger=logger.getChild("collector"))
    store = create_store(get_database_url(cfg.storage), echo=cfg.storage.echo)
    writer = ContentWriter(store, logger=logger.getChild("writer"))
    return HarvestRunner(collectors, writer, logger=logger.getChild("runner"))


def _build_or_exit(cfg: AppConfig, logger: logging.Logger) -> HarvestRunner:
    try:
        return build_runner(cfg, logger)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc


ConfigOption = typer.Option(None, "--config", "-c", exists=True, readable=True)
LogLevelOption = typer.Option(None, "--log-level", help="Logging level.")
LogFileOption = typer.Option(None, "--log-file/--no-log-file", help="Enable or disable file logging.")
DatabaseOption = typer.Option(
    None,
    "--database-url",
    envvar="HARVEST_DATABASE_URL",
    help="SQLAlchemy database URL (or set HARVEST_DATABASE_URL / .env).",
)


@app.command()
def run(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    log_file: bool | None = LogFileOption,
    database_url: str | None = DatabaseOption,
    interval_hours: float | None = typer.Option(
        None, "--interval-hours", help="Hours between the end of one cycle and the next."
    ),
):
    """Start the background harvest worker and block until interrupted.

    Runs one cycle immediately, then one every interval. SIGINT and SIGTERM
    stop the worker after any in-flight cycle completes.
    """
    cfg = _load(config, log_level, log_file, database_url)
    if interval_hours is not None:
        cfg.scheduler.interval_hours = interval_hours
    logger = setup_logging(cfg.logging)
    runner = _build_or_exit(cfg, logger)

    worker = HarvestWorker(
        runner.run_cycle,
        cfg.scheduler.interval_seconds,
        run_on_start=cfg.scheduler.run_on_start,
        logger=logger.getChild("worker"),
    )

    shutdown = threading.Event()

    def _request_shutdown(signum, frame):  # noqa: ARG001
        shutdown.set()

    signal.signal(signal.SIGINT, _request_shutdown)
    signal.signal(signal.SIGTERM, _request_shutdown)

    worker.start()
    console.print(
        f"Harvest worker running: {len(runner.collectors)} sources, "
        f"every {cfg.scheduler.interval_hours:g}h. Press Ctrl+C to stop."
    )
    while not shutdown.wait(1.0):
        if not worker.is_running:
            break
    console.print("Stopping harvest worker...")
    worker.stop()


@app.command()
def once(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    log_file: bool | None = LogFileOption,
    database_url: str | None = DatabaseOption,
):
    """Run a single harvest cycle and print its summary."""
    cfg = _load(config, log_level, log_file, database_url)
    runner = _build_or_exit(cfg, setup_logging(cfg.logging))
    report = runner.run_cycle()
    render_cycle_report(report, console)


@app.command()
def preview(
    source: str = typer.Argument(..., help="Name of the source to collect."),
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to display."),
):
    """Collect and normalize one source without writing anything."""
    cfg = _load(config, log_level, log_file=False)
    cfg.sources = [s for s in cfg.sources if s.name == source]
    if not cfg.sources:
        console.print(f"[red]Unknown source:[/red] {source}")
        raise typer.Exit(code=1)
    try:
        logger = setup_logging(cfg.logging)
        collector = build_collectors(cfg, logger=logger.getChild("collector"))[0]
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    items = collector.collect()
    table = Table(title=f"{source}: {len(items)} items")
    table.add_column("Kind")
    table.add_column("Title")
    table.add_column("Slug / Location")
    table.add_column("Link")
    for item in items[:limit]:
        draft = normalize_item(item)
        if isinstance(draft, EventDraft):
            table.add_row("event", draft.title, draft.location, draft.link)
        else:
            table.add_row("news", draft.title, draft.slug, draft.source_url)
    console.print(table)
    console.print(
        f"pages ok={collector.stats.pages_ok}, pages failed={collector.stats.pages_failed}"
    )


@app.command()
def sources(config: Path | None = ConfigOption):
    """List configured sources in collection order."""
    cfg = _load(config)
    try:
        validate_config(cfg)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    table = Table(title="Sources")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Domains")
    table.add_column("Seed URLs")
    for s in cfg.sources:
        table.add_row(s.name, s.content_type, ", ".join(s.allowed_domains), "\n".join(s.seed_urls))
    console.print(table)


if __name__ == "__main__":
    app()
