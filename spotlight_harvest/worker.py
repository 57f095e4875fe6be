"""
Background harvest worker.

The worker owns a single daemon thread that runs a cycle immediately, then
waits for the configured interval and runs again until stopped. Cycles are
strictly sequential: the wait only starts once the previous cycle returned.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .logging_utils import get_logger, log_event


class HarvestWorker:
    """Runs a cycle function on a fixed cadence in a background thread.

    Args:
        run_cycle: Callable running one full cycle
        interval_seconds: Pause between the end of one cycle and the next
        run_on_start: Whether the first cycle runs immediately
        logger: Logger for lifecycle events
    """

    def __init__(
        self,
        run_cycle: Callable[[], object],
        interval_seconds: float,
        *,
        run_on_start: bool = True,
        logger: logging.Logger | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._run_cycle = run_cycle
        self.interval_seconds = interval_seconds
        self.run_on_start = run_on_start
        self.logger = logger or get_logger("worker")
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.cycles_completed = 0
        self.cycles_crashed = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Launch the background thread. A worker can only be started once."""
        if self._thread is not None:
            raise RuntimeError("worker already started")
        log_event(
            self.logger,
            "Starting content scraper worker",
            event="worker_start",
            interval_seconds=self.interval_seconds,
        )
        self._thread = threading.Thread(target=self._loop, name="harvest-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> bool:
        """Ask the loop to exit and wait for it.

        An in-flight cycle is allowed to finish; the inter-cycle wait is
        interrupted immediately.

        Returns:
            True if the thread has exited
        """
        self._stop.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        stopped = not self._thread.is_alive()
        log_event(self.logger, "Worker stopped" if stopped else "Worker still finishing a cycle",
                  event="worker_stop", stopped=stopped)
        return stopped

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _loop(self) -> None:
        if not self.run_on_start and self._stop.wait(self.interval_seconds):
            return
        while not self._stop.is_set():
            self._run_once()
            if self._stop.wait(self.interval_seconds):
                return

    def _run_once(self) -> None:
        try:
            self._run_cycle()
        except Exception:  # noqa: BLE001
            self.cycles_crashed += 1
            self.logger.exception("Harvest cycle crashed", extra={"event": "cycle_crashed"})
        else:
            self.cycles_completed += 1
