"""
Create-if-absent persistence of normalized items.

The existence check is a fast path that avoids pointless inserts; the
storage unique constraints remain the real guarantee. Existing records are
never modified.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
import logging
import threading
import uuid

from .core.types import EventDraft, NewsDraft, NormalizedItem
from .logging_utils import get_logger, log_event
from .storage.store import ContentStore, RecordKind


@dataclass
class UpsertResult:
    """Outcome of one upsert.

    Attributes:
        created: True if a new record was written
        kind: Table the item was routed to
        external_id: The item fingerprint
        error: Failure description when the create failed
    """

    created: bool
    kind: RecordKind
    external_id: str
    error: str | None = None

    @property
    def existed(self) -> bool:
        return not self.created and self.error is None


def kind_of(item: NormalizedItem) -> RecordKind:
    if isinstance(item, EventDraft):
        return RecordKind.EVENT
    return RecordKind.NEWS


def build_record(item: NormalizedItem) -> dict:
    """Build the full column mapping for a new record."""
    record = asdict(item)
    record["id"] = str(uuid.uuid4())
    if isinstance(item, NewsDraft):
        record["is_public"] = True
    else:
        record["is_published"] = True
    return record


class _KeyedLocks:
    """One lock per key, dropped when no thread holds or waits on it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = defaultdict(int)

    def acquire(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] += 1
        lock.acquire()
        return lock

    def release(self, key: str, lock: threading.Lock) -> None:
        lock.release()
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


class ContentWriter:
    def __init__(self, store: ContentStore, logger: logging.Logger | None = None):
        self.store = store
        self.logger = logger or get_logger("writer")
        self._locks = _KeyedLocks()

    def upsert(self, item: NormalizedItem) -> UpsertResult:
        """Create a record for item unless one with its fingerprint exists.

        Storage failures are logged and reported in the result, never raised.
        """
        kind = kind_of(item)
        lock = self._locks.acquire(item.external_id)
        try:
            return self._upsert_locked(kind, item)
        finally:
            self._locks.release(item.external_id, lock)

    def _upsert_locked(self, kind: RecordKind, item: NormalizedItem) -> UpsertResult:
        try:
            existing = self.store.count_by_external_key(kind, item.external_id)
        except Exception as exc:  # noqa: BLE001
            return self._failed(kind, item, exc)

        if existing:
            log_event(
                self.logger,
                f"{kind.value.capitalize()} already exists: {item.title}",
                event="item_exists",
                kind=kind.value,
                source=item.source,
                external_id=item.external_id,
            )
            return UpsertResult(created=False, kind=kind, external_id=item.external_id)

        try:
            self.store.create(kind, build_record(item))
        except Exception as exc:  # noqa: BLE001
            return self._failed(kind, item, exc)

        log_event(
            self.logger,
            f"Saved new {kind.value}: {item.title}",
            event="item_created",
            kind=kind.value,
            source=item.source,
            external_id=item.external_id,
        )
        return UpsertResult(created=True, kind=kind, external_id=item.external_id)

    def _failed(self, kind: RecordKind, item: NormalizedItem, exc: Exception) -> UpsertResult:
        error = f"{type(exc).__name__}: {exc}"
        log_event(
            self.logger,
            f"Failed to save {kind.value} '{item.title}'",
            level=logging.WARNING,
            event="item_write_failed",
            kind=kind.value,
            source=item.source,
            external_id=item.external_id,
            error=error,
        )
        return UpsertResult(created=False, kind=kind, external_id=item.external_id, error=error)
