"""
Storage collaborator used by the content writer.

The writer only needs two operations: count the records of a kind that carry
an external id, and create a record. SqlContentStore implements them over a
SQLAlchemy engine shared with the rest of the application; the
(source, external_id) unique constraints on both tables are the final
guard against duplicates.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Protocol

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, EventRecord, NewsRecord


class RecordKind(str, Enum):
    NEWS = "news"
    EVENT = "event"


MODELS = {
    RecordKind.NEWS: NewsRecord,
    RecordKind.EVENT: EventRecord,
}


class ContentStore(Protocol):
    def count_by_external_key(self, kind: RecordKind, external_id: str) -> int:
        ...

    def create(self, kind: RecordKind, record: dict) -> None:
        ...


class SqlContentStore:
    """SQLAlchemy-backed ContentStore."""

    def __init__(self, session_factory: sessionmaker):
        self.SessionLocal = session_factory

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def count_by_external_key(self, kind: RecordKind, external_id: str) -> int:
        model = MODELS[kind]
        with self.get_session() as session:
            stmt = select(func.count()).select_from(model).where(model.external_id == external_id)
            return int(session.execute(stmt).scalar_one())

    def create(self, kind: RecordKind, record: dict) -> None:
        """Insert one record; constraint violations propagate as IntegrityError."""
        model = MODELS[kind]
        with self.get_session() as session:
            session.add(model(**record))

    def count(self, kind: RecordKind) -> int:
        model = MODELS[kind]
        with self.get_session() as session:
            return int(session.execute(select(func.count()).select_from(model)).scalar_one())


def create_store(database_url: str, echo: bool = False) -> SqlContentStore:
    """Build an engine for database_url, create missing tables and wrap it."""
    kwargs: dict = {"echo": echo}
    if database_url.startswith("sqlite"):
        # The worker thread and the caller share the database.
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    return SqlContentStore(sessionmaker(bind=engine, expire_on_commit=False))
