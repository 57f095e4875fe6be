"""
ORM models for harvested content.

Tables:
  - news: Articles, one row per (source, external_id)
  - events: Ecosystem events, one row per (source, external_id)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewsRecord(Base):
    """News article scraped from an external source or written by an editor."""
    __tablename__ = "news"
    __table_args__ = (
        UniqueConstraint("source", "external_id", name="uq_news_source_external_id"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)

    title = Column(String(500), nullable=False)
    slug = Column(String(500), nullable=False, unique=True)
    excerpt = Column(Text, default="")
    content = Column(Text, default="")

    author = Column(String(255), default="")
    category = Column(String(50), default="news")

    source = Column(String(100))           # "techcabal", "african-business", "manual"
    source_url = Column(String(500))
    external_id = Column(String(255), index=True)

    image_url = Column(String(500), default="")
    tags = Column(Text, default="")        # comma-separated

    is_public = Column(Boolean, default=True)
    published_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class EventRecord(Base):
    """Conference, summit or meetup discovered by scraping or entered manually."""
    __tablename__ = "events"
    __table_args__ = (
        UniqueConstraint("source", "external_id", name="uq_events_source_external_id"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)

    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    category = Column(String(50), default="conference")

    organizer = Column(String(255), default="")
    organizer_url = Column(String(500), default="")

    location = Column(String(255), default="")
    is_virtual = Column(Boolean, default=False)
    link = Column(String(500), default="")

    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True))

    source = Column(String(100))
    source_url = Column(String(500))
    external_id = Column(String(255), index=True)

    image_url = Column(String(500), default="")
    tags = Column(Text, default="")

    is_published = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
