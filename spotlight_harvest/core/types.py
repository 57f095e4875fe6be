"""
Core data types for the harvesting pipeline.

This module defines the data structures that flow through one cycle:
- ContentType: Closed classification of scraped content
- ScrapedItem: Transient item produced by a source collector
- NewsDraft / EventDraft: Normalized, persist-ready forms of a ScrapedItem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Union


class ContentType(str, Enum):
    """Classification of a scraped item. Anything that is not an event is news."""

    NEWS = "news"
    EVENT = "event"

    @classmethod
    def parse(cls, value: str | ContentType | None) -> ContentType:
        if isinstance(value, ContentType):
            return value
        if value == cls.EVENT.value:
            return cls.EVENT
        return cls.NEWS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScrapedItem:
    """Raw content extracted from one element of one page.

    Items live only for the duration of a cycle. An item is only created by
    the extractor when both title and link are non-empty.

    Attributes:
        title: Trimmed headline text
        link: Absolute canonical URL of the item
        source_name: Name of the collector that produced the item
        fingerprint: Stable identifier derived from link
        description: Trimmed summary text, possibly empty
        source_url: Page URL the item points at (usually the link)
        publish_date: Best-effort publish time, harvest time when unknown
        image_url: Absolute image URL, possibly empty
        tags: Comma-separated tags
        organizer: Event organizer, possibly empty
        location: Event location, possibly empty
        content_type: News or event classification
        category: Free-form category label
    """

    title: str
    link: str
    source_name: str
    fingerprint: str
    description: str = ""
    source_url: str = ""
    publish_date: datetime = field(default_factory=utc_now)
    image_url: str = ""
    tags: str = ""
    organizer: str = ""
    location: str = ""
    content_type: ContentType = ContentType.NEWS
    category: str = ""


@dataclass
class NewsDraft:
    """Persist-ready news article."""

    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    source: str
    source_url: str
    external_id: str
    image_url: str
    tags: str
    published_at: datetime


@dataclass
class EventDraft:
    """Persist-ready event."""

    title: str
    description: str
    category: str
    organizer: str
    location: str
    is_virtual: bool
    link: str
    start_date: datetime
    source: str
    source_url: str
    external_id: str
    image_url: str
    tags: str


NormalizedItem = Union[NewsDraft, EventDraft]
