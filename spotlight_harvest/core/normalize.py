"""
Normalization of scraped items into persist-ready drafts.

Each ScrapedItem is classified (event or news), given a slug when it becomes
a news article, and has its fields clipped to the storage column widths.
"""

from __future__ import annotations

import re

from .types import ContentType, EventDraft, NewsDraft, NormalizedItem, ScrapedItem


SLUG_MAX_CHARS = 200

# Storage column widths.
NEWS_TITLE_MAX = 500
EVENT_TITLE_MAX = 255
SOURCE_MAX = 100
URL_MAX = 500
EXTERNAL_ID_MAX = 255
CATEGORY_MAX = 50
ORGANIZER_MAX = 255
LOCATION_MAX = 255

_WHITESPACE_RE = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Convert a title to a URL slug.

    Lowercases the title, replaces each whitespace run with a single hyphen,
    drops single and double quotes and cuts the result to 200 characters.
    Uniqueness is left to the storage layer.

    Args:
        title: The item title

    Returns:
        The slug, at most SLUG_MAX_CHARS characters long
    """
    slug = title.lower()
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = slug.replace("'", "").replace('"', "")
    return slug[:SLUG_MAX_CHARS]


def is_virtual_location(location: str) -> bool:
    return "virtual" in (location or "").lower()


def clip(value: str | None, limit: int) -> str:
    text = value or ""
    return text[:limit]


def normalize_item(item: ScrapedItem) -> NormalizedItem:
    """Classify a scraped item and build its persist-ready draft.

    Args:
        item: The transient item from a collector

    Returns:
        An EventDraft when the item is an event, otherwise a NewsDraft
    """
    if ContentType.parse(item.content_type) is ContentType.EVENT:
        return _to_event(item)
    return _to_news(item)


def _to_news(item: ScrapedItem) -> NewsDraft:
    return NewsDraft(
        title=clip(item.title, NEWS_TITLE_MAX),
        slug=slugify(item.title),
        excerpt=item.description,
        content=item.description,
        category=clip(item.category, CATEGORY_MAX),
        source=clip(item.source_name, SOURCE_MAX),
        source_url=clip(item.source_url or item.link, URL_MAX),
        external_id=clip(item.fingerprint, EXTERNAL_ID_MAX),
        image_url=clip(item.image_url, URL_MAX),
        tags=item.tags,
        published_at=item.publish_date,
    )


def _to_event(item: ScrapedItem) -> EventDraft:
    return EventDraft(
        title=clip(item.title, EVENT_TITLE_MAX),
        description=item.description,
        category=clip(item.category, CATEGORY_MAX),
        organizer=clip(item.organizer, ORGANIZER_MAX),
        location=clip(item.location, LOCATION_MAX),
        is_virtual=is_virtual_location(item.location),
        link=clip(item.link, URL_MAX),
        start_date=item.publish_date,
        source=clip(item.source_name, SOURCE_MAX),
        source_url=clip(item.source_url or item.link, URL_MAX),
        external_id=clip(item.fingerprint, EXTERNAL_ID_MAX),
        image_url=clip(item.image_url, URL_MAX),
        tags=item.tags,
    )
