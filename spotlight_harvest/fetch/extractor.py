"""
Selector-driven extraction of content items from listing pages.

A source's SourceConfig names an item selector (one match per content card)
and child selectors for each field. Only cards yielding both a title and a
link are turned into ScrapedItems.
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from ..config import SourceConfig
from ..core.fingerprint import fingerprint
from ..core.types import ContentType, ScrapedItem, utc_now


def extract_items(
    html: str,
    page_url: str,
    source: SourceConfig,
    harvested_at: datetime | None = None,
) -> list[ScrapedItem]:
    """Extract content items from one page.

    Args:
        html: Page HTML
        page_url: URL the page was served from, used to resolve relative links
        source: Extraction rules for the page's source
        harvested_at: Fallback publish date, defaults to now

    Returns:
        Items in document order; cards without title or link are skipped
    """
    harvested_at = harvested_at or utc_now()
    soup = BeautifulSoup(html, "html.parser")
    items: list[ScrapedItem] = []
    for card in soup.select(source.item_selector):
        item = _extract_card(card, page_url, source, harvested_at)
        if item is not None:
            items.append(item)
    return items


def _extract_card(
    card: Tag,
    page_url: str,
    source: SourceConfig,
    harvested_at: datetime,
) -> ScrapedItem | None:
    title = child_text(card, source.title_selector)
    link = absolute_url(page_url, child_attr(card, source.link_selector, "href"))
    if not title or not link:
        return None

    image_url = ""
    if source.image_selector:
        image_url = absolute_url(page_url, child_attr(card, source.image_selector, "src"))

    publish_date = harvested_at
    if source.date_selector:
        publish_date = _extract_date(card, source.date_selector) or harvested_at

    return ScrapedItem(
        title=title,
        link=link,
        source_name=source.name,
        fingerprint=fingerprint(link),
        description=child_text(card, source.description_selector),
        source_url=link,
        publish_date=publish_date,
        image_url=image_url,
        tags=source.tags,
        organizer=child_text(card, source.organizer_selector),
        location=child_text(card, source.location_selector),
        content_type=ContentType.parse(source.content_type),
        category=source.category,
    )


def child_text(card: Tag, selector: str) -> str:
    """Return the stripped text of the first element matching selector."""
    if not selector:
        return ""
    node = card.select_one(selector)
    if node is None:
        return ""
    return " ".join(node.get_text(" ", strip=True).split())


def child_attr(card: Tag, selector: str, attr: str) -> str:
    """Return an attribute of the first matching element, or of the card itself."""
    if not selector:
        return ""
    node = card.select_one(selector)
    if node is None and card.name and card.name in {s.strip() for s in selector.split(",")}:
        node = card
    if node is None:
        return ""
    value = node.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def absolute_url(page_url: str, href: str) -> str:
    """Resolve href against page_url, keeping only http(s) results."""
    if not href:
        return ""
    resolved = urljoin(page_url, href)
    if urlparse(resolved).scheme not in ("http", "https"):
        return ""
    return resolved.split("#", 1)[0]


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    s = (value or "").strip()
    if not s:
        return None
    s = s.replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _extract_date(card: Tag, selector: str) -> datetime | None:
    node = card.select_one(selector)
    if node is None:
        return None
    raw = node.get("datetime") or node.get("content") or node.get_text(strip=True)
    if isinstance(raw, list):
        raw = " ".join(raw)
    return parse_datetime(raw)
