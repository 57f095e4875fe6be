"""
Core domain models and pure transformations.

This package contains the data types, fingerprinting and normalization
logic, none of which touch the network or the database.
"""

from .fingerprint import fingerprint
from .normalize import normalize_item, slugify
from .types import ContentType, EventDraft, NewsDraft, NormalizedItem, ScrapedItem

__all__ = [
    "ContentType",
    "ScrapedItem",
    "NewsDraft",
    "EventDraft",
    "NormalizedItem",
    "fingerprint",
    "normalize_item",
    "slugify",
]
