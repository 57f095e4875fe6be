"""
Page fetching and item extraction.

This package handles polite HTTP fetching and the selector-driven
conversion of listing pages into scraped items.
"""

from .extractor import extract_items
from .fetcher import FetchResult, PageFetcher, categorize_error

__all__ = [
    "PageFetcher",
    "FetchResult",
    "categorize_error",
    "extract_items",
]
