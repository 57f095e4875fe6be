"""Stable identifiers for scraped content."""

from __future__ import annotations

import uuid


def fingerprint(link: str) -> str:
    """Return the dedup key for a canonical link.

    The value is a version-5 UUID in the URL namespace, so it depends on the
    link bytes only and is identical across processes and sources.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_URL, link))
