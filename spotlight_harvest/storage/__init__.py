"""
Persistence for harvested news and events.
"""

from .models import Base, EventRecord, NewsRecord
from .store import ContentStore, RecordKind, SqlContentStore, create_store

__all__ = [
    "Base",
    "NewsRecord",
    "EventRecord",
    "ContentStore",
    "RecordKind",
    "SqlContentStore",
    "create_store",
]
