"""Translation cache package.

Provides the LRU translation cache, the pending set and snapshot persistence ports.
"""

from __future__ import annotations

from core.cache.lru_cache import LRUCache
from core.cache.manager import TranslationCacheManager
from core.cache.snapshot_store import JsonFileSnapshotStore, MemorySnapshotStore, NullSnapshotStore, SnapshotStore

__all__: list[str] = [
    "JsonFileSnapshotStore",
    "LRUCache",
    "MemorySnapshotStore",
    "NullSnapshotStore",
    "SnapshotStore",
    "TranslationCacheManager",
]
