"""Tests for TranslationCacheManager.

Tests lookups, pending markers, eviction bookkeeping, and snapshot persistence.
"""

from __future__ import annotations

import asyncio
import json
import threading
import time
from typing import TYPE_CHECKING

import pytest

from core.cache.manager import TranslationCacheManager
from core.cache.snapshot_store import MemorySnapshotStore
from models.cache_models import CacheSnapshot
from models.config_models import Config
from models.error_models import CacheErrorCode, TranslationError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from models.cache_models import CacheStatistics


@pytest.fixture
def config() -> Config:
    config = Config()
    config.CACHE.MAX_ENTRIES = 3
    return config


@pytest.fixture
def snapshot_store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
async def cache_manager(config: Config, snapshot_store: MemorySnapshotStore) -> AsyncGenerator[TranslationCacheManager]:
    """Create a loaded TranslationCacheManager backed by an in-memory snapshot store."""
    manager = TranslationCacheManager(config, snapshot_store)
    await manager.component_load()
    yield manager
    await manager.component_teardown()


@pytest.mark.asyncio
async def test_cache_initialization(cache_manager: TranslationCacheManager) -> None:
    assert cache_manager.is_initialized is True
    assert cache_manager.get_stats().translation_count == 0


@pytest.mark.asyncio
async def test_get_miss_and_hit(cache_manager: TranslationCacheManager) -> None:
    assert cache_manager.get("welcome", "fr") is None
    cache_manager.set("welcome", "fr", "Bienvenue !")
    assert cache_manager.get("welcome", "fr") == "Bienvenue !"
    assert cache_manager.get("welcome", "de") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(("key", "language"), [("", "fr"), ("welcome", ""), ("", "")])
async def test_empty_key_or_language_is_rejected(
    cache_manager: TranslationCacheManager, key: str, language: str
) -> None:
    with pytest.raises(TranslationError) as exc_info:
        cache_manager.set(key, language, "text")
    assert exc_info.value.code == CacheErrorCode.INVALID_KEY

    with pytest.raises(TranslationError):
        cache_manager.get(key, language)


@pytest.mark.asyncio
async def test_eviction_updates_statistics(cache_manager: TranslationCacheManager) -> None:
    """The least recently used entry is evicted and its language count drops."""
    cache_manager.set("a", "fr", "A")
    cache_manager.set("b", "fr", "B")
    cache_manager.set("c", "de", "C")
    cache_manager.get("a", "fr")

    cache_manager.set("d", "de", "D")

    assert cache_manager.peek("b", "fr") is None
    stats: CacheStatistics = cache_manager.get_stats()
    assert stats.translation_count == 3
    assert stats.capacity == 3
    assert stats.languages == {"fr": 1, "de": 2}


@pytest.mark.asyncio
async def test_memory_estimate_tracks_updates(cache_manager: TranslationCacheManager) -> None:
    cache_manager.set("k", "fr", "ab")
    first: int = cache_manager.estimate_memory_usage()
    assert first == 2 * (len("translation:fr:k") + 2)

    cache_manager.set("k", "fr", "abcd")
    assert cache_manager.estimate_memory_usage() == first + 4


@pytest.mark.asyncio
async def test_pending_markers(cache_manager: TranslationCacheManager) -> None:
    assert cache_manager.is_pending("welcome", "fr") is False
    cache_manager.set_pending("welcome", "fr")
    cache_manager.set_pending("welcome", "fr")
    assert cache_manager.is_pending("welcome", "fr") is True
    assert cache_manager.get_stats().pending_count == 1

    cache_manager.remove_pending("welcome", "fr")
    assert cache_manager.is_pending("welcome", "fr") is False
    assert cache_manager.estimate_memory_usage() == 0


@pytest.mark.asyncio
async def test_pending_markers_are_not_evicted(cache_manager: TranslationCacheManager) -> None:
    cache_manager.set_pending("x", "fr")
    for index in range(10):
        cache_manager.set(f"k{index}", "fr", "v")
    assert cache_manager.is_pending("x", "fr") is True


@pytest.mark.asyncio
async def test_get_all_and_languages(cache_manager: TranslationCacheManager) -> None:
    cache_manager.set("nav.home", "fr", "Accueil")
    cache_manager.set("nav.settings", "fr", "Paramètres")
    cache_manager.set("nav.home", "de", "Startseite")

    assert cache_manager.get_all("fr") == {"nav.home": "Accueil", "nav.settings": "Paramètres"}
    assert cache_manager.get_languages() == ["de", "fr"]
    assert cache_manager.has_language("fr") is True
    assert cache_manager.has_language("es") is False


@pytest.mark.asyncio
async def test_clear_removes_everything(
    cache_manager: TranslationCacheManager, snapshot_store: MemorySnapshotStore
) -> None:
    cache_manager.set("welcome", "fr", "Bienvenue !")
    cache_manager.set_pending("nav.home", "fr")
    await cache_manager.flush_snapshot()
    assert snapshot_store.get("ai-translation-cache") is not None

    cache_manager.clear()

    assert cache_manager.get("welcome", "fr") is None
    assert cache_manager.is_pending("nav.home", "fr") is False
    assert cache_manager.estimate_memory_usage() == 0
    await asyncio.gather(*cache_manager._discard_tasks)  # noqa: SLF001
    assert snapshot_store.get("ai-translation-cache") is None


def test_clear_without_event_loop_removes_snapshot(config: Config, snapshot_store: MemorySnapshotStore) -> None:
    snapshot_store.set(config.CACHE.STORAGE_KEY, "{}")
    manager = TranslationCacheManager(config, snapshot_store)

    manager.clear()

    assert snapshot_store.get(config.CACHE.STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_clear_removes_snapshot_off_the_event_loop(
    cache_manager: TranslationCacheManager, snapshot_store: MemorySnapshotStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    threads: list[str] = []
    original_remove = snapshot_store.remove

    def remove(key: str) -> None:
        threads.append(threading.current_thread().name)
        original_remove(key)

    monkeypatch.setattr(snapshot_store, "remove", remove)

    cache_manager.clear()
    assert threads == []

    await asyncio.gather(*cache_manager._discard_tasks)  # noqa: SLF001
    assert len(threads) == 1
    assert threads[0] != threading.main_thread().name


@pytest.mark.asyncio
async def test_language_loaded_mark(cache_manager: TranslationCacheManager) -> None:
    cache_manager.set("welcome", "fr", "Bienvenue !")
    cache_manager.set("nav.home", "fr", "Accueil")

    assert cache_manager.is_language_loaded("fr") is False
    assert cache_manager.mark_language_loaded("fr", 3) is False
    assert cache_manager.mark_language_loaded("fr", 2) is True
    assert cache_manager.is_language_loaded("fr") is True

    cache_manager.set("welcome", "de", "Willkommen!")
    assert cache_manager.is_language_loaded("fr") is True
    cache_manager.set("nav.home", "de", "Startseite")
    assert cache_manager.get_all("fr") == {"nav.home": "Accueil"}
    assert cache_manager.is_language_loaded("fr") is False

    assert cache_manager.mark_language_loaded("de", 2) is True
    cache_manager.clear()
    assert cache_manager.is_language_loaded("de") is False


@pytest.mark.asyncio
async def test_snapshot_is_restored_on_load(config: Config, snapshot_store: MemorySnapshotStore) -> None:
    """A teardown snapshot is restored by the next instance."""
    first = TranslationCacheManager(config, snapshot_store)
    await first.component_load()
    first.set("welcome", "fr", "Bienvenue !")
    await first.component_teardown()

    second = TranslationCacheManager(config, snapshot_store)
    await second.component_load()
    try:
        assert second.get("welcome", "fr") == "Bienvenue !"
    finally:
        await second.component_teardown()


@pytest.mark.asyncio
async def test_expired_snapshot_is_discarded(config: Config, snapshot_store: MemorySnapshotStore) -> None:
    stale_time: float = time.time() - (config.CACHE.TTL_HOURS + 1) * 3600
    snapshot = CacheSnapshot(translations={"translation:fr:welcome": "Bienvenue !"}, timestamp=stale_time)
    snapshot_store.set(config.CACHE.STORAGE_KEY, snapshot.to_json())

    manager = TranslationCacheManager(config, snapshot_store)
    await manager.component_load()

    assert manager.get("welcome", "fr") is None
    assert snapshot_store.get(config.CACHE.STORAGE_KEY) is None
    manager.clear()


@pytest.mark.asyncio
async def test_corrupt_snapshot_is_discarded(config: Config, snapshot_store: MemorySnapshotStore) -> None:
    snapshot_store.set(config.CACHE.STORAGE_KEY, "{not json")

    manager = TranslationCacheManager(config, snapshot_store)
    await manager.component_load()

    assert manager.is_initialized is True
    assert manager.get_stats().translation_count == 0
    assert snapshot_store.get(config.CACHE.STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_oversized_snapshot_is_skipped(config: Config, snapshot_store: MemorySnapshotStore) -> None:
    config.CACHE.MAX_STORAGE_MB = 0.00001
    manager = TranslationCacheManager(config, snapshot_store)
    manager.set("long", "fr", "x" * 1000)

    assert await manager.flush_snapshot() is False
    assert snapshot_store.get(config.CACHE.STORAGE_KEY) is None
    manager.clear()


@pytest.mark.asyncio
async def test_snapshot_layout(cache_manager: TranslationCacheManager, snapshot_store: MemorySnapshotStore) -> None:
    cache_manager.set("welcome", "fr", "Bienvenue !")
    assert await cache_manager.flush_snapshot() is True

    data = json.loads(snapshot_store.get("ai-translation-cache") or "{}")
    assert data["translations"] == {"translation:fr:welcome": "Bienvenue !"}
    assert isinstance(data["timestamp"], float)
