# ruff: noqa: BLE001
"""Translation cache manager.

Keeps resolved translations in a bounded LRU keyed by language and translation key,
tracks which (key, language) pairs are waiting for a background translation, and persists
a snapshot of the cache through an injected key-value store.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, ClassVar, Final

from core.cache.lru_cache import LRUCache
from core.cache.snapshot_store import NullSnapshotStore, SnapshotStore
from models.cache_models import CacheSnapshot, CacheStatistics
from models.error_models import CacheErrorCode, TranslationError
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["TranslationCacheManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

BYTES_PER_CHAR: Final[int] = 2
SECONDS_PER_HOUR: Final[int] = 3600
BYTES_PER_MB: Final[int] = 1024 * 1024


class TranslationCacheManager:
    """In-memory cache of translations with a pending set and snapshot persistence.

    Cache entries are keyed ``translation:{language}:{key}``; pending markers are keyed
    ``pending:{language}:{key}``. The pending set is independent of the LRU and is never evicted.
    Mutations schedule a debounced snapshot flush on the running event loop.

    Attributes:
        FLUSH_DELAY_SEC (ClassVar[float]): Debounce delay before writing a snapshot.
    """

    FLUSH_DELAY_SEC: ClassVar[float] = 0.5

    def __init__(self, config: Config, snapshot_store: SnapshotStore | None = None) -> None:
        """Initialize the cache manager.

        Args:
            config (Config): Application configuration.
            snapshot_store (SnapshotStore | None): Where snapshots are persisted. Defaults to no persistence.
        """
        self.config: Config = config
        self._cache: LRUCache = LRUCache(config.CACHE.MAX_ENTRIES)
        self._pending: set[str] = set()
        self._snapshot_store: SnapshotStore = snapshot_store if snapshot_store is not None else NullSnapshotStore()
        self._memory_usage: int = 0
        self._language_counts: dict[str, int] = {}
        self._loaded_languages: set[str] = set()
        self._flush_task: asyncio.Task[None] | None = None
        self._discard_tasks: set[asyncio.Task[None]] = set()
        self._is_initialized: bool = False
        logger.debug("TranslationCacheManager instance created")

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def storage_key(self) -> str:
        return self.config.CACHE.STORAGE_KEY

    async def component_load(self) -> None:
        """Restore the cache from the most recent snapshot, if it is still fresh."""
        logger.info("TranslationCacheManager initialization started")
        await self._load_snapshot()
        self._is_initialized = True
        logger.info("TranslationCacheManager initialized with %d entries", len(self._cache))

    async def component_teardown(self) -> None:
        """Cancel the scheduled flush and write a final snapshot."""
        logger.info("TranslationCacheManager shutdown started")
        if self._flush_task is not None and not self._flush_task.done():
            self._flush_task.cancel()
            try:
                await self._flush_task
            except asyncio.CancelledError:
                pass
        self._flush_task = None
        if self._discard_tasks:
            await asyncio.gather(*self._discard_tasks)
        await self.flush_snapshot()
        self._is_initialized = False
        logger.info("TranslationCacheManager shutdown completed")

    def get(self, key: str, language: str) -> str | None:
        """Look up a translation and mark it most recently used.

        Raises:
            TranslationError: CACHE_INVALID_KEY if key or language is empty.
        """
        self._validate(key, language)
        value: str | None = self._cache.get(StringUtils.build_cache_key(key, language))
        logger.debug("Cache %s: %s [%s]", "hit" if value is not None else "miss", key, language)
        return value

    def peek(self, key: str, language: str) -> str | None:
        """Look up a translation without changing the eviction order."""
        self._validate(key, language)
        return self._cache.peek(StringUtils.build_cache_key(key, language))

    def set(self, key: str, language: str, text: str) -> None:
        """Store a translation, evicting the least recently used entry when full.

        Raises:
            TranslationError: CACHE_INVALID_KEY if key or language is empty or text is not a string.
        """
        self._validate(key, language)
        if not isinstance(text, str):
            raise TranslationError(CacheErrorCode.INVALID_KEY, f"value for {key} is not a string")

        cache_key: str = StringUtils.build_cache_key(key, language)
        previous: str | None = self._cache.peek(cache_key)
        evicted: tuple[str, str] | None = self._cache.set(cache_key, text)

        if previous is None:
            self._memory_usage += BYTES_PER_CHAR * (len(cache_key) + len(text))
            self._language_counts[language] = self._language_counts.get(language, 0) + 1
        else:
            self._memory_usage += BYTES_PER_CHAR * (len(text) - len(previous))

        if evicted is not None:
            evicted_key, evicted_value = evicted
            self._memory_usage -= BYTES_PER_CHAR * (len(evicted_key) + len(evicted_value))
            evicted_language: str = self._language_of(evicted_key)
            self._decrement_language(evicted_language)
            self._loaded_languages.discard(evicted_language)
            logger.debug("Cache evicted: %s", evicted_key)

        self._schedule_flush()

    def is_pending(self, key: str, language: str) -> bool:
        return StringUtils.build_pending_key(key, language) in self._pending

    def set_pending(self, key: str, language: str) -> None:
        self._validate(key, language)
        pending_key: str = StringUtils.build_pending_key(key, language)
        if pending_key not in self._pending:
            self._pending.add(pending_key)
            self._memory_usage += BYTES_PER_CHAR * len(pending_key)

    def remove_pending(self, key: str, language: str) -> None:
        pending_key: str = StringUtils.build_pending_key(key, language)
        if pending_key in self._pending:
            self._pending.discard(pending_key)
            self._memory_usage -= BYTES_PER_CHAR * len(pending_key)

    def get_all(self, language: str) -> dict[str, str]:
        """Return every cached translation of a language without changing the eviction order.

        Args:
            language (str): Language code.

        Returns:
            dict[str, str]: Translation key to text.
        """
        prefix: str = StringUtils.language_prefix(language)
        return {
            cache_key[len(prefix) :]: value for cache_key, value in self._cache.items() if cache_key.startswith(prefix)
        }

    def has_language(self, language: str) -> bool:
        return self._language_counts.get(language, 0) > 0

    def get_languages(self) -> list[str]:
        return sorted(language for language, count in self._language_counts.items() if count > 0)

    def mark_language_loaded(self, language: str, count: int) -> bool:
        """Record that every one of ``count`` stored translations of a language is cached.

        The mark is refused when fewer entries are cached, e.g. because the language did not fit,
        and it is dropped again as soon as an entry of the language is evicted.

        Returns:
            bool: True if the language is now marked as loaded.
        """
        if self._language_counts.get(language, 0) < count:
            self._loaded_languages.discard(language)
            return False
        self._loaded_languages.add(language)
        return True

    def is_language_loaded(self, language: str) -> bool:
        return language in self._loaded_languages

    def clear(self) -> None:
        """Drop every cached translation, every pending marker and the persisted snapshot.

        The snapshot is removed in a worker thread when an event loop is running.
        """
        self._cache.clear()
        self._pending.clear()
        self._memory_usage = 0
        self._language_counts.clear()
        self._loaded_languages.clear()
        if self._flush_task is not None and not self._flush_task.done():
            self._flush_task.cancel()
        self._flush_task = None
        try:
            loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                self._snapshot_store.remove(self.storage_key)
            except Exception as err:
                logger.warning("Failed to remove cache snapshot: %s", err)
        else:
            task: asyncio.Task[None] = loop.create_task(self._discard_snapshot(), name="cache_snapshot_discard")
            self._discard_tasks.add(task)
            task.add_done_callback(self._discard_tasks.discard)
        logger.info("Translation cache cleared")

    def estimate_memory_usage(self) -> int:
        """Return the estimated footprint in bytes (two bytes per character of keys and values)."""
        return self._memory_usage

    def get_stats(self) -> CacheStatistics:
        return CacheStatistics(
            translation_count=len(self._cache),
            pending_count=len(self._pending),
            memory_usage=self._memory_usage,
            capacity=self._cache.capacity,
            languages={language: count for language, count in self._language_counts.items() if count > 0},
        )

    async def flush_snapshot(self) -> bool:
        """Write the current cache contents to the snapshot store.

        Failures are logged and never raised.

        Returns:
            bool: True if a snapshot was written.
        """
        snapshot = CacheSnapshot(translations=dict(self._cache.items()), timestamp=time.time())
        payload: str = snapshot.to_json(ensure_ascii=False)
        size_mb: float = len(payload.encode("utf-8")) / BYTES_PER_MB
        if size_mb > self.config.CACHE.MAX_STORAGE_MB:
            logger.warning(
                "Cache snapshot skipped: %.2f MB exceeds the %.2f MB limit", size_mb, self.config.CACHE.MAX_STORAGE_MB
            )
            return False
        try:
            await asyncio.to_thread(self._snapshot_store.set, self.storage_key, payload)
        except Exception as err:
            logger.warning("Failed to persist cache snapshot: %s", err)
            return False
        logger.debug("Cache snapshot written with %d entries", len(snapshot.translations))
        return True

    async def _load_snapshot(self) -> None:
        try:
            raw: str | None = await asyncio.to_thread(self._snapshot_store.get, self.storage_key)
        except Exception as err:
            logger.warning("Failed to read cache snapshot: %s", err)
            return
        if raw is None:
            return

        try:
            snapshot: CacheSnapshot = CacheSnapshot.from_json(raw, infer_missing=True)
            if not isinstance(snapshot.translations, dict) or not isinstance(snapshot.timestamp, int | float):
                msg = "unexpected snapshot layout"
                raise TypeError(msg)
        except Exception as err:
            logger.warning("Discarding unreadable cache snapshot: %s", err)
            await self._discard_snapshot()
            return

        age_sec: float = time.time() - snapshot.timestamp
        if age_sec > self.config.CACHE.TTL_HOURS * SECONDS_PER_HOUR:
            logger.info("Discarding cache snapshot older than %.1f hours", self.config.CACHE.TTL_HOURS)
            await self._discard_snapshot()
            return

        restored: int = 0
        for cache_key, value in snapshot.translations.items():
            parts: list[str] = cache_key.split(":", 2)
            if len(parts) != 3 or not isinstance(value, str):  # noqa: PLR2004
                continue
            _, language, key = parts
            try:
                self.set(key, language, value)
            except TranslationError:
                continue
            restored += 1
        logger.debug("Restored %d entries from cache snapshot", restored)

    async def _discard_snapshot(self) -> None:
        try:
            await asyncio.to_thread(self._snapshot_store.remove, self.storage_key)
        except Exception as err:
            logger.warning("Failed to remove cache snapshot: %s", err)

    def _schedule_flush(self) -> None:
        try:
            loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = loop.create_task(self._delayed_flush(), name="cache_snapshot_flush")

    async def _delayed_flush(self) -> None:
        await asyncio.sleep(self.FLUSH_DELAY_SEC)
        await self.flush_snapshot()

    def _decrement_language(self, language: str) -> None:
        count: int = self._language_counts.get(language, 0) - 1
        if count > 0:
            self._language_counts[language] = count
        else:
            self._language_counts.pop(language, None)

    @staticmethod
    def _language_of(cache_key: str) -> str:
        parts: list[str] = cache_key.split(":", 2)
        return parts[1] if len(parts) > 1 else ""

    @staticmethod
    def _validate(key: str, language: str) -> None:
        if not isinstance(key, str) or not key or not isinstance(language, str) or not language:
            raise TranslationError(CacheErrorCode.INVALID_KEY, f"key={key!r}, language={language!r}")
