"""Tests for the cache snapshot stores."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.cache.snapshot_store import JsonFileSnapshotStore, MemorySnapshotStore, NullSnapshotStore, SnapshotStore

if TYPE_CHECKING:
    from pathlib import Path


def test_stores_satisfy_protocol(tmp_path: Path) -> None:
    for store in (NullSnapshotStore(), MemorySnapshotStore(), JsonFileSnapshotStore(tmp_path / "s.json")):
        assert isinstance(store, SnapshotStore)


def test_null_store_keeps_nothing() -> None:
    store = NullSnapshotStore()
    store.set("key", "value")
    assert store.get("key") is None


def test_memory_store_roundtrip() -> None:
    store = MemorySnapshotStore()
    store.set("key", "value")
    assert store.get("key") == "value"
    store.remove("key")
    assert store.get("key") is None


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path: Path = tmp_path / "nested" / "snapshot.json"
    JsonFileSnapshotStore(path).set("ai-translation-cache", '{"translations": {}}')

    store = JsonFileSnapshotStore(path)
    assert store.get("ai-translation-cache") == '{"translations": {}}'
    assert not list(path.parent.glob("*.tmp.*"))

    store.remove("ai-translation-cache")
    assert store.get("ai-translation-cache") is None


def test_json_file_store_treats_corrupt_file_as_empty(tmp_path: Path) -> None:
    path: Path = tmp_path / "snapshot.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileSnapshotStore(path)
    assert store.get("key") is None
    store.set("key", "value")
    assert store.get("key") == "value"
