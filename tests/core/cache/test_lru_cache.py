"""Tests for LRUCache ordering and eviction."""

from __future__ import annotations

import pytest

from core.cache.lru_cache import LRUCache


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        LRUCache(0)


def test_set_evicts_least_recently_used() -> None:
    """Inserting into a full cache returns the evicted pair."""
    cache = LRUCache(2)
    assert cache.set("a", "1") is None
    assert cache.set("b", "2") is None

    evicted: tuple[str, str] | None = cache.set("c", "3")

    assert evicted == ("a", "1")
    assert "a" not in cache
    assert len(cache) == 2


def test_get_refreshes_recency() -> None:
    cache = LRUCache(2)
    cache.set("a", "1")
    cache.set("b", "2")

    assert cache.get("a") == "1"
    assert cache.set("c", "3") == ("b", "2")
    assert list(cache.keys()) == ["a", "c"]


def test_peek_does_not_refresh_recency() -> None:
    cache = LRUCache(2)
    cache.set("a", "1")
    cache.set("b", "2")

    assert cache.peek("a") == "1"
    assert cache.set("c", "3") == ("a", "1")


def test_update_existing_key_does_not_evict() -> None:
    cache = LRUCache(2)
    cache.set("a", "1")
    cache.set("b", "2")

    assert cache.set("a", "updated") is None
    assert cache.peek("a") == "updated"
    assert list(cache.items()) == [("b", "2"), ("a", "updated")]


def test_delete_and_clear() -> None:
    cache = LRUCache(3)
    cache.set("a", "1")
    cache.set("b", "2")

    assert cache.delete("a") == "1"
    assert cache.delete("missing") is None
    assert list(cache.keys()) == ["b"]

    cache.clear()
    assert len(cache) == 0
    assert list(cache.items()) == []
    cache.set("c", "3")
    assert cache.get("c") == "3"
