"""Least-recently-used map built on a doubly linked list and a dict."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__: list[str] = ["LRUCache"]


class _LRUNode:
    __slots__ = ("key", "next", "prev", "value")

    def __init__(self, key: str, value: str) -> None:
        self.key: str = key
        self.value: str = value
        self.prev: _LRUNode | None = None
        self.next: _LRUNode | None = None


class LRUCache:
    """Bounded string map that evicts the least recently used entry.

    ``get`` and ``set`` move the entry to the most recently used end; ``peek`` and the
    iteration helpers do not change the order. Iteration runs from least to most recently used.

    Args:
        capacity (int): Maximum number of entries. Must be at least 1.

    Raises:
        ValueError: If capacity is less than 1.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            msg = f"LRU capacity must be at least 1: {capacity}"
            raise ValueError(msg)
        self.capacity: int = capacity
        self._map: dict[str, _LRUNode] = {}
        # Sentinels: head.next is the most recently used, tail.prev the least
        self._head: _LRUNode = _LRUNode("", "")
        self._tail: _LRUNode = _LRUNode("", "")
        self._head.next = self._tail
        self._tail.prev = self._head

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def get(self, key: str) -> str | None:
        node: _LRUNode | None = self._map.get(key)
        if node is None:
            return None
        self._unlink(node)
        self._push_front(node)
        return node.value

    def peek(self, key: str) -> str | None:
        node: _LRUNode | None = self._map.get(key)
        return node.value if node is not None else None

    def set(self, key: str, value: str) -> tuple[str, str] | None:
        """Insert or update an entry and mark it most recently used.

        Args:
            key (str): Entry key.
            value (str): Entry value.

        Returns:
            tuple[str, str] | None: The evicted ``(key, value)`` pair, or None if nothing was evicted.
        """
        node: _LRUNode | None = self._map.get(key)
        if node is not None:
            node.value = value
            self._unlink(node)
            self._push_front(node)
            return None

        evicted: tuple[str, str] | None = None
        if len(self._map) >= self.capacity:
            lru: _LRUNode | None = self._tail.prev
            if lru is not None and lru is not self._head:
                self._unlink(lru)
                del self._map[lru.key]
                evicted = (lru.key, lru.value)

        node = _LRUNode(key, value)
        self._map[key] = node
        self._push_front(node)
        return evicted

    def delete(self, key: str) -> str | None:
        node: _LRUNode | None = self._map.pop(key, None)
        if node is None:
            return None
        self._unlink(node)
        return node.value

    def clear(self) -> None:
        self._map.clear()
        self._head.next = self._tail
        self._tail.prev = self._head

    def keys(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key

    def items(self) -> Iterator[tuple[str, str]]:
        node: _LRUNode | None = self._tail.prev
        while node is not None and node is not self._head:
            yield node.key, node.value
            node = node.prev

    def _unlink(self, node: _LRUNode) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        node.prev = None
        node.next = None

    def _push_front(self, node: _LRUNode) -> None:
        first: _LRUNode | None = self._head.next
        node.prev = self._head
        node.next = first
        self._head.next = node
        if first is not None:
            first.prev = node
