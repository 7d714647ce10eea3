"""Models for the translation cache.

Defines the persisted snapshot format and cache usage statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, dataclass_json

__all__: list[str] = ["CacheSnapshot", "CacheStatistics"]


@dataclass_json
@dataclass
class CacheSnapshot(DataClassJsonMixin):
    """Serialized form of the cache written to the snapshot store.

    Attributes:
        translations (dict[str, str]): Cache key to translated text, least recently used first.
        timestamp (float): Epoch seconds at which the snapshot was taken.
    """

    translations: dict[str, str] = field(default_factory=dict)
    timestamp: float = 0.0


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        translation_count (int): Number of cached translations.
        pending_count (int): Number of (key, language) pairs awaiting translation.
        memory_usage (int): Estimated memory footprint in bytes.
        capacity (int): Maximum number of cached translations.
        languages (dict[str, int]): Cached translations per language.
    """

    translation_count: int = 0
    pending_count: int = 0
    memory_usage: int = 0
    capacity: int = 0
    languages: dict[str, int] = field(default_factory=dict)
