"""Configuration data models for the localization pipeline.

Each data class maps to one section of the INI configuration file. Field names match
the INI keys; defaults apply when a key is not defined in the file.
Durations are in seconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Config",
    "Gemini",
    "General",
    "Recovery",
    "Retry",
    "Store",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    ENGINE: str = "gemini"
    SOURCE_LANGUAGE: str = "en"
    MAX_BATCH_SIZE: int = 10
    MAX_TEXT_LENGTH: int = 5000
    BATCH_DELAY: float = 1.0
    LANGUAGE_GROUP_SIZE: int = 3
    MAX_CONCURRENT_REQUESTS: int = 5
    CHUNK_SIZE: int = 50
    MAX_RETRIES: int = 3
    QUEUE_BATCH_DELAY: float = 1.0


@dataclass
class Gemini:
    BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    MODEL: str = "gemini-2.5-flash"
    API_KEY_ENV: str = "GEMINI_API_KEY"
    TIMEOUT: float = 30.0
    RATE_LIMIT_RPM: int = 60
    RATE_LIMIT_RPD: int = 1500
    MIN_REQUEST_INTERVAL: float = 1.0
    TEMPERATURE: float = 0.1
    TOP_K: int = 1
    TOP_P: float = 0.8
    MAX_OUTPUT_TOKENS: int = 2048


@dataclass
class Cache:
    MAX_ENTRIES: int = 10000
    TTL_HOURS: float = 24.0
    STORAGE_KEY: str = "ai-translation-cache"
    SNAPSHOT_FILE: str = ""  # Empty disables snapshot persistence
    MAX_STORAGE_MB: float = 10.0
    MAX_MEMORY_MB: float = 50.0


@dataclass
class Store:
    LOCALES_DIR: str = "src/locales"
    TRANSLATION_FILE: str = "translation.json"


@dataclass
class Retry:
    MAX_ATTEMPTS: int = 3
    BASE_DELAY: float = 1.0
    MAX_DELAY: float = 30.0
    JITTER_FACTOR: float = 0.1


@dataclass
class Recovery:
    HEALTH_CHECK_INTERVAL: float = 300.0
    NETWORK_RETRY_DELAY: float = 5.0
    RATE_LIMIT_MIN_DELAY: float = 60.0
    LOW_QUOTA_THRESHOLD: int = 10


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    GEMINI: Gemini = field(default_factory=Gemini)
    CACHE: Cache = field(default_factory=Cache)
    STORE: Store = field(default_factory=Store)
    RETRY: Retry = field(default_factory=Retry)
    RECOVERY: Recovery = field(default_factory=Recovery)
