"""Models for translation requests, results and progress reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Literal

__all__: list[str] = [
    "LanguageProgress",
    "RateLimitStatus",
    "StreamingTranslationResult",
    "TranslationEntry",
    "TranslationOrigin",
    "TranslationPriority",
    "TranslationProgress",
    "TranslationRequest",
]

type TranslationPriority = Literal["low", "normal", "high"]


class TranslationOrigin(StrEnum):
    MANUAL = "manual"
    AI = "ai"
    IMPORTED = "imported"


@dataclass(frozen=True)
class TranslationEntry:
    """A resolved translation as announced to resource listeners.

    Attributes:
        key (str): Dot-segmented translation key.
        source_text (str): Text in the source language.
        translated_text (str): Text in the target language.
        language (str): Target language code.
        origin (TranslationOrigin): How the text was produced.
        created_at (datetime): When the translation was resolved.
    """

    key: str
    source_text: str
    translated_text: str
    language: str
    origin: TranslationOrigin = TranslationOrigin.AI
    created_at: datetime = field(default_factory=lambda: datetime.now().astimezone())


@dataclass
class TranslationRequest:
    """Queue item for a background translation.

    Attributes:
        key (str): Translation key.
        source_text (str): Text to translate.
        target_language (str): Target language code.
        context (str): Human-readable context passed to the translation client.
        priority (TranslationPriority): Scheduling hint.
        retry_count (int): Failed attempts so far.
        last_attempt (datetime | None): Time of the last failed attempt.
    """

    key: str
    source_text: str
    target_language: str
    context: str = ""
    priority: TranslationPriority = "normal"
    retry_count: int = 0
    last_attempt: datetime | None = None

    @property
    def queue_key(self) -> str:
        return f"{self.key}:{self.target_language}"


@dataclass(frozen=True)
class StreamingTranslationResult:
    language: str
    text: str


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of the translation client's rate limit counters.

    Attributes:
        remaining (int): Requests left in the current minute window.
        reset_time (datetime): When the current minute window resets.
        daily_remaining (int): Requests left until the daily cap.
    """

    remaining: int
    reset_time: datetime
    daily_remaining: int = 0


@dataclass(frozen=True)
class TranslationProgress:
    key: str
    progress: int


@dataclass
class LanguageProgress:
    total: int = 0
    translated: int = 0
    pending: int = 0
