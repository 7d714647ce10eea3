"""Data models for AutoLocale.

This package contains dataclass definitions for configuration, translation requests and results,
errors, cache snapshots, recovery and health reports, Gemini API payloads, and regular expression
patterns used throughout the application.
"""

from __future__ import annotations

from models.cache_models import CacheSnapshot, CacheStatistics
from models.config_models import Config
from models.error_models import (
    AIErrorCode,
    CacheErrorCode,
    ConfigurationErrorCode,
    ErrorCategory,
    FileSystemErrorCode,
    TranslationError,
    ValidationErrorCode,
)
from models.gemini_models import GenerateContentRequest, GenerateContentResponse, GenerationConfig
from models.re_models import (
    BATCH_LINE_PREFIX_PATTERN,
    INTERPOLATION_PATTERN,
    LANGUAGE_CODE_PATTERN,
    TRANSLATION_KEY_PATTERN,
)
from models.recovery_models import (
    ApiKeyValidationResult,
    ErrorContext,
    ErrorRecoveryResult,
    HealthIssue,
    NetworkRecoveryResult,
    ServiceHealth,
    SystemHealthStatus,
)
from models.translation_models import (
    LanguageProgress,
    RateLimitStatus,
    StreamingTranslationResult,
    TranslationEntry,
    TranslationOrigin,
    TranslationProgress,
    TranslationRequest,
)

__all__: list[str] = [
    "BATCH_LINE_PREFIX_PATTERN",
    "INTERPOLATION_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "TRANSLATION_KEY_PATTERN",
    "AIErrorCode",
    "ApiKeyValidationResult",
    "CacheErrorCode",
    "CacheSnapshot",
    "CacheStatistics",
    "Config",
    "ConfigurationErrorCode",
    "ErrorCategory",
    "ErrorContext",
    "ErrorRecoveryResult",
    "FileSystemErrorCode",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "HealthIssue",
    "LanguageProgress",
    "NetworkRecoveryResult",
    "RateLimitStatus",
    "ServiceHealth",
    "StreamingTranslationResult",
    "SystemHealthStatus",
    "TranslationEntry",
    "TranslationError",
    "TranslationOrigin",
    "TranslationProgress",
    "TranslationRequest",
    "ValidationErrorCode",
]
