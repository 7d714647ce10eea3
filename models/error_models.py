"""Error taxonomy for the localization pipeline.

A single exception type, ``TranslationError``, carries a category and a stable code.
Codes are grouped into one StrEnum per category; the category of an error is derived
from the enum its code belongs to, so callers can dispatch with ``match err.category``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__: list[str] = [
    "ERROR_MESSAGES",
    "AIErrorCode",
    "CacheErrorCode",
    "ConfigurationErrorCode",
    "ErrorCategory",
    "ErrorCode",
    "FileSystemErrorCode",
    "TranslationError",
    "ValidationErrorCode",
]


class ErrorCategory(StrEnum):
    AI_SERVICE = "AI_SERVICE"
    FILE_SYSTEM = "FILE_SYSTEM"
    CACHE = "CACHE"
    VALIDATION = "VALIDATION"
    CONFIGURATION = "CONFIGURATION"


class AIErrorCode(StrEnum):
    NETWORK_ERROR = "AI_NETWORK_ERROR"
    API_KEY_INVALID = "AI_API_KEY_INVALID"
    API_KEY_MISSING = "AI_API_KEY_MISSING"
    RATE_LIMIT_EXCEEDED = "AI_RATE_LIMIT_EXCEEDED"
    INVALID_RESPONSE = "AI_INVALID_RESPONSE"
    TRANSLATION_FAILED = "AI_TRANSLATION_FAILED"
    TIMEOUT = "AI_TIMEOUT"
    QUOTA_EXCEEDED = "AI_QUOTA_EXCEEDED"
    SERVICE_UNAVAILABLE = "AI_SERVICE_UNAVAILABLE"


class FileSystemErrorCode(StrEnum):
    FILE_NOT_FOUND = "FS_FILE_NOT_FOUND"
    PERMISSION_DENIED = "FS_PERMISSION_DENIED"
    DISK_FULL = "FS_DISK_FULL"
    INVALID_PATH = "FS_INVALID_PATH"
    CORRUPTION_DETECTED = "FS_CORRUPTION_DETECTED"
    BACKUP_FAILED = "FS_BACKUP_FAILED"
    RESTORE_FAILED = "FS_RESTORE_FAILED"
    WRITE_FAILED = "FS_WRITE_FAILED"
    READ_FAILED = "FS_READ_FAILED"
    DIRECTORY_CREATION_FAILED = "FS_DIRECTORY_CREATION_FAILED"


class CacheErrorCode(StrEnum):
    MEMORY_LIMIT_EXCEEDED = "CACHE_MEMORY_LIMIT_EXCEEDED"
    INVALID_KEY = "CACHE_INVALID_KEY"
    CORRUPTION_DETECTED = "CACHE_CORRUPTION_DETECTED"
    EVICTION_FAILED = "CACHE_EVICTION_FAILED"


class ValidationErrorCode(StrEnum):
    INVALID_LANGUAGE_CODE = "INVALID_LANGUAGE_CODE"
    INVALID_TRANSLATION_KEY = "INVALID_TRANSLATION_KEY"
    EMPTY_SOURCE_TEXT = "EMPTY_SOURCE_TEXT"
    INVALID_TRANSLATION_FORMAT = "INVALID_TRANSLATION_FORMAT"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"


class ConfigurationErrorCode(StrEnum):
    MISSING_API_KEY = "MISSING_API_KEY"
    INVALID_LANGUAGE_CONFIG = "INVALID_LANGUAGE_CONFIG"
    MISSING_SOURCE_LANGUAGE = "MISSING_SOURCE_LANGUAGE"
    INVALID_FILE_PATH = "INVALID_FILE_PATH"


type ErrorCode = AIErrorCode | FileSystemErrorCode | CacheErrorCode | ValidationErrorCode | ConfigurationErrorCode

_CATEGORY_BY_CODE_TYPE: Final[dict[type[StrEnum], ErrorCategory]] = {
    AIErrorCode: ErrorCategory.AI_SERVICE,
    FileSystemErrorCode: ErrorCategory.FILE_SYSTEM,
    CacheErrorCode: ErrorCategory.CACHE,
    ValidationErrorCode: ErrorCategory.VALIDATION,
    ConfigurationErrorCode: ErrorCategory.CONFIGURATION,
}

ERROR_MESSAGES: Final[dict[ErrorCode, str]] = {
    AIErrorCode.NETWORK_ERROR: "Network error occurred while connecting to AI service",
    AIErrorCode.API_KEY_INVALID: "Invalid API key provided for AI service",
    AIErrorCode.API_KEY_MISSING: "API key is required but not configured",
    AIErrorCode.RATE_LIMIT_EXCEEDED: "AI service rate limit exceeded, please try again later",
    AIErrorCode.INVALID_RESPONSE: "AI service returned an invalid response",
    AIErrorCode.TRANSLATION_FAILED: "Translation request failed",
    AIErrorCode.TIMEOUT: "AI service request timed out",
    AIErrorCode.QUOTA_EXCEEDED: "AI service quota exceeded",
    AIErrorCode.SERVICE_UNAVAILABLE: "AI service is currently unavailable",
    FileSystemErrorCode.FILE_NOT_FOUND: "Translation file not found",
    FileSystemErrorCode.PERMISSION_DENIED: "Permission denied accessing translation files",
    FileSystemErrorCode.DISK_FULL: "Insufficient disk space for translation files",
    FileSystemErrorCode.INVALID_PATH: "Invalid file path specified",
    FileSystemErrorCode.CORRUPTION_DETECTED: "Translation file corruption detected",
    FileSystemErrorCode.BACKUP_FAILED: "Failed to create backup of translation file",
    FileSystemErrorCode.RESTORE_FAILED: "Failed to restore translation file from backup",
    FileSystemErrorCode.WRITE_FAILED: "Failed to write translation file",
    FileSystemErrorCode.READ_FAILED: "Failed to read translation file",
    FileSystemErrorCode.DIRECTORY_CREATION_FAILED: "Failed to create translation directory",
    CacheErrorCode.MEMORY_LIMIT_EXCEEDED: "Cache memory limit exceeded",
    CacheErrorCode.INVALID_KEY: "Invalid cache key provided",
    CacheErrorCode.CORRUPTION_DETECTED: "Cache corruption detected",
    CacheErrorCode.EVICTION_FAILED: "Failed to evict items from cache",
    ValidationErrorCode.INVALID_LANGUAGE_CODE: "Invalid language code format",
    ValidationErrorCode.INVALID_TRANSLATION_KEY: "Invalid translation key format",
    ValidationErrorCode.EMPTY_SOURCE_TEXT: "Source text cannot be empty",
    ValidationErrorCode.INVALID_TRANSLATION_FORMAT: "Invalid translation format",
    ValidationErrorCode.MISSING_REQUIRED_FIELD: "Required field is missing",
    ConfigurationErrorCode.MISSING_API_KEY: "API key configuration is missing",
    ConfigurationErrorCode.INVALID_LANGUAGE_CONFIG: "Invalid language configuration",
    ConfigurationErrorCode.MISSING_SOURCE_LANGUAGE: "Source language not configured",
    ConfigurationErrorCode.INVALID_FILE_PATH: "Invalid translation file path configuration",
}


class TranslationError(Exception):
    """Categorized error raised by every component of the localization pipeline.

    The message is the fixed text for the code, optionally followed by ``": <details>"``.
    Chain the underlying exception with ``raise ... from err`` to keep the cause.

    Args:
        code (ErrorCode): Stable error code; determines the category.
        details (str | None): Extra context appended to the fixed message.

    Attributes:
        category (ErrorCategory): Category derived from the code.
        code (ErrorCode): The error code.
        details (str | None): Extra context, if any.
    """

    def __init__(self, code: ErrorCode, details: str | None = None) -> None:
        base: str = ERROR_MESSAGES[code]
        message: str = f"{base}: {details}" if details else base
        super().__init__(message)
        self._code: ErrorCode = code
        self._category: ErrorCategory = _CATEGORY_BY_CODE_TYPE[type(code)]
        self._details: str | None = details
        self._message: str = message

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def category(self) -> ErrorCategory:
        return self._category

    @property
    def details(self) -> str | None:
        return self._details

    @property
    def message(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"TranslationError(category={self._category.value!r}, code={self._code.value!r}, message={self._message!r})"
