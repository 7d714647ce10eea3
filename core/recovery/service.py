# ruff: noqa: BLE001
"""Error classification, recovery and health reporting for the localization pipeline."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Final

from handlers.async_comm import AsyncSocket
from models.error_models import (
    AIErrorCode,
    CacheErrorCode,
    ConfigurationErrorCode,
    ErrorCategory,
    FileSystemErrorCode,
    TranslationError,
)
from models.recovery_models import (
    HEALTH_RANK,
    ApiKeyValidationResult,
    ErrorRecoveryResult,
    HealthIssue,
    NetworkRecoveryResult,
    ServiceHealth,
    SystemHealthStatus,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from core.cache.manager import TranslationCacheManager
    from core.store.file_store import TranslationFileStore
    from core.trans.interface import TranslationClientInterface
    from core.trans.manager import TranslationManager
    from models.config_models import Config
    from models.recovery_models import ErrorContext, HealthState
    from models.translation_models import RateLimitStatus

__all__: list[str] = ["ErrorCallback", "ErrorRecoveryService"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

BYTES_PER_MB: Final[int] = 1024 * 1024

NETWORK_CODES: Final[frozenset[AIErrorCode]] = frozenset(
    {AIErrorCode.NETWORK_ERROR, AIErrorCode.TIMEOUT, AIErrorCode.SERVICE_UNAVAILABLE}
)

SUGGESTED_ACTIONS: Final[dict[str, dict[str, str]]] = {
    "ai": {
        "critical": "Check API key configuration and network connection",
        "degraded": "Monitor API usage and consider upgrading plan if needed",
    },
    "fileSystem": {
        "critical": "Check file permissions and disk space",
        "degraded": "Review translation file structure and backup status",
    },
    "cache": {
        "critical": "Clear cache and restart application",
        "degraded": "Monitor memory usage and consider clearing cache",
    },
    "network": {
        "critical": "Check internet connection and firewall settings",
        "degraded": "Monitor network stability",
    },
}

type ErrorCallback = Callable[[TranslationError, ErrorContext, ErrorRecoveryResult], None]


class ErrorRecoveryService:
    """Decide how the pipeline reacts to a failure and report overall health.

    ``handle_error`` applies a per-category policy: it may restore files, rebuild the cache,
    compute a fallback text, or tell the caller to retry after a delay. Every outcome is
    passed to the callbacks registered with ``on_error``.

    Attributes:
        PROBE_TIMEOUT_SEC (ClassVar[float]): Timeout of the TCP reachability probe.
        VALIDATION_TEXT (ClassVar[str]): Text translated to check that the API key works.
    """

    PROBE_TIMEOUT_SEC: ClassVar[float] = 3.0
    VALIDATION_TEXT: ClassVar[str] = "test"
    VALIDATION_LANGUAGE: ClassVar[str] = "es"

    def __init__(
        self,
        config: Config,
        client: TranslationClientInterface,
        store: TranslationFileStore,
        cache: TranslationCacheManager,
        manager: TranslationManager,
    ) -> None:
        self.config: Config = config
        self.client: TranslationClientInterface = client
        self.store: TranslationFileStore = store
        self.cache: TranslationCacheManager = cache
        self.manager: TranslationManager = manager

        self._callbacks: list[ErrorCallback] = []
        self._cached_health: SystemHealthStatus | None = None
        self._last_health_check: float | None = None
        self._monitor_task: asyncio.Task[None] | None = None
        self._clock: Callable[[], float] = time.monotonic
        self._sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @property
    def source_language(self) -> str:
        return self.config.TRANSLATION.SOURCE_LANGUAGE

    @property
    def is_monitoring(self) -> bool:
        return self._monitor_task is not None and not self._monitor_task.done()

    def on_error(self, callback: ErrorCallback) -> None:
        self._callbacks.append(callback)

    async def handle_error(self, error: BaseException, context: ErrorContext) -> ErrorRecoveryResult:
        """Apply the recovery policy for an error and notify the error callbacks.

        Args:
            error (BaseException): The failure; anything other than ``TranslationError`` is not recovered.
            context (ErrorContext): Where the failure happened.

        Returns:
            ErrorRecoveryResult: Whether processing can continue and whether to retry.
        """
        if not isinstance(error, TranslationError):
            return ErrorRecoveryResult(recovered=False, message=f"Unhandled error in {context.service}: {error}")

        result: ErrorRecoveryResult = await self._process_error(error, context)
        logger.debug("Recovery for %s in %s: %s", error.code, context.operation, result.message)
        self._notify(error, context, result)
        return result

    async def recover_from_file_corruption(self, language: str) -> bool:
        """Restore a language file from its backup, from the source language, or as an empty file.

        Returns:
            bool: True if one of the steps produced a readable file.
        """
        logger.warning("Attempting to recover corrupted translation file for language: %s", language)
        try:
            await self.store.restore(language)
        except TranslationError as err:
            logger.warning("Backup restoration failed for %s: %s", language, err)
        else:
            logger.info("Restored %s translation file from backup", language)
            return True

        if language != self.source_language:
            try:
                await self.store.copy_structure(self.source_language, language)
            except TranslationError as err:
                logger.warning("Failed to recreate %s from source: %s", language, err)
            else:
                logger.info("Recreated %s translation file from source language", language)
                return True

        try:
            await self.store.write(language, {})
        except TranslationError as err:
            logger.error("Failed to create empty translation file for %s: %s", language, err)
            return False
        logger.info("Created empty translation file for %s", language)
        return True

    async def recover_from_cache_corruption(self) -> bool:
        """Clear the cache and reload every known language.

        Returns:
            bool: True if at least one language was reloaded.
        """
        logger.warning("Attempting to recover from cache corruption")
        self.cache.clear()

        languages: list[str] = self.manager.get_available_languages()
        reloaded: int = 0
        for language in languages:
            try:
                await self.manager.load_translations(language)
            except TranslationError as err:
                logger.warning("Failed to reload translations for %s: %s", language, err)
                continue
            reloaded += 1

        if reloaded == 0:
            logger.error("Cache recovery failed: no languages could be reloaded")
            return False
        logger.info("Cache recovery successful: reloaded %d/%d languages", reloaded, len(languages))
        return True

    async def create_translation_fallback(self, key: str, language: str) -> str:
        """Find a text to show for a key while its translation is unavailable.

        Looks for a cached text in the requested language or any other known language,
        then the source-language text, then falls back to the key itself.
        """
        others: list[str] = [code for code in self.manager.get_available_languages() if code != language]
        candidates: list[str] = [language, *others]
        for candidate in candidates:
            cached: str | None = self.cache.peek(key, candidate)
            if cached:
                if candidate != language:
                    logger.warning("Using %s translation as fallback for %s: %s", candidate, language, key)
                return cached

        if language != self.source_language:
            try:
                source_text: str | None = (await self.manager.load_translations(self.source_language)).get(key)
            except TranslationError as err:
                logger.warning("Failed to get source translation for fallback: %s (%s)", key, err)
            else:
                if source_text:
                    return source_text

        logger.warning("No fallback translation found for %s in %s, using key as fallback", key, language)
        return key

    async def validate_api_key_configuration(self) -> ApiKeyValidationResult:
        """Check that an API key is configured and accepted by the service.

        Sends one short translation request when a key is configured and the host is reachable.
        """
        if not self.client.has_api_key:
            return ApiKeyValidationResult(
                is_valid=False,
                is_configured=False,
                message=TranslationError(ConfigurationErrorCode.MISSING_API_KEY).message,
                suggested_action=f"Set the {self.config.GEMINI.API_KEY_ENV} environment variable",
            )

        if not await self.client.is_online():
            return ApiKeyValidationResult(
                is_valid=False,
                is_configured=True,
                message="API key is configured but the AI service is unreachable",
                suggested_action="Please check your network connection and try again",
            )

        try:
            await self.client.translate_text(self.VALIDATION_TEXT, self.VALIDATION_LANGUAGE, "API key validation test")
        except TranslationError as err:
            code = self._root_code(err)
            if code == AIErrorCode.API_KEY_INVALID:
                return ApiKeyValidationResult(
                    is_valid=False,
                    is_configured=True,
                    message="API key is configured but invalid",
                    suggested_action="Please check your Gemini API key and ensure it has the correct permissions",
                )
            if code == AIErrorCode.QUOTA_EXCEEDED:
                return ApiKeyValidationResult(
                    is_valid=True,
                    is_configured=True,
                    message="API key is valid but quota exceeded",
                    suggested_action="Please check your Gemini API usage limits and billing",
                )
            return ApiKeyValidationResult(
                is_valid=False,
                is_configured=True,
                message=f"API key validation failed: {err.message}",
                suggested_action="Please check your API key configuration and network connection",
            )

        return ApiKeyValidationResult(is_valid=True, is_configured=True, message="API key is valid and working")

    async def handle_network_error(self, error: TranslationError) -> NetworkRecoveryResult:
        if not await self._probe_network():
            return NetworkRecoveryResult(is_online=False, can_retry=False)

        code = self._root_code(error)
        estimated: float | None = None
        if code == AIErrorCode.RATE_LIMIT_EXCEEDED:
            estimated = self._seconds_until_reset()
        return NetworkRecoveryResult(is_online=True, can_retry=code in NETWORK_CODES, estimated_recovery_time=estimated)

    async def get_system_health(self, *, refresh: bool = False) -> SystemHealthStatus:
        """Probe the AI service, the file system, the cache and the network.

        The result is reused for ``RECOVERY.HEALTH_CHECK_INTERVAL`` seconds.

        Args:
            refresh (bool): Ignore the reused result and probe again.

        Returns:
            SystemHealthStatus: Per-service results, the worst status overall, and one issue per unhealthy service.
        """
        now: float = self._clock()
        if (
            not refresh
            and self._cached_health is not None
            and self._last_health_check is not None
            and now - self._last_health_check < self.config.RECOVERY.HEALTH_CHECK_INTERVAL
        ):
            return self._cached_health

        services: dict[str, ServiceHealth] = {
            "ai": await self._check_ai_health(),
            "fileSystem": await self._check_file_system_health(),
            "cache": self._check_cache_health(),
            "network": await self._check_network_health(),
        }
        overall: HealthState = max(
            (service.status for service in services.values()), key=HEALTH_RANK.__getitem__, default="healthy"
        )
        issues: list[HealthIssue] = [
            HealthIssue(
                severity="critical" if service.status == "critical" else "warning",
                service=name,
                message=service.message or f"{name} is {service.status}",
                suggested_action=SUGGESTED_ACTIONS.get(name, {}).get(
                    service.status, "Contact support for assistance"
                ),
            )
            for name, service in services.items()
            if service.status != "healthy"
        ]

        health = SystemHealthStatus(overall=overall, services=services, issues=issues)
        self._cached_health = health
        self._last_health_check = now
        return health

    def start_health_monitoring(self) -> None:
        """Run a health check every ``RECOVERY.HEALTH_CHECK_INTERVAL`` seconds until stopped."""
        if self.is_monitoring:
            return
        self._monitor_task = asyncio.get_running_loop().create_task(self._monitor_loop(), name="health_monitor")
        logger.info("Health monitoring started (every %.0f seconds)", self.config.RECOVERY.HEALTH_CHECK_INTERVAL)

    async def stop_health_monitoring(self) -> None:
        if self._monitor_task is None:
            return
        self._monitor_task.cancel()
        await asyncio.gather(self._monitor_task, return_exceptions=True)
        self._monitor_task = None
        logger.info("Health monitoring stopped")

    async def _monitor_loop(self) -> None:
        while True:
            try:
                health: SystemHealthStatus = await self.get_system_health(refresh=True)
            except Exception as err:
                logger.error("Health check failed: %s", err)
            else:
                for issue in health.issues:
                    log = logger.error if issue.severity == "critical" else logger.warning
                    log("Health issue [%s]: %s (%s)", issue.service, issue.message, issue.suggested_action)
            await self._sleep(self.config.RECOVERY.HEALTH_CHECK_INTERVAL)

    async def _process_error(self, error: TranslationError, context: ErrorContext) -> ErrorRecoveryResult:
        match error.category:
            case ErrorCategory.AI_SERVICE:
                return await self._handle_ai_service_error(error, context)
            case ErrorCategory.FILE_SYSTEM:
                return await self._handle_file_system_error(error, context)
            case ErrorCategory.CACHE:
                return await self._handle_cache_error(error)
            case ErrorCategory.VALIDATION:
                return ErrorRecoveryResult(recovered=False, message=f"Validation error: {error.message}")
            case ErrorCategory.CONFIGURATION:
                return self._handle_configuration_error(error)
        return ErrorRecoveryResult(recovered=False, message=f"Unknown error category: {error.category}")

    async def _handle_ai_service_error(self, error: TranslationError, context: ErrorContext) -> ErrorRecoveryResult:
        if error.code == AIErrorCode.TRANSLATION_FAILED and isinstance(error.__cause__, TranslationError):
            return await self._process_error(error.__cause__, context)

        match error.code:
            case AIErrorCode.API_KEY_MISSING | AIErrorCode.API_KEY_INVALID:
                return ErrorRecoveryResult(recovered=False, message="API key configuration issue detected")
            case AIErrorCode.RATE_LIMIT_EXCEEDED:
                return ErrorRecoveryResult(
                    recovered=False,
                    message="Rate limit exceeded, will retry after reset",
                    should_retry=True,
                    retry_delay=max(self._seconds_until_reset(), self.config.RECOVERY.RATE_LIMIT_MIN_DELAY),
                )
            case AIErrorCode.NETWORK_ERROR | AIErrorCode.TIMEOUT | AIErrorCode.SERVICE_UNAVAILABLE:
                fallback: str | None = None
                if context.key and context.language:
                    fallback = await self.create_translation_fallback(context.key, context.language)
                return ErrorRecoveryResult(
                    recovered=bool(fallback),
                    message="Network error, using fallback translation",
                    should_retry=True,
                    fallback_value=fallback,
                    retry_delay=self.config.RECOVERY.NETWORK_RETRY_DELAY,
                )
        return ErrorRecoveryResult(recovered=False, message=f"AI service error: {error.message}")

    async def _handle_file_system_error(self, error: TranslationError, context: ErrorContext) -> ErrorRecoveryResult:
        match error.code:
            case FileSystemErrorCode.CORRUPTION_DETECTED if context.language:
                recovered: bool = await self.recover_from_file_corruption(context.language)
                return ErrorRecoveryResult(
                    recovered=recovered,
                    message="File corruption recovered" if recovered else "File corruption recovery failed",
                    should_retry=recovered,
                )
            case FileSystemErrorCode.PERMISSION_DENIED:
                return ErrorRecoveryResult(
                    recovered=False, message="File permission denied - check file system permissions"
                )
            case FileSystemErrorCode.DISK_FULL:
                return ErrorRecoveryResult(recovered=False, message="Disk full - free up space and try again")
            case FileSystemErrorCode.FILE_NOT_FOUND if context.language and context.language != self.source_language:
                try:
                    await self.store.copy_structure(self.source_language, context.language)
                except TranslationError as err:
                    logger.warning("Failed to recreate %s from source: %s", context.language, err)
                else:
                    return ErrorRecoveryResult(
                        recovered=True, message="Missing translation file recreated from source", should_retry=True
                    )
        return ErrorRecoveryResult(recovered=False, message=f"File system error: {error.message}")

    async def _handle_cache_error(self, error: TranslationError) -> ErrorRecoveryResult:
        if error.code in (CacheErrorCode.CORRUPTION_DETECTED, CacheErrorCode.MEMORY_LIMIT_EXCEEDED):
            recovered: bool = await self.recover_from_cache_corruption()
            return ErrorRecoveryResult(
                recovered=recovered,
                message="Cache corruption recovered" if recovered else "Cache recovery failed",
                should_retry=recovered,
            )
        return ErrorRecoveryResult(recovered=False, message=f"Cache error: {error.message}")

    def _handle_configuration_error(self, error: TranslationError) -> ErrorRecoveryResult:
        if error.code == ConfigurationErrorCode.MISSING_API_KEY:
            return ErrorRecoveryResult(
                recovered=False, message="API key not configured - please set up your Gemini API key"
            )
        if error.code == ConfigurationErrorCode.MISSING_SOURCE_LANGUAGE:
            return ErrorRecoveryResult(recovered=False, message="Source language not configured")
        return ErrorRecoveryResult(recovered=False, message=f"Configuration error: {error.message}")

    async def _check_ai_health(self) -> ServiceHealth:
        try:
            if not await self.client.is_online():
                return ServiceHealth(status="critical", message="AI service is offline or API key not configured")
            status: RateLimitStatus = self.client.get_rate_limit_status()
        except Exception as err:
            return ServiceHealth(status="critical", message=f"AI service check failed: {err}")
        if status.remaining < self.config.RECOVERY.LOW_QUOTA_THRESHOLD:
            return ServiceHealth(status="degraded", message="AI service rate limit nearly exceeded")
        return ServiceHealth(status="healthy")

    async def _check_file_system_health(self) -> ServiceHealth:
        try:
            await self.store.ensure_directory()
            languages: list[str] = await self.store.list_languages()
        except Exception as err:
            return ServiceHealth(status="critical", message=f"File system check failed: {err}")
        if not languages:
            return ServiceHealth(status="degraded", message="No translation files found")
        return ServiceHealth(status="healthy")

    def _check_cache_health(self) -> ServiceHealth:
        try:
            usage: int = self.cache.estimate_memory_usage()
        except Exception as err:
            return ServiceHealth(status="critical", message=f"Cache check failed: {err}")
        if usage > self.config.CACHE.MAX_MEMORY_MB * BYTES_PER_MB:
            return ServiceHealth(status="degraded", message="Cache memory usage is high")
        return ServiceHealth(status="healthy")

    async def _check_network_health(self) -> ServiceHealth:
        if not await self._probe_network():
            return ServiceHealth(status="critical", message="Network is offline")
        return ServiceHealth(status="healthy")

    async def _probe_network(self) -> bool:
        return await AsyncSocket.probe(self.config.GEMINI.BASE_URL, timeout=self.PROBE_TIMEOUT_SEC)

    def _seconds_until_reset(self) -> float:
        status: RateLimitStatus = self.client.get_rate_limit_status()
        return max(0.0, (status.reset_time - datetime.now().astimezone()).total_seconds())

    @staticmethod
    def _root_code(error: TranslationError) -> object:
        if error.code == AIErrorCode.TRANSLATION_FAILED and isinstance(error.__cause__, TranslationError):
            return error.__cause__.code
        return error.code

    def _notify(self, error: TranslationError, context: ErrorContext, result: ErrorRecoveryResult) -> None:
        for callback in self._callbacks:
            try:
                callback(error, context, result)
            except Exception as err:
                logger.error("Error in error notification callback: %s", err)
