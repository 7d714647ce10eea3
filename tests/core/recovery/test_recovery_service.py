"""Tests for ErrorRecoveryService.

Recovery policies run against a real file store and cache in a temporary directory;
the AI client and the network probe are replaced with fakes.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, ClassVar

import pytest

from core.cache.manager import TranslationCacheManager
from core.recovery.service import ErrorRecoveryService
from core.store.file_store import TranslationFileStore
from core.trans.interface import TranslationClientInterface
from core.trans.manager import TranslationManager
from models.config_models import Config
from models.error_models import (
    AIErrorCode,
    CacheErrorCode,
    ConfigurationErrorCode,
    FileSystemErrorCode,
    TranslationError,
    ValidationErrorCode,
)
from models.recovery_models import ErrorContext, ErrorRecoveryResult
from models.translation_models import RateLimitStatus, StreamingTranslationResult

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterator
    from pathlib import Path

    from models.recovery_models import ApiKeyValidationResult, NetworkRecoveryResult, SystemHealthStatus


class DummyClient(TranslationClientInterface):
    online: ClassVar[bool] = True
    remaining: ClassVar[int] = 60
    reset_in_sec: ClassVar[float] = 30.0
    error: ClassVar[TranslationError | None] = None

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._api_key = "dummy-key"

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    async def component_load(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def translate_text(self, text: str, target_language: str, context: str | None = None) -> str:
        _ = context
        if type(self).error is not None:
            raise type(self).error
        return f"[{target_language}] {text}"

    async def translate_batch(self, texts: list[str], target_language: str, context: str | None = None) -> list[str]:
        return [await self.translate_text(text, target_language, context) for text in texts]

    async def translate_to_all_languages(
        self, text: str, languages: list[str], context: str | None = None
    ) -> AsyncIterator[StreamingTranslationResult]:
        for language in languages:
            yield StreamingTranslationResult(language=language, text=await self.translate_text(text, language, context))

    async def is_online(self) -> bool:
        return self.has_api_key and type(self).online

    def get_rate_limit_status(self) -> RateLimitStatus:
        return RateLimitStatus(
            remaining=type(self).remaining,
            reset_time=datetime.now().astimezone() + timedelta(seconds=type(self).reset_in_sec),
            daily_remaining=1000,
        )


@pytest.fixture(autouse=True)
def reset_dummy_client() -> None:
    DummyClient.online = True
    DummyClient.remaining = 60
    DummyClient.reset_in_sec = 30.0
    DummyClient.error = None


@pytest.fixture
def network_up() -> list[bool]:
    return [True]


@pytest.fixture
async def service(tmp_path: Path, network_up: list[bool]) -> AsyncGenerator[ErrorRecoveryService]:
    config = Config()
    store = TranslationFileStore(config, tmp_path / "locales")
    await store.write("en", {"welcome": "Welcome!", "nav.home": "Home"})
    cache = TranslationCacheManager(config)
    client = DummyClient(config)
    manager = TranslationManager(config, client, store, cache)
    service = ErrorRecoveryService(config, client, store, cache, manager)
    manager.set_error_recovery_service(service)
    await manager.initialize()

    async def fake_probe() -> bool:
        return network_up[0]

    service._probe_network = fake_probe  # type: ignore[method-assign]  # noqa: SLF001
    yield service
    await service.stop_health_monitoring()
    await manager.shutdown()
    await cache.component_teardown()


def _context(operation: str = "translateText", language: str | None = "fr", key: str | None = "nav.home") -> ErrorContext:
    return ErrorContext(operation=operation, service="TranslationManager", language=language, key=key)


def _chained(code: AIErrorCode) -> TranslationError:
    try:
        try:
            raise TranslationError(code)
        except TranslationError as cause:
            raise TranslationError(AIErrorCode.TRANSLATION_FAILED, "after 3 attempts") from cause
    except TranslationError as err:
        return err


@pytest.mark.asyncio
async def test_foreign_errors_are_not_recovered(service: ErrorRecoveryService) -> None:
    notified: list[ErrorRecoveryResult] = []
    service.on_error(lambda error, context, result: notified.append(result))

    result: ErrorRecoveryResult = await service.handle_error(ValueError("boom"), _context())

    assert result.recovered is False
    assert "boom" in result.message
    assert notified == []


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [AIErrorCode.API_KEY_INVALID, AIErrorCode.API_KEY_MISSING])
async def test_key_errors_are_not_retried(service: ErrorRecoveryService, code: AIErrorCode) -> None:
    result: ErrorRecoveryResult = await service.handle_error(TranslationError(code), _context())
    assert result.recovered is False
    assert result.should_retry is False


@pytest.mark.asyncio
async def test_rate_limit_waits_at_least_the_minimum_delay(service: ErrorRecoveryService) -> None:
    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(AIErrorCode.RATE_LIMIT_EXCEEDED), _context()
    )

    assert result.should_retry is True
    assert result.retry_delay == service.config.RECOVERY.RATE_LIMIT_MIN_DELAY


@pytest.mark.asyncio
async def test_rate_limit_waits_for_window_reset(service: ErrorRecoveryService) -> None:
    DummyClient.reset_in_sec = 120.0

    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(AIErrorCode.RATE_LIMIT_EXCEEDED), _context()
    )

    assert result.retry_delay == pytest.approx(120.0, abs=1.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [AIErrorCode.NETWORK_ERROR, AIErrorCode.TIMEOUT, AIErrorCode.SERVICE_UNAVAILABLE])
async def test_network_errors_use_source_text_as_fallback(service: ErrorRecoveryService, code: AIErrorCode) -> None:
    result: ErrorRecoveryResult = await service.handle_error(TranslationError(code), _context())

    assert result.recovered is True
    assert result.fallback_value == "Home"
    assert result.should_retry is True
    assert result.retry_delay == service.config.RECOVERY.NETWORK_RETRY_DELAY


@pytest.mark.asyncio
async def test_exhausted_client_retries_are_judged_by_cause(service: ErrorRecoveryService) -> None:
    result: ErrorRecoveryResult = await service.handle_error(_chained(AIErrorCode.TIMEOUT), _context())
    assert result.should_retry is True

    result = await service.handle_error(_chained(AIErrorCode.API_KEY_INVALID), _context())
    assert result.should_retry is False


@pytest.mark.asyncio
async def test_fallback_prefers_cached_text(service: ErrorRecoveryService) -> None:
    service.cache.set("nav.home", "fr", "Accueil")
    assert await service.create_translation_fallback("nav.home", "fr") == "Accueil"


@pytest.mark.asyncio
async def test_fallback_uses_other_language_before_source(service: ErrorRecoveryService) -> None:
    await service.manager.add_new_language("de", "Deutsch")
    await service.manager.shutdown()
    service.cache.clear()
    service.cache.set("greeting", "de", "Hallo")

    assert await service.create_translation_fallback("greeting", "fr") == "Hallo"


@pytest.mark.asyncio
async def test_fallback_returns_key_when_nothing_is_found(service: ErrorRecoveryService) -> None:
    assert await service.create_translation_fallback("missing.key", "fr") == "missing.key"


@pytest.mark.asyncio
async def test_corrupt_file_is_restored_from_backup(service: ErrorRecoveryService) -> None:
    store: TranslationFileStore = service.store
    await store.write("fr", {"welcome": "Bienvenue !"})
    await store.backup("fr")
    store.translation_file_path("fr").write_text("{broken", encoding="utf-8")

    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(FileSystemErrorCode.CORRUPTION_DETECTED), _context("loadTranslations", key=None)
    )

    assert result.recovered is True
    assert result.should_retry is True
    assert json.loads(store.translation_file_path("fr").read_text(encoding="utf-8")) == {"welcome": "Bienvenue !"}


@pytest.mark.asyncio
async def test_corrupt_file_without_backup_is_recreated_from_source(service: ErrorRecoveryService) -> None:
    store: TranslationFileStore = service.store
    store.language_dir("fr").mkdir(parents=True)
    store.translation_file_path("fr").write_text("{broken", encoding="utf-8")

    assert await service.recover_from_file_corruption("fr") is True
    assert await store.read("fr") == {"welcome": "Welcome!", "nav.home": "Home"}


@pytest.mark.asyncio
async def test_corrupt_source_file_becomes_empty(service: ErrorRecoveryService) -> None:
    store: TranslationFileStore = service.store
    store.translation_file_path("en").write_text("{broken", encoding="utf-8")
    store.backup_file_path("en").unlink(missing_ok=True)

    assert await service.recover_from_file_corruption("en") is True
    assert await store.read("en") == {}


@pytest.mark.asyncio
async def test_missing_language_file_is_recreated(service: ErrorRecoveryService) -> None:
    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(FileSystemErrorCode.FILE_NOT_FOUND), _context("loadTranslations", language="it", key=None)
    )

    assert result.recovered is True
    assert result.should_retry is True
    assert await service.store.exists("it") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [FileSystemErrorCode.PERMISSION_DENIED, FileSystemErrorCode.DISK_FULL])
async def test_unrecoverable_file_errors(service: ErrorRecoveryService, code: FileSystemErrorCode) -> None:
    result: ErrorRecoveryResult = await service.handle_error(TranslationError(code), _context())
    assert result.recovered is False
    assert result.should_retry is False


@pytest.mark.asyncio
async def test_cache_corruption_clears_and_reloads(service: ErrorRecoveryService) -> None:
    service.cache.set("stale", "en", "Stale")

    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(CacheErrorCode.CORRUPTION_DETECTED), _context()
    )

    assert result.recovered is True
    assert service.cache.peek("stale", "en") is None
    assert service.cache.peek("welcome", "en") == "Welcome!"


@pytest.mark.asyncio
async def test_validation_and_configuration_errors(service: ErrorRecoveryService) -> None:
    result: ErrorRecoveryResult = await service.handle_error(
        TranslationError(ValidationErrorCode.EMPTY_SOURCE_TEXT), _context()
    )
    assert result.recovered is False
    assert result.message.startswith("Validation error")

    result = await service.handle_error(TranslationError(ConfigurationErrorCode.MISSING_API_KEY), _context())
    assert result.recovered is False
    assert "API key not configured" in result.message


@pytest.mark.asyncio
async def test_callbacks_are_notified_and_failures_logged(
    service: ErrorRecoveryService, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="AutoLocale")
    notified: list[tuple[TranslationError, ErrorRecoveryResult]] = []

    def failing(error: TranslationError, context: ErrorContext, result: ErrorRecoveryResult) -> None:
        _ = error, context, result
        msg = "callback failed"
        raise RuntimeError(msg)

    service.on_error(failing)
    service.on_error(lambda error, context, result: notified.append((error, result)))

    await service.handle_error(TranslationError(AIErrorCode.API_KEY_INVALID), _context())

    assert len(notified) == 1
    assert notified[0][0].code == AIErrorCode.API_KEY_INVALID
    assert any("Error in error notification callback" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_validate_api_key_without_key(service: ErrorRecoveryService) -> None:
    service.client.set_api_key("")

    result: ApiKeyValidationResult = await service.validate_api_key_configuration()

    assert (result.is_configured, result.is_valid) == (False, False)
    assert "GEMINI_API_KEY" in (result.suggested_action or "")


@pytest.mark.asyncio
async def test_validate_api_key_offline(service: ErrorRecoveryService) -> None:
    DummyClient.online = False
    result: ApiKeyValidationResult = await service.validate_api_key_configuration()
    assert (result.is_configured, result.is_valid) == (True, False)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "is_valid", "message"),
    [
        (None, True, "API key is valid and working"),
        (TranslationError(AIErrorCode.API_KEY_INVALID), False, "API key is configured but invalid"),
        (TranslationError(AIErrorCode.QUOTA_EXCEEDED), True, "API key is valid but quota exceeded"),
        (TranslationError(AIErrorCode.INVALID_RESPONSE), False, "API key validation failed"),
    ],
)
async def test_validate_api_key_with_test_translation(
    service: ErrorRecoveryService, error: TranslationError | None, is_valid: bool, message: str
) -> None:
    DummyClient.error = error

    result: ApiKeyValidationResult = await service.validate_api_key_configuration()

    assert result.is_configured is True
    assert result.is_valid is is_valid
    assert result.message.startswith(message)


@pytest.mark.asyncio
async def test_handle_network_error(service: ErrorRecoveryService, network_up: list[bool]) -> None:
    result: NetworkRecoveryResult = await service.handle_network_error(TranslationError(AIErrorCode.TIMEOUT))
    assert (result.is_online, result.can_retry) == (True, True)

    rate_limited: NetworkRecoveryResult = await service.handle_network_error(
        TranslationError(AIErrorCode.RATE_LIMIT_EXCEEDED)
    )
    assert rate_limited.can_retry is False
    assert rate_limited.estimated_recovery_time == pytest.approx(30.0, abs=1.0)

    network_up[0] = False
    offline: NetworkRecoveryResult = await service.handle_network_error(TranslationError(AIErrorCode.TIMEOUT))
    assert (offline.is_online, offline.can_retry) == (False, False)


@pytest.mark.asyncio
async def test_system_health_all_healthy(service: ErrorRecoveryService) -> None:
    health: SystemHealthStatus = await service.get_system_health()

    assert health.overall == "healthy"
    assert set(health.services) == {"ai", "fileSystem", "cache", "network"}
    assert health.issues == []


@pytest.mark.asyncio
async def test_system_health_reports_critical_services(
    service: ErrorRecoveryService, network_up: list[bool]
) -> None:
    DummyClient.online = False
    network_up[0] = False

    health: SystemHealthStatus = await service.get_system_health()

    assert health.overall == "critical"
    issues = {issue.service: issue for issue in health.issues}
    assert set(issues) == {"ai", "network"}
    assert issues["ai"].severity == "critical"
    assert issues["ai"].suggested_action == "Check API key configuration and network connection"
    assert issues["network"].suggested_action == "Check internet connection and firewall settings"


@pytest.mark.asyncio
async def test_system_health_degraded_on_low_quota(service: ErrorRecoveryService) -> None:
    DummyClient.remaining = 3

    health: SystemHealthStatus = await service.get_system_health()

    assert health.overall == "degraded"
    assert health.issues[0].service == "ai"
    assert health.issues[0].severity == "warning"


@pytest.mark.asyncio
async def test_system_health_is_reused_within_interval(service: ErrorRecoveryService) -> None:
    now: list[float] = [100.0]
    service._clock = lambda: now[0]  # noqa: SLF001

    first: SystemHealthStatus = await service.get_system_health()
    DummyClient.online = False
    assert await service.get_system_health() is first

    assert (await service.get_system_health(refresh=True)).overall == "critical"

    DummyClient.online = True
    now[0] += service.config.RECOVERY.HEALTH_CHECK_INTERVAL
    assert (await service.get_system_health()).overall == "healthy"


@pytest.mark.asyncio
async def test_health_monitoring_logs_issues(
    service: ErrorRecoveryService, network_up: list[bool], caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="AutoLocale")
    network_up[0] = False
    checked = asyncio.Event()

    async def fake_sleep(seconds: float) -> None:
        _ = seconds
        checked.set()
        await asyncio.sleep(3600)

    service._sleep = fake_sleep  # noqa: SLF001

    service.start_health_monitoring()
    assert service.is_monitoring is True
    await asyncio.wait_for(checked.wait(), timeout=5.0)
    await service.stop_health_monitoring()

    assert service.is_monitoring is False
    assert any("Health issue [network]" in rec.message for rec in caplog.records)
