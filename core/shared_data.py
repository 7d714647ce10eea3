"""Shared services of the localization pipeline.

This module defines the SharedData class, which builds the cache, file store, translation client,
translation manager, error recovery service and resource bundle once, connects them to each other,
and owns their start-up and shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from core.cache.manager import TranslationCacheManager
from core.cache.snapshot_store import JsonFileSnapshotStore, NullSnapshotStore
from core.recovery.service import ErrorRecoveryService
from core.store.file_store import TranslationFileStore
from core.trans import engines  # noqa: F401
from core.trans.interface import TranslationClientInterface
from core.trans.manager import TranslationManager
from handlers.resource_bundle import ResourceBundle
from models.error_models import (
    AIErrorCode,
    CacheErrorCode,
    ConfigurationErrorCode,
    FileSystemErrorCode,
    TranslationError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.cache.snapshot_store import SnapshotStore
    from models.config_models import Config
    from models.recovery_models import ErrorContext, ErrorRecoveryResult


__all__: list[str] = ["SharedData"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Error codes that need the operator's attention
NOTIFIED_ERROR_CODES: Final[frozenset[object]] = frozenset(
    {
        AIErrorCode.API_KEY_MISSING,
        AIErrorCode.API_KEY_INVALID,
        ConfigurationErrorCode.MISSING_API_KEY,
        FileSystemErrorCode.PERMISSION_DENIED,
        FileSystemErrorCode.DISK_FULL,
        FileSystemErrorCode.CORRUPTION_DETECTED,
        CacheErrorCode.CORRUPTION_DETECTED,
    }
)


@dataclass
class SharedData:
    _config: Config = field()
    _cache_manager: TranslationCacheManager = field(init=False)
    _file_store: TranslationFileStore = field(init=False)
    _client: TranslationClientInterface = field(init=False)
    _trans_manager: TranslationManager = field(init=False)
    _recovery_service: ErrorRecoveryService = field(init=False)
    _resource_bundle: ResourceBundle = field(init=False)

    async def async_init(self) -> None:
        """Build every service and connect them.

        Raises:
            TranslationError: INVALID_LANGUAGE_CONFIG if the configured engine is not registered.
        """
        engine: str = self.config.TRANSLATION.ENGINE
        client_class: type[TranslationClientInterface] | None = TranslationClientInterface.registered.get(engine)
        if client_class is None:
            raise TranslationError(
                ConfigurationErrorCode.INVALID_LANGUAGE_CONFIG, f"Unknown translation engine: '{engine}'"
            )

        self._cache_manager = TranslationCacheManager(self.config, self._create_snapshot_store())
        self._file_store = TranslationFileStore(self.config)
        self._client = client_class(self.config)
        self._trans_manager = TranslationManager(self.config, self._client, self._file_store, self._cache_manager)
        self._recovery_service = ErrorRecoveryService(
            self.config, self._client, self._file_store, self._cache_manager, self._trans_manager
        )
        self._trans_manager.set_error_recovery_service(self._recovery_service)
        self._recovery_service.on_error(self._log_error_notification)

        self._resource_bundle = ResourceBundle(fallback_language=self.config.TRANSLATION.SOURCE_LANGUAGE)
        self._resource_bundle.set_missing_key_handler(self._trans_manager.handle_missing_key)
        self._resource_bundle.set_context_provider(self._trans_manager.parse_key_context)
        self._trans_manager.on_resource_added(self._resource_bundle.add_entry)

    async def component_load(self) -> None:
        """Load the cache snapshot, open the client and initialize the translation manager."""
        logger.info("'%s' initialization start", self.__class__.__name__)
        await self._cache_manager.component_load()
        await self._client.component_load()
        await self._trans_manager.initialize()

    async def component_teardown(self) -> None:
        """Stop background work and release resources, in reverse order of start-up."""
        await self._recovery_service.stop_health_monitoring()
        await self._trans_manager.shutdown()
        await self._client.close()
        await self._cache_manager.component_teardown()
        logger.info("'%s' process termination", self.__class__.__name__)

    def _create_snapshot_store(self) -> SnapshotStore:
        snapshot_file: str = self.config.CACHE.SNAPSHOT_FILE
        if not snapshot_file:
            return NullSnapshotStore()
        return JsonFileSnapshotStore(Path(snapshot_file))

    @staticmethod
    def _log_error_notification(error: TranslationError, context: ErrorContext, result: ErrorRecoveryResult) -> None:
        if error.code not in NOTIFIED_ERROR_CODES:
            return
        logger.error(
            "%s failed in %s (%s): %s",
            context.operation,
            context.service,
            context.language or "-",
            result.message,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cache_manager(self) -> TranslationCacheManager:
        return self._cache_manager

    @property
    def file_store(self) -> TranslationFileStore:
        return self._file_store

    @property
    def client(self) -> TranslationClientInterface:
        return self._client

    @property
    def trans_manager(self) -> TranslationManager:
        return self._trans_manager

    @property
    def recovery_service(self) -> ErrorRecoveryService:
        return self._recovery_service

    @property
    def resource_bundle(self) -> ResourceBundle:
        return self._resource_bundle
