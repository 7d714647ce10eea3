# ruff: noqa: BLE001
"""Translation manager.

Resolves UI texts by key and language from the cache and the translation files, and
queues background AI translations for texts that are missing in a language. Resolved
translations are written back to the language file and announced to resource listeners.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Final

from models.error_models import (
    ConfigurationErrorCode,
    ErrorCategory,
    FileSystemErrorCode,
    TranslationError,
    ValidationErrorCode,
)
from models.re_models import LANGUAGE_CODE_PATTERN, TRANSLATION_KEY_PATTERN
from models.recovery_models import ErrorContext
from models.translation_models import TranslationEntry, TranslationOrigin, TranslationRequest
from utils.logger_utils import LoggerUtils
from utils.retry_utils import RetryUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable, Coroutine

    from core.cache.manager import TranslationCacheManager
    from core.recovery.service import ErrorRecoveryService
    from core.store.file_store import TranslationFileStore
    from core.trans.interface import TranslationClientInterface
    from models.config_models import Config
    from models.recovery_models import ErrorRecoveryResult

__all__: list[str] = ["TranslationManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SERVICE_NAME: Final[str] = "TranslationManager"
GENERAL_CONTEXT: Final[str] = "General application text"

# Checked in order against the last key segment
UI_ROLE_CONTEXTS: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (("button",), "UI Element: Button"),
    (("title", "heading"), "UI Element: Title/Heading"),
    (("message", "text"), "UI Element: Message/Text"),
    (("error",), "UI Element: Error Message"),
    (("success",), "UI Element: Success Message"),
    (("placeholder",), "UI Element: Input Placeholder"),
    (("label",), "UI Element: Form Label"),
    (("tooltip",), "UI Element: Tooltip"),
    (("description",), "UI Element: Description"),
    (("nav",), "UI Element: Navigation"),
    (("modal",), "UI Element: Modal Dialog"),
)

type ResourceListener = Callable[[TranslationEntry], None]


class TranslationManager:
    """Orchestrates cache, file store, translation client and error recovery.

    Each (key, language) pair moves through absent, queued, in flight, and finally resolved
    or failed. The pending flag in the cache marks queued and in-flight pairs, so a pair is
    never translated twice at the same time.

    Attributes:
        RESERVED_KEY_PREFIXES (ClassVar[tuple[str, ...]]): Key prefixes that are never resolved.
        MAX_KEY_LENGTH (ClassVar[int]): Maximum translation key length.
        MAX_KEY_DEPTH (ClassVar[int]): Maximum number of key segments.
        MAX_LANGUAGE_CODE_LENGTH (ClassVar[int]): Maximum language code length.
        MAX_LANGUAGE_NAME_LENGTH (ClassVar[int]): Maximum display name length for new languages.
        CHUNK_PAUSE_SEC (ClassVar[float]): Pause between chunks when queuing a new language.
    """

    RESERVED_KEY_PREFIXES: ClassVar[tuple[str, ...]] = ("system.", "internal.", "debug.", "test.")
    MAX_KEY_LENGTH: ClassVar[int] = 200
    MAX_KEY_DEPTH: ClassVar[int] = 10
    MAX_LANGUAGE_CODE_LENGTH: ClassVar[int] = 10
    MAX_LANGUAGE_NAME_LENGTH: ClassVar[int] = 100
    CHUNK_PAUSE_SEC: ClassVar[float] = 1.0

    def __init__(
        self,
        config: Config,
        client: TranslationClientInterface,
        store: TranslationFileStore,
        cache: TranslationCacheManager,
        recovery_service: ErrorRecoveryService | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config (Config): Application configuration.
            client (TranslationClientInterface): AI translation client.
            store (TranslationFileStore): Translation file store.
            cache (TranslationCacheManager): Translation cache.
            recovery_service (ErrorRecoveryService | None): Consulted when background work fails.
        """
        self.config: Config = config
        self.client: TranslationClientInterface = client
        self.store: TranslationFileStore = store
        self.cache: TranslationCacheManager = cache
        self._recovery_service: ErrorRecoveryService | None = recovery_service

        self._queue: dict[str, TranslationRequest] = {}
        self._in_flight: set[str] = set()
        self._waiting_retry: set[str] = set()
        self._available_languages: list[str] = [self.source_language]
        self._is_initialized: bool = False
        self._is_closed: bool = False

        self._processor_task: asyncio.Task[None] | None = None
        self._retry_tasks: set[asyncio.Task[None]] = set()
        self._background_tasks: set[asyncio.Task[None]] = set()
        self._language_locks: dict[str, asyncio.Lock] = {}
        self._resource_listeners: list[ResourceListener] = []
        self._sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @property
    def source_language(self) -> str:
        return self.config.TRANSLATION.SOURCE_LANGUAGE

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def queued_requests(self) -> dict[str, TranslationRequest]:
        return dict(self._queue)

    def set_error_recovery_service(self, service: ErrorRecoveryService | None) -> None:
        self._recovery_service = service

    def on_resource_added(self, callback: ResourceListener) -> None:
        """Register a callback that receives every translation added at runtime or loaded at start-up."""
        self._resource_listeners.append(callback)

    async def initialize(self) -> None:
        """Discover languages and load every language file into the cache.

        Failures do not propagate; when discovery fails only the source language is known.
        """
        if self._is_initialized:
            return
        logger.info("TranslationManager initialization started")
        try:
            await self.store.ensure_directory()
            languages: list[str] = await self.store.list_languages()
            self._available_languages = sorted({*languages, self.source_language})
        except TranslationError as err:
            logger.critical("Failed to discover languages, using the source language only: %s", err)
            self._available_languages = [self.source_language]

        for language in self._available_languages:
            try:
                translations: dict[str, str] = await self.load_translations(language)
            except TranslationError as err:
                logger.warning("Failed to load translations for '%s' during initialization: %s", language, err)
                continue
            for key, text in translations.items():
                self._emit(TranslationEntry(key, text, text, language, origin=TranslationOrigin.IMPORTED))
            logger.info("Loaded %d translations for '%s'", len(translations), language)

        self._is_initialized = True
        logger.info("TranslationManager initialized with languages %s", self._available_languages)

    async def shutdown(self) -> None:
        """Cancel queue processing, scheduled retries and background writes."""
        self._is_closed = True
        tasks: list[asyncio.Task[None]] = self._active_tasks()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._processor_task = None
        logger.info("TranslationManager shut down with %d requests left in the queue", len(self._queue))

    async def drain(self) -> None:
        """Wait until queue processing, scheduled retries and background writes have finished."""
        while tasks := self._active_tasks():
            await asyncio.gather(*tasks, return_exceptions=True)

    async def get_translation(self, key: str, language: str, variables: dict[str, Any] | None = None) -> str:
        """Resolve the text of a key in a language.

        Looks in the cache, then the language file. For a language other than the source,
        a missing text is queued for translation and the source text is returned meanwhile.
        When nothing is found the key itself is returned.

        Args:
            key (str): Translation key.
            language (str): Language code.
            variables (dict[str, Any] | None): Values for ``{{name}}`` placeholders.

        Returns:
            str: The interpolated text.

        Raises:
            TranslationError: INVALID_TRANSLATION_KEY or INVALID_LANGUAGE_CODE for malformed input.
        """
        self._validate_translation_key(key)
        self._validate_language_code(language)

        text: str | None = await self._lookup(key, language)
        if text is not None:
            return StringUtils.interpolate(text, variables)

        if language != self.source_language:
            source_text: str | None = await self._lookup(key, self.source_language)
            if source_text is not None:
                try:
                    self._queue_translation(key, source_text, language)
                except TranslationError as err:
                    logger.warning("Failed to queue translation for %s -> %s: %s", key, language, err)
                return StringUtils.interpolate(source_text, variables)

        return StringUtils.interpolate(key, variables)

    async def request_translation(self, key: str, source_text: str, target_language: str | None = None) -> None:
        """Queue a translation of ``source_text`` for one language, or for every non-source language.

        Raises:
            TranslationError: For a malformed key, language code or source text.
        """
        self._validate_translation_key(key)
        self._validate_source_text(source_text)
        if target_language is None:
            await self.request_translation_for_all_languages(key, source_text)
            return
        self._validate_language_code(target_language)
        self._queue_translation(key, source_text, target_language)

    async def request_translation_for_all_languages(self, key: str, source_text: str) -> None:
        self._validate_translation_key(key)
        self._validate_source_text(source_text)
        await self._ensure_initialized()
        for language in self._available_languages:
            if language != self.source_language:
                self._queue_translation(key, source_text, language)

    def is_translation_pending(self, key: str, language: str) -> bool:
        self._validate_translation_key(key)
        self._validate_language_code(language)
        return self.cache.is_pending(key, language)

    async def load_translations(self, language: str) -> dict[str, str]:
        """Return every translation of a language, reading the file into the cache when needed.

        The cache answers only once the whole file has been loaded into it and none of its entries
        were evicted since; entries restored from a snapshot alone never count as a full load.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE, or the store's FILE_SYSTEM errors.
        """
        self._validate_language_code(language)
        if self.cache.is_language_loaded(language):
            return self.cache.get_all(language)

        try:
            translations: dict[str, str] = await self.store.read(language)
        except TranslationError:
            raise
        except OSError as err:
            raise TranslationError(
                ConfigurationErrorCode.INVALID_FILE_PATH, f"Failed to load translations for language: {language}"
            ) from err

        for key, text in translations.items():
            self.cache.set(key, language, text)
        if not self.cache.mark_language_loaded(language, len(translations)):
            logger.debug("Translations for '%s' do not fit in the cache", language)
        logger.debug("Loaded %d translations for '%s' from file", len(translations), language)
        return translations

    def get_available_languages(self) -> list[str]:
        return sorted(self._available_languages)

    async def add_new_language(self, language_code: str, language_name: str) -> None:
        """Create a language from the source language and queue all of its texts for translation.

        The new language file starts as a copy of the source file. On failure the language
        is removed from the available languages again.

        Args:
            language_code (str): Code of the new language, e.g. ``"fr"``.
            language_name (str): Display name of the new language.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE if the code is malformed or already exists, a name error,
                a FILE_SYSTEM error from the store, or INVALID_LANGUAGE_CONFIG for any other failure.
        """
        self._validate_language_code(language_code)
        self._validate_language_name(language_name)
        await self._ensure_initialized()

        if language_code in self._available_languages:
            raise TranslationError(ValidationErrorCode.INVALID_LANGUAGE_CODE, f"Language {language_code} already exists")

        try:
            await self.store.copy_structure(self.source_language, language_code)
            self._available_languages = sorted({*self._available_languages, language_code})

            entries: list[tuple[str, str]] = list((await self.load_translations(self.source_language)).items())
            chunk_size: int = max(1, self.config.TRANSLATION.CHUNK_SIZE)
            for start in range(0, len(entries), chunk_size):
                if start > 0:
                    await self._sleep(self.CHUNK_PAUSE_SEC)
                for key, source_text in entries[start : start + chunk_size]:
                    try:
                        self._queue_translation(key, source_text, language_code)
                    except TranslationError as err:
                        logger.warning("Skipping '%s' for '%s': %s", key, language_code, err)
        except TranslationError:
            self._forget_language(language_code)
            raise
        except Exception as err:
            self._forget_language(language_code)
            raise TranslationError(
                ConfigurationErrorCode.INVALID_LANGUAGE_CONFIG, f"Failed to add new language: {language_code}"
            ) from err

        logger.info("Language added: %s (%s), %d keys queued", language_code, language_name, len(entries))

    def handle_missing_key(self, languages: list[str], namespace: str, key: str, fallback_text: str) -> None:
        """React to a lookup that found no text; called synchronously by the resource bundle.

        The source language stores the fallback text as its own translation; other
        languages queue a translation of it. Never raises.

        Args:
            languages (list[str]): Languages the lookup was made for.
            namespace (str): Resource namespace; informational only.
            key (str): Translation key.
            fallback_text (str): Text shown in place of the missing translation.
        """
        for language in languages:
            try:
                if not key or not language:
                    continue
                if self.cache.is_pending(key, language) or self.cache.get(key, language) is not None:
                    continue

                source_text: str = fallback_text or key
                if language != self.source_language:
                    self._validate_translation_key(key)
                    self._validate_language_code(language)
                    self._queue_translation(key, source_text, language)
                    continue

                self.cache.set(key, language, source_text)
                self._spawn_background(self._save_source_text(key, language, source_text))
            except Exception as err:
                logger.warning("Error handling missing key %s (%s) [%s]: %s", key, namespace, language, err)

    def parse_key_context(self, key: str) -> str:
        """Describe where a key is used, for the translation prompt.

        The last segment is matched against UI roles; the preceding segments name the section.

        Args:
            key (str): Translation key, e.g. ``"player.controls.play_button"``.

        Returns:
            str: For example ``"UI Element: Button, Section: player.controls"``.
        """
        if not key or not isinstance(key, str):
            return GENERAL_CONTEXT

        parts: list[str] = key.split(".")
        last: str = parts[-1].lower()
        contexts: list[str] = []
        for patterns, description in UI_ROLE_CONTEXTS:
            if any(pattern in last for pattern in patterns):
                contexts.append(description)
                break
        if len(parts) > 1:
            contexts.append(f"Section: {'.'.join(parts[:-1])}")
        return ", ".join(contexts) if contexts else GENERAL_CONTEXT

    def resume_queue(self) -> None:
        """Start processing queued requests, e.g. after an API key has been configured."""
        if self._queue:
            self._ensure_processor()

    async def _lookup(self, key: str, language: str) -> str | None:
        cached: str | None = self.cache.get(key, language)
        if cached is not None:
            return cached
        try:
            translations: dict[str, str] = await self._load_with_recovery(language)
        except TranslationError as err:
            logger.warning("Failed to load translations for %s: %s", language, err)
            return None
        text: str | None = translations.get(key)
        if not text:
            return None
        self.cache.set(key, language, text)
        return text

    async def _load_with_recovery(self, language: str) -> dict[str, str]:
        try:
            return await self.load_translations(language)
        except TranslationError as err:
            if err.category == ErrorCategory.VALIDATION or language not in self._available_languages:
                raise
            context = ErrorContext(operation="loadTranslations", service=SERVICE_NAME, language=language)
            result: ErrorRecoveryResult | None = await self._offer_to_recovery(err, context)
            if result is None or not (result.recovered and result.should_retry):
                raise
            logger.info("Retrying load of '%s' after recovery: %s", language, result.message)
            return await self.load_translations(language)

    def _queue_translation(self, key: str, source_text: str, target_language: str) -> bool:
        queue_key: str = f"{key}:{target_language}"
        if queue_key in self._in_flight or self.cache.is_pending(key, target_language):
            return False
        if self.cache.peek(key, target_language) is not None:
            return False

        self._validate_source_text(source_text)
        self._queue[queue_key] = TranslationRequest(
            key=key,
            source_text=source_text,
            target_language=target_language,
            context=self.parse_key_context(key),
        )
        self.cache.set_pending(key, target_language)
        logger.debug("Queued translation %s", queue_key)

        if self.client.has_api_key:
            self._ensure_processor()
        else:
            logger.debug("Translation client has no API key; %s stays queued", queue_key)
        return True

    def _ensure_processor(self) -> None:
        if self._is_closed:
            return
        if self._processor_task is None or self._processor_task.done():
            self._processor_task = asyncio.get_running_loop().create_task(
                self._process_queue(), name="translation_queue"
            )

    async def _process_queue(self) -> None:
        group_size: int = max(1, self.config.TRANSLATION.MAX_CONCURRENT_REQUESTS)
        while True:
            ready: list[tuple[str, TranslationRequest]] = [
                (queue_key, request)
                for queue_key, request in self._queue.items()
                if queue_key not in self._in_flight and queue_key not in self._waiting_retry
            ]
            if not ready:
                break
            for start in range(0, len(ready), group_size):
                if start > 0:
                    await self._sleep(self.config.TRANSLATION.QUEUE_BATCH_DELAY)
                group: list[tuple[str, TranslationRequest]] = ready[start : start + group_size]
                results: list[BaseException | None] = await asyncio.gather(
                    *(self._process_request(queue_key, request) for queue_key, request in group),
                    return_exceptions=True,
                )
                for (queue_key, _), result in zip(group, results, strict=True):
                    if isinstance(result, Exception):
                        logger.error("Unexpected error while processing %s: %s", queue_key, result)
                        self._queue.pop(queue_key, None)

    async def _process_request(self, queue_key: str, request: TranslationRequest) -> None:
        if queue_key in self._in_flight or queue_key not in self._queue:
            return
        if self.cache.peek(request.key, request.target_language) is not None:
            self._complete(queue_key, request)
            return

        self._in_flight.add(queue_key)
        try:
            translation: str = await self.client.translate_text(
                request.source_text, request.target_language, request.context
            )
        except TranslationError as err:
            await self._handle_translation_error(queue_key, request, err)
            return
        finally:
            self._in_flight.discard(queue_key)

        if not self.cache.is_pending(request.key, request.target_language):
            logger.debug("Discarding translation for %s; request is no longer pending", queue_key)
            self._queue.pop(queue_key, None)
            return

        self.cache.set(request.key, request.target_language, translation)
        try:
            await self._persist_translation(request.key, request.target_language, translation)
        except TranslationError as err:
            logger.error("Failed to save translation to file for %s: %s", queue_key, err)
            await self._offer_to_recovery(
                err,
                ErrorContext(
                    operation="saveTranslation",
                    service=SERVICE_NAME,
                    language=request.target_language,
                    key=request.key,
                ),
            )

        self._emit(
            TranslationEntry(
                key=request.key,
                source_text=request.source_text,
                translated_text=translation,
                language=request.target_language,
                origin=TranslationOrigin.AI,
            )
        )
        self._complete(queue_key, request)
        logger.debug("Translation resolved %s", queue_key)

    async def _handle_translation_error(
        self, queue_key: str, request: TranslationRequest, error: TranslationError
    ) -> None:
        request.retry_count += 1
        request.last_attempt = datetime.now().astimezone()

        context = ErrorContext(
            operation="translateText",
            service=SERVICE_NAME,
            language=request.target_language,
            key=request.key,
            retry_count=request.retry_count,
        )
        result: ErrorRecoveryResult | None = await self._offer_to_recovery(error, context)
        should_retry: bool = result.should_retry if result is not None else RetryUtils.is_retryable(error)
        delay: float | None = result.retry_delay if result is not None else None

        if request.retry_count >= self.config.TRANSLATION.MAX_RETRIES or not should_retry:
            self._complete(queue_key, request)
            logger.error("Translation failed for %s -> %s: %s", request.key, request.target_language, error)
            return

        if delay is None:
            retry = self.config.RETRY
            delay = RetryUtils.compute_delay(
                request.retry_count,
                base_delay=retry.BASE_DELAY,
                max_delay=retry.MAX_DELAY,
                jitter_factor=retry.JITTER_FACTOR,
            )
        logger.warning("Retrying %s in %.1f seconds (attempt %d)", queue_key, delay, request.retry_count + 1)
        self._schedule_retry(queue_key, request, delay)

    def _schedule_retry(self, queue_key: str, request: TranslationRequest, delay: float) -> None:
        if self._is_closed:
            return
        self._waiting_retry.add(queue_key)
        task: asyncio.Task[None] = asyncio.get_running_loop().create_task(
            self._retry_after(queue_key, request, delay), name=f"translation_retry_{queue_key}"
        )
        self._retry_tasks.add(task)
        task.add_done_callback(self._retry_tasks.discard)

    async def _retry_after(self, queue_key: str, request: TranslationRequest, delay: float) -> None:
        try:
            await self._sleep(delay)
        finally:
            self._waiting_retry.discard(queue_key)
        try:
            await self._process_request(queue_key, request)
        except Exception as err:
            logger.warning("Retry failed for %s: %s", queue_key, err)
            self._complete(queue_key, request)

    async def _persist_translation(self, key: str, language: str, text: str) -> None:
        lock: asyncio.Lock = self._language_locks.setdefault(language, asyncio.Lock())
        async with lock:
            try:
                current: dict[str, str] = await self.store.read(language)
            except TranslationError as err:
                if err.code != FileSystemErrorCode.FILE_NOT_FOUND:
                    raise
                current = {}
            current[key] = text
            await self.store.write(language, current)

    async def _save_source_text(self, key: str, language: str, text: str) -> None:
        try:
            await self._persist_translation(key, language, text)
        except TranslationError as err:
            logger.warning("Failed to save source translation for %s: %s", key, err)
            return
        self._emit(TranslationEntry(key, text, text, language, origin=TranslationOrigin.MANUAL))

    async def _offer_to_recovery(self, error: TranslationError, context: ErrorContext) -> ErrorRecoveryResult | None:
        if self._recovery_service is None:
            return None
        try:
            return await self._recovery_service.handle_error(error, context)
        except Exception as err:
            logger.error("Error recovery failed for %s: %s", context.operation, err)
            return None

    def _complete(self, queue_key: str, request: TranslationRequest) -> None:
        self._queue.pop(queue_key, None)
        self.cache.remove_pending(request.key, request.target_language)

    def _emit(self, entry: TranslationEntry) -> None:
        for callback in self._resource_listeners:
            try:
                callback(entry)
            except Exception as err:
                logger.warning("Resource listener failed for %s [%s]: %s", entry.key, entry.language, err)

    def _spawn_background(self, coro: Coroutine[Any, Any, None]) -> None:
        task: asyncio.Task[None] = asyncio.get_running_loop().create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def _active_tasks(self) -> list[asyncio.Task[None]]:
        tasks: list[asyncio.Task[None]] = [*self._retry_tasks, *self._background_tasks]
        if self._processor_task is not None:
            tasks.append(self._processor_task)
        return [task for task in tasks if not task.done()]

    def _forget_language(self, language: str) -> None:
        self._available_languages = [code for code in self._available_languages if code != language]

    async def _ensure_initialized(self) -> None:
        if not self._is_initialized:
            await self.initialize()

    def _validate_translation_key(self, key: str) -> None:
        if not key or not isinstance(key, str):
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_KEY, "Translation key must be a non-empty string"
            )
        if len(key) > self.MAX_KEY_LENGTH:
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_KEY,
                f"Translation key length must be between 1 and {self.MAX_KEY_LENGTH} characters",
            )
        if not TRANSLATION_KEY_PATTERN.fullmatch(key):
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_KEY,
                "Translation key contains invalid characters. "
                "Only letters, numbers, dots, underscores, and hyphens are allowed",
            )
        if "" in key.split("."):
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_KEY, f"Translation key has an empty segment: {key}"
            )
        if StringUtils.key_depth(key) > self.MAX_KEY_DEPTH:
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_KEY,
                f"Translation key has more than {self.MAX_KEY_DEPTH} segments",
            )
        if key.startswith(self.RESERVED_KEY_PREFIXES):
            raise TranslationError(ValidationErrorCode.INVALID_TRANSLATION_KEY, f"Translation key is reserved: {key}")

    def _validate_language_code(self, language: str) -> None:
        if not language or not isinstance(language, str):
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE, "Language code must be a non-empty string"
            )
        if len(language) > self.MAX_LANGUAGE_CODE_LENGTH:
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE,
                f"Language code too long: {len(language)} characters (max: {self.MAX_LANGUAGE_CODE_LENGTH})",
            )
        if not LANGUAGE_CODE_PATTERN.fullmatch(language):
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE,
                f"Invalid language code format: {language}. Expected format: 'en' or 'en-US'",
            )

    def _validate_source_text(self, text: str) -> None:
        if not text or not isinstance(text, str):
            raise TranslationError(ValidationErrorCode.EMPTY_SOURCE_TEXT, "Source text must be a non-empty string")
        max_length: int = self.config.TRANSLATION.MAX_TEXT_LENGTH
        if len(text) > max_length:
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_FORMAT,
                f"Source text length must be between 1 and {max_length} characters",
            )

    def _validate_language_name(self, name: str) -> None:
        if not name or not isinstance(name, str):
            raise TranslationError(ValidationErrorCode.MISSING_REQUIRED_FIELD, "Language name must be a non-empty string")
        if len(name) > self.MAX_LANGUAGE_NAME_LENGTH:
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_FORMAT,
                f"Language name too long: {len(name)} characters (max: {self.MAX_LANGUAGE_NAME_LENGTH})",
            )
        if not all(char.isalpha() or char in " -()" for char in name):
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_FORMAT,
                "Language name may only contain letters, spaces, hyphens and parentheses",
            )
