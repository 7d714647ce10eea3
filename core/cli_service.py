"""Operator console operations: add languages, bulk-translate, and report progress."""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, ClassVar, Final

from core.trans.const_languages import COMMON_LANGUAGES
from models.error_models import TranslationError, ValidationErrorCode
from models.re_models import LANGUAGE_CODE_PATTERN
from models.translation_models import LanguageProgress, TranslationProgress
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import AsyncIterator, Awaitable, Callable

    from core.trans.manager import TranslationManager

__all__: list[str] = ["STARTER_TRANSLATIONS", "CliService", "ProgressCallback"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

type ProgressCallback = Callable[[int, str | None], None]

STARTER_TRANSLATIONS: Final[dict[str, str]] = {
    "welcome": "Welcome!",
    "greeting": "Hello, {{name}}!",
    "language": "Language",
    "player.play_button": "Play",
    "player.pause_button": "Pause",
    "player.volume_label": "Volume",
    "player.error_message": "The media could not be played",
    "nav.home": "Home",
    "nav.library": "Library",
    "nav.settings": "Settings",
}


class CliService:
    """Console-facing wrapper around ``TranslationManager``.

    Output goes to stdout; failures are logged and re-raised to the console tool.

    Attributes:
        BAR_LENGTH (ClassVar[int]): Cells in the progress bar printed by ``show_progress``.
        MINI_BAR_LENGTH (ClassVar[int]): Cells in the per-language bar of the statistics table.
        PROGRESS_PAUSE_SEC (ClassVar[float]): Pause between chunks in ``translate_all_keys``.
        MAX_SUGGESTIONS (ClassVar[int]): Maximum number of language code suggestions.
    """

    BAR_LENGTH: ClassVar[int] = 30
    MINI_BAR_LENGTH: ClassVar[int] = 10
    PROGRESS_PAUSE_SEC: ClassVar[float] = 0.1
    MAX_SUGGESTIONS: ClassVar[int] = 5
    MAX_LANGUAGE_CODE_LENGTH: ClassVar[int] = 10

    def __init__(self, manager: TranslationManager) -> None:
        self.manager: TranslationManager = manager
        self._progress_callbacks: dict[str, ProgressCallback] = {}
        self._sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @property
    def source_language(self) -> str:
        return self.manager.source_language

    async def init_locales(self, languages: list[str] | None = None) -> bool:
        """Create the locales directory and seed the source language with starter texts.

        An existing source file is left untouched.

        Args:
            languages (list[str] | None): Extra languages that get an empty directory.

        Returns:
            bool: True if the starter source file was written.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE for a malformed extra language, or a store error.
        """
        store = self.manager.store
        await store.ensure_directory()

        created: bool = False
        if not await store.exists(self.source_language):
            await store.write(self.source_language, STARTER_TRANSLATIONS)
            created = True
            print(f"Created {store.translation_file_path(self.source_language)} with {len(STARTER_TRANSLATIONS)} keys")
        else:
            print(f"Source language file already exists: {store.translation_file_path(self.source_language)}")

        for code in languages or []:
            if not self.validate_language_code(code):
                raise TranslationError(ValidationErrorCode.INVALID_LANGUAGE_CODE, f"Invalid language code: {code}")
            if code == self.source_language:
                continue
            await store.create_language_directory(code)
            print(f"Created language directory: {store.language_dir(code)}")
        return created

    async def add_language(self, language_code: str, language_name: str) -> None:
        """Add a language and queue all of its texts for translation.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE if the code is malformed or already exists,
                or any error of ``TranslationManager.add_new_language``.
        """
        if not self.validate_language_code(language_code):
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE,
                f"Invalid language code format: {language_code}. Expected format: 'en' or 'en-US'",
            )
        if language_code in self.manager.get_available_languages():
            raise TranslationError(ValidationErrorCode.INVALID_LANGUAGE_CODE, f"Language {language_code} already exists")

        self.show_progress("Adding Language", 0, f"Initializing {language_name} ({language_code})")
        try:
            await self.manager.add_new_language(language_code, language_name)
        except TranslationError as err:
            logger.error("Failed to add language %s: %s", language_code, err)
            raise
        self.show_progress("Adding Language", 100, f"Successfully added {language_name} ({language_code})")
        print(f"Language {language_name} ({language_code}) added successfully!")

    async def translate_all_keys(self, source_language: str, target_language: str) -> AsyncIterator[TranslationProgress]:
        """Queue every source key for translation into the target language.

        A key that fails to queue is logged and still counts toward the progress.

        Args:
            source_language (str): Language to read the texts from.
            target_language (str): Language to translate into.

        Yields:
            TranslationProgress: The key just handled and the overall percentage.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE for a malformed code, or a store error for the source.
        """
        for label, code in (("source", source_language), ("target", target_language)):
            if not self.validate_language_code(code):
                raise TranslationError(
                    ValidationErrorCode.INVALID_LANGUAGE_CODE, f"Invalid {label} language code: {code}"
                )

        source_translations: dict[str, str] = await self.manager.load_translations(source_language)
        keys: list[str] = list(source_translations)
        total: int = len(keys)
        if total == 0:
            print(f"No translations found for source language: {source_language}")
            return

        print(f"Starting translation of {total} keys from {source_language} to {target_language}")
        chunk_size: int = max(1, self.manager.config.TRANSLATION.CHUNK_SIZE)
        processed: int = 0
        for start in range(0, total, chunk_size):
            if start > 0:
                await self._sleep(self.PROGRESS_PAUSE_SEC)
            chunk: list[str] = keys[start : start + chunk_size]
            results = await asyncio.gather(
                *(self.manager.request_translation(key, source_translations[key], target_language) for key in chunk),
                return_exceptions=True,
            )
            for key, result in zip(chunk, results, strict=True):
                if isinstance(result, Exception):
                    logger.warning("Failed to translate key '%s': %s", key, result)
                processed += 1
                yield TranslationProgress(key=key, progress=round(processed / total * 100))

        print(f"Completed translation of {processed}/{total} keys to {target_language}")

    async def get_translation_progress(self, language_code: str) -> LanguageProgress:
        """Count source keys, keys present in the target language, and keys still pending.

        An unreadable target language counts as nothing translated and nothing pending.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE, or a store error for the source language.
        """
        if not self.validate_language_code(language_code):
            raise TranslationError(ValidationErrorCode.INVALID_LANGUAGE_CODE, f"Invalid language code: {language_code}")

        source_translations: dict[str, str] = await self.manager.load_translations(self.source_language)
        progress = LanguageProgress(total=len(source_translations))
        try:
            target_translations: dict[str, str] = await self.manager.load_translations(language_code)
        except TranslationError as err:
            logger.debug("No translations for %s: %s", language_code, err)
            return progress

        progress.translated = sum(1 for key in source_translations if key in target_translations)
        progress.pending = sum(1 for key in source_translations if self._is_pending(key, language_code))
        return progress

    def validate_language_code(self, code: str) -> bool:
        if not code or not isinstance(code, str):
            return False
        if len(code) > self.MAX_LANGUAGE_CODE_LENGTH:
            return False
        return LANGUAGE_CODE_PATTERN.fullmatch(code) is not None

    def validate_and_suggest(self, code: str) -> tuple[bool, list[str]]:
        """Validate a language code and suggest known codes when it is malformed.

        Returns:
            tuple[bool, list[str]]: Whether the code is valid, and up to five suggested codes.
        """
        if self.validate_language_code(code):
            return True, []

        lower_code: str = (code or "").lower()
        suggestions: list[str] = [
            valid_code
            for valid_code, name in COMMON_LANGUAGES.items()
            if lower_code and (valid_code.lower() == lower_code or lower_code in name.lower())
        ]
        return False, suggestions[: self.MAX_SUGGESTIONS]

    @staticmethod
    def get_suggested_language_name(code: str) -> str | None:
        return COMMON_LANGUAGES.get(code)

    @staticmethod
    def get_common_languages() -> dict[str, str]:
        return dict(COMMON_LANGUAGES)

    def display_available_languages(self) -> None:
        languages: list[str] = self.manager.get_available_languages()
        print("\nAvailable Languages:")
        print("-" * 50)
        for code in languages:
            name: str = self.get_suggested_language_name(code) or "Unknown"
            status: str = "(Source)" if code == self.source_language else ""
            print(f"  {code:<8} | {name} {status}".rstrip())
        print("-" * 50)
        print(f"Total: {len(languages)} languages\n")

    async def display_translation_stats(self) -> None:
        print("\nTranslation Statistics:")
        print("-" * 70)
        print(f"{'Language':<12}| {'Total':<6}| {'Translated':<10}| {'Pending':<8}| Progress")
        print("-" * 70)
        for code in self.manager.get_available_languages():
            try:
                progress: LanguageProgress = await self.get_translation_progress(code)
            except TranslationError as err:
                logger.warning("Failed to load statistics for %s: %s", code, err)
                print(f"{code:<12}| Error loading stats")
                continue
            percentage: int = round(progress.translated / progress.total * 100) if progress.total else 0
            print(
                f"{code:<12}| {progress.total:<6}| {progress.translated:<10}| {progress.pending:<8}| "
                f"{self._bar(percentage, self.MINI_BAR_LENGTH)} {percentage}%"
            )
        print("-" * 70 + "\n")

    def show_progress(self, operation: str, progress: float, details: str | None = None) -> None:
        """Print a progress bar on the current line and notify the operation's callback.

        Args:
            operation (str): Operation label; also selects the callback.
            progress (float): Percentage, clamped to 0..100.
            details (str | None): Text printed after the bar.
        """
        percent: int = round(max(0.0, min(100.0, progress)))
        text: str = f"{operation}: [{self._bar(percent, self.BAR_LENGTH)}] {percent}%"
        if details:
            text = f"{text} - {details}"
        sys.stdout.write(f"\r{text}")
        if percent == 100:
            sys.stdout.write("\n")
        sys.stdout.flush()

        callback: ProgressCallback | None = self._progress_callbacks.get(operation)
        if callback is not None:
            callback(percent, details)

    def on_progress(self, operation: str, callback: ProgressCallback) -> None:
        self._progress_callbacks[operation] = callback

    def off_progress(self, operation: str) -> None:
        self._progress_callbacks.pop(operation, None)

    def _is_pending(self, key: str, language: str) -> bool:
        try:
            return self.manager.is_translation_pending(key, language)
        except TranslationError:
            return False

    @staticmethod
    def _bar(percent: int, length: int) -> str:
        filled: int = round(percent / 100 * length)
        return "█" * filled + "░" * (length - filled)
