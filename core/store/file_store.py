"""Durable per-language translation file store.

Translations live in ``<locales_dir>/<language>/translation.json`` as nested JSON with tab
indentation. Writes go through a uniquely named temp file that is verified and then moved
into place with ``os.replace``; the previous good file is kept as ``translation.json.backup``.
Blocking file I/O runs in worker threads.
"""

from __future__ import annotations

import asyncio
import errno
import json
import os
import uuid
from typing import TYPE_CHECKING, Any, ClassVar

from models.error_models import FileSystemErrorCode, TranslationError, ValidationErrorCode
from models.re_models import LANGUAGE_CODE_PATTERN
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from models.config_models import Config

__all__: list[str] = ["TranslationFileStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationFileStore:
    """File-backed store for flat translation maps.

    Every public operation validates its language code first and raises
    ``TranslationError(INVALID_LANGUAGE_CODE)`` for malformed codes.

    Attributes:
        BACKUP_SUFFIX (ClassVar[str]): Suffix of the backup file.
        TEMP_SUFFIX (ClassVar[str]): Infix of temporary files written before the atomic move.
    """

    BACKUP_SUFFIX: ClassVar[str] = ".backup"
    TEMP_SUFFIX: ClassVar[str] = ".tmp"

    def __init__(self, config: Config, locales_dir: Path | None = None) -> None:
        """Initialize the store.

        Args:
            config (Config): Application configuration.
            locales_dir (Path | None): Root directory of the language folders. Defaults to ``STORE.LOCALES_DIR``.
        """
        self.config: Config = config
        self.locales_dir: Path = locales_dir if locales_dir is not None else FileUtils.resolve_path(config.STORE.LOCALES_DIR)
        self.file_name: str = config.STORE.TRANSLATION_FILE

    def language_dir(self, language: str) -> Path:
        return self.locales_dir / language

    def translation_file_path(self, language: str) -> Path:
        return self.language_dir(language) / self.file_name

    def backup_file_path(self, language: str) -> Path:
        path: Path = self.translation_file_path(language)
        return path.with_name(f"{path.name}{self.BACKUP_SUFFIX}")

    async def read(self, language: str) -> dict[str, str]:
        """Read the flat translation map of a language.

        A corrupt file is replaced by its backup when the backup parses.

        Args:
            language (str): Language code.

        Returns:
            dict[str, str]: Translation key to text.

        Raises:
            TranslationError: FS_FILE_NOT_FOUND, FS_CORRUPTION_DETECTED, FS_PERMISSION_DENIED or FS_READ_FAILED.
        """
        self._validate_language_code(language)
        return await asyncio.to_thread(self._read_sync, language)

    async def write(self, language: str, translations: dict[str, str]) -> None:
        """Atomically replace the translation file of a language.

        Args:
            language (str): Language code.
            translations (dict[str, str]): Flat translation map; dotted keys become nested objects.

        Raises:
            TranslationError: FS_DIRECTORY_CREATION_FAILED, FS_BACKUP_FAILED, FS_PERMISSION_DENIED,
                FS_DISK_FULL or FS_WRITE_FAILED.
        """
        self._validate_language_code(language)
        await asyncio.to_thread(self._write_sync, language, dict(translations))

    async def backup(self, language: str) -> None:
        """Copy the current translation file to its backup path.

        Does nothing when the file is missing or does not parse, so a good backup is never
        overwritten with corrupt content.

        Raises:
            TranslationError: FS_BACKUP_FAILED if the copy fails.
        """
        self._validate_language_code(language)
        await asyncio.to_thread(self._backup_sync, language)

    async def restore(self, language: str) -> None:
        """Replace the translation file with its backup.

        Raises:
            TranslationError: FS_RESTORE_FAILED if the backup is missing, unreadable or invalid.
        """
        self._validate_language_code(language)
        await asyncio.to_thread(self._restore_sync, language)

    async def ensure_directory(self) -> None:
        """Create the locales directory if needed.

        Raises:
            TranslationError: FS_DIRECTORY_CREATION_FAILED.
        """
        await asyncio.to_thread(self._make_dir_sync, self.locales_dir)

    async def create_language_directory(self, language: str) -> None:
        self._validate_language_code(language)
        await asyncio.to_thread(self._make_dir_sync, self.language_dir(language))

    async def list_languages(self) -> list[str]:
        """List languages that have a readable translation file.

        Directories whose names are not language codes are skipped.

        Returns:
            list[str]: Sorted language codes.

        Raises:
            TranslationError: FS_DIRECTORY_CREATION_FAILED or FS_READ_FAILED.
        """
        return await asyncio.to_thread(self._list_languages_sync)

    async def copy_structure(self, source_language: str, target_language: str) -> None:
        """Copy the translation map of one language into another language's file.

        Raises:
            TranslationError: INVALID_LANGUAGE_CODE if the languages are equal, FS_FILE_NOT_FOUND if the source
                has no file, or any error of ``read`` and ``write``.
        """
        self._validate_language_code(source_language)
        self._validate_language_code(target_language)
        if source_language == target_language:
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE, "Source and target languages cannot be the same"
            )

        try:
            translations: dict[str, str] = await self.read(source_language)
        except TranslationError as err:
            if err.code == FileSystemErrorCode.FILE_NOT_FOUND:
                raise TranslationError(
                    FileSystemErrorCode.FILE_NOT_FOUND, f"Source language file not found: {source_language}"
                ) from err
            raise

        await self.create_language_directory(target_language)
        await self.write(target_language, translations)
        logger.info("Copied %d keys from '%s' to '%s'", len(translations), source_language, target_language)

    async def exists(self, language: str) -> bool:
        self._validate_language_code(language)
        return await asyncio.to_thread(self.translation_file_path(language).is_file)

    def _read_sync(self, language: str) -> dict[str, str]:
        path: Path = self.translation_file_path(language)
        if not path.exists():
            raise TranslationError(FileSystemErrorCode.FILE_NOT_FOUND, f"Translation file not found: {path}")

        try:
            tree: dict[str, Any] = self._parse_tree(path)
        except PermissionError as err:
            raise TranslationError(
                FileSystemErrorCode.PERMISSION_DENIED, f"Permission denied reading file: {path}"
            ) from err
        except OSError as err:
            raise TranslationError(
                FileSystemErrorCode.READ_FAILED, f"Failed to read translation file: {path}"
            ) from err
        except ValueError as err:
            logger.warning("Translation file is corrupt, trying backup: %s (%s)", path, err)
            return self._recover_from_backup_sync(language, err)

        return StringUtils.flatten(tree)

    def _recover_from_backup_sync(self, language: str, cause: Exception) -> dict[str, str]:
        path: Path = self.translation_file_path(language)
        backup_path: Path = self.backup_file_path(language)
        try:
            tree: dict[str, Any] = self._parse_tree(backup_path)
        except (OSError, ValueError) as err:
            logger.error("Backup unusable for '%s': %s", language, err)
            raise TranslationError(
                FileSystemErrorCode.CORRUPTION_DETECTED, f"Invalid JSON in translation file: {path}"
            ) from cause

        try:
            self._atomic_copy_sync(backup_path, path)
            logger.warning("Translation file for '%s' restored from backup", language)
        except OSError as err:
            logger.warning("Backup parsed but could not replace the corrupt file for '%s': %s", language, err)
        return StringUtils.flatten(tree)

    def _write_sync(self, language: str, translations: dict[str, str]) -> None:
        path: Path = self.translation_file_path(language)
        self._make_dir_sync(self.language_dir(language))
        self._backup_sync(language)

        content: str = json.dumps(StringUtils.unflatten(translations), ensure_ascii=False, indent="\t")
        temp_path: Path = self._temp_path(path)
        try:
            FileUtils.write_text_synced(temp_path, content)
            self._parse_tree(temp_path)
            os.replace(temp_path, path)
        except (OSError, ValueError) as err:
            self._discard_temp(temp_path)
            code: FileSystemErrorCode = self._os_error_code(err, FileSystemErrorCode.WRITE_FAILED)
            raise TranslationError(code, f"Failed to write translation file: {path}") from err
        logger.debug("Wrote %d keys to %s", len(translations), path)

    def _backup_sync(self, language: str) -> None:
        path: Path = self.translation_file_path(language)
        if not path.exists():
            return
        try:
            self._parse_tree(path)
        except (OSError, ValueError) as err:
            logger.warning("Skipping backup of unreadable translation file %s: %s", path, err)
            return
        try:
            self._atomic_copy_sync(path, self.backup_file_path(language))
        except OSError as err:
            raise TranslationError(
                FileSystemErrorCode.BACKUP_FAILED, f"Failed to create backup for: {path}"
            ) from err

    def _restore_sync(self, language: str) -> None:
        path: Path = self.translation_file_path(language)
        backup_path: Path = self.backup_file_path(language)
        if not backup_path.exists():
            raise TranslationError(FileSystemErrorCode.RESTORE_FAILED, f"Backup file not found: {backup_path}")
        try:
            self._parse_tree(backup_path)
            self._atomic_copy_sync(backup_path, path)
        except (OSError, ValueError) as err:
            raise TranslationError(
                FileSystemErrorCode.RESTORE_FAILED, f"Failed to restore from backup: {backup_path}"
            ) from err
        logger.info("Translation file for '%s' restored from backup", language)

    def _list_languages_sync(self) -> list[str]:
        self._make_dir_sync(self.locales_dir)
        try:
            entries: list[Path] = list(self.locales_dir.iterdir())
        except OSError as err:
            raise TranslationError(
                FileSystemErrorCode.READ_FAILED, f"Failed to read available languages from: {self.locales_dir}"
            ) from err

        languages: list[str] = [
            entry.name
            for entry in entries
            if entry.is_dir()
            and LANGUAGE_CODE_PATTERN.fullmatch(entry.name)
            and FileUtils.is_readable_file(entry / self.file_name)
        ]
        return sorted(languages)

    def _make_dir_sync(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise TranslationError(
                FileSystemErrorCode.DIRECTORY_CREATION_FAILED, f"Failed to create directory: {directory}"
            ) from err

    def _atomic_copy_sync(self, source: Path, destination: Path) -> None:
        temp_path: Path = self._temp_path(destination)
        try:
            FileUtils.copy_file(source, temp_path)
            os.replace(temp_path, destination)
        except OSError:
            self._discard_temp(temp_path)
            raise

    def _temp_path(self, path: Path) -> Path:
        return path.with_name(f"{path.name}{self.TEMP_SUFFIX}.{os.getpid()}.{uuid.uuid4().hex}")

    @staticmethod
    def _discard_temp(temp_path: Path) -> None:
        try:
            FileUtils.remove(temp_path)
        except Exception as err:  # noqa: BLE001
            logger.warning("Failed to delete temp file %s: %s", temp_path, err)

    @staticmethod
    def _parse_tree(path: Path) -> dict[str, Any]:
        data: Any = FileUtils.read_json(path)
        if not isinstance(data, dict):
            msg = f"root of {path.name} is not a JSON object"
            raise ValueError(msg)  # noqa: TRY004
        return data

    @staticmethod
    def _os_error_code(err: Exception, default: FileSystemErrorCode) -> FileSystemErrorCode:
        if isinstance(err, PermissionError):
            return FileSystemErrorCode.PERMISSION_DENIED
        if isinstance(err, OSError) and err.errno == errno.ENOSPC:
            return FileSystemErrorCode.DISK_FULL
        return default

    @staticmethod
    def _validate_language_code(language: str) -> None:
        if not language or not isinstance(language, str):
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE, "Language code must be a non-empty string"
            )
        if not LANGUAGE_CODE_PATTERN.fullmatch(language):
            raise TranslationError(
                ValidationErrorCode.INVALID_LANGUAGE_CODE,
                f"Invalid language code format: {language}. Expected format: 'en' or 'en-US'",
            )
