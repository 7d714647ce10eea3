from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from typing import Any

__all__: list[str] = [
    "FileMissingError",
    "FilePermissionError",
    "FileUtils",
    "FileUtilsError",
    "InvalidFileTypeError",
]


class FileUtils:
    """Utility class for blocking file operations used by the translation store.

    All methods are synchronous; async callers run them through ``asyncio.to_thread``.
    """

    @staticmethod
    def check_file_status(file_path: Path) -> None:
        """Check that a path refers to an existing regular file.

        Args:
            file_path (Path): The path to the file to check.

        Raises:
            FileMissingError: If the file does not exist.
            InvalidFileTypeError: If the path is a directory or a symbolic link.
        """
        if not file_path.exists():
            msg = f"File does not exist: {file_path}"
            raise FileMissingError(msg)
        if file_path.is_dir() or file_path.is_symlink():
            msg = f"Invalid file type (directory or symbolic link): {file_path}"
            raise InvalidFileTypeError(msg)

    @staticmethod
    def is_readable_file(file_path: Path) -> bool:
        """Return True if the path is an existing regular file the process can read."""
        try:
            FileUtils.check_file_status(file_path)
        except FileUtilsError:
            return False
        return os.access(file_path, os.R_OK)

    @staticmethod
    def remove(file_path: Path, *, missing_ok: bool = True) -> None:
        """Remove a file.

        Args:
            file_path (Path): The path to the file to remove.
            missing_ok (bool): If False, a missing file raises FileMissingError.

        Raises:
            FileMissingError: If the file does not exist and ``missing_ok`` is False.
            InvalidFileTypeError: If the path is a directory.
            FilePermissionError: If there are insufficient permissions to delete the file.
        """
        if not file_path.exists():
            if missing_ok:
                return
            msg = f"File does not exist: {file_path}"
            raise FileMissingError(msg)
        if file_path.is_dir():
            msg = f"Invalid file type (directory): {file_path}"
            raise InvalidFileTypeError(msg)
        try:
            file_path.unlink(missing_ok=True)
        except PermissionError as err:
            msg = f"Insufficient permissions to delete the file: {file_path}"
            raise FilePermissionError(msg) from err

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-input path to an absolute path safely.

        Expands environment variables (e.g., $HOME, %APPDATA%), expands ~ to the home directory,
        and resolves relative paths based on the current working directory.

        Args:
            path (str | Path): The input path (e.g., "~/project/src/locales").
            strict (bool): Whether to raise an exception if the path does not exist. Defaults to False.

        Returns:
            Path: The converted absolute `Path` object.
        """
        expanded: str = os.path.expandvars(str(path))
        user_expanded: Path = Path(expanded).expanduser()

        if user_expanded.is_absolute():
            return user_expanded.resolve(strict=strict)
        return (Path.cwd() / user_expanded).resolve(strict=strict)

    @staticmethod
    def read_json(file_path: Path) -> Any:
        """Read and parse a UTF-8 JSON file.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the content is not valid UTF-8 JSON.
        """
        with file_path.open(encoding="utf-8") as fp:
            return json.load(fp)

    @staticmethod
    def write_text_synced(file_path: Path, content: str) -> None:
        """Write text and flush it to disk before returning.

        Raises:
            OSError: If the file cannot be written.
        """
        with file_path.open("w", encoding="utf-8", newline="\n") as fp:
            fp.write(content)
            fp.flush()
            os.fsync(fp.fileno())

    @staticmethod
    def copy_file(source: Path, destination: Path) -> None:
        """Copy file content and metadata.

        Raises:
            OSError: If the copy fails.
        """
        shutil.copy2(source, destination)


class FileUtilsError(Exception):
    """Custom exception for FileUtils-related errors."""


class FileMissingError(FileUtilsError):
    """Custom exception for file missing errors."""


class InvalidFileTypeError(FileUtilsError):
    """Custom exception for invalid file type errors."""


class FilePermissionError(FileUtilsError):
    """Custom exception for file permission errors."""
