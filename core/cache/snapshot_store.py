"""Key-value ports used to persist cache snapshots.

The cache manager only depends on the ``SnapshotStore`` protocol; implementations decide
where snapshots live. All methods are blocking and are called from worker threads.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

__all__: list[str] = ["JsonFileSnapshotStore", "MemorySnapshotStore", "NullSnapshotStore", "SnapshotStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@runtime_checkable
class SnapshotStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class NullSnapshotStore:
    """Snapshot store that keeps nothing."""

    def get(self, key: str) -> str | None:
        _ = key
        return None

    def set(self, key: str, value: str) -> None:
        _ = key, value

    def remove(self, key: str) -> None:
        _ = key


class MemorySnapshotStore:
    """Snapshot store backed by a dict; values are lost when the process exits."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self._lock: threading.Lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self.data.pop(key, None)


class JsonFileSnapshotStore:
    """Snapshot store that keeps every key in one JSON object on disk.

    The file is replaced atomically on each write. An unreadable file is treated as empty.

    Args:
        file_path (Path): Location of the JSON file.
    """

    def __init__(self, file_path: Path) -> None:
        self.file_path: Path = file_path
        self._lock: threading.Lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            value: object = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data: dict[str, object] = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data: dict[str, object] = self._load()
            if data.pop(key, None) is not None:
                self._save(data)

    def _load(self) -> dict[str, object]:
        if not self.file_path.exists():
            return {}
        try:
            data: object = FileUtils.read_json(self.file_path)
        except (OSError, ValueError) as err:
            logger.warning("Snapshot file unreadable, starting empty: %s (%s)", self.file_path, err)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, object]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path: Path = self.file_path.with_name(f"{self.file_path.name}.tmp.{os.getpid()}.{uuid.uuid4().hex}")
        try:
            FileUtils.write_text_synced(temp_path, json.dumps(data, ensure_ascii=False))
            os.replace(temp_path, self.file_path)
        finally:
            FileUtils.remove(temp_path)
