"""Durable translation file storage."""

from __future__ import annotations

from core.store.file_store import TranslationFileStore

__all__: list[str] = ["TranslationFileStore"]
