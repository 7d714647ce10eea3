"""Tests for SharedData service wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.shared_data import SharedData
from core.trans.engines.gemini import GeminiTranslationClient
from models.config_models import Config
from models.error_models import ConfigurationErrorCode, TranslationError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Config:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    config = Config()
    config.STORE.LOCALES_DIR = str(tmp_path / "locales")
    return config


@pytest.mark.asyncio
async def test_unknown_engine(config: Config) -> None:
    config.TRANSLATION.ENGINE = "nope"

    with pytest.raises(TranslationError) as exc_info:
        await SharedData(config).async_init()
    assert exc_info.value.code == ConfigurationErrorCode.INVALID_LANGUAGE_CONFIG


@pytest.mark.asyncio
async def test_services_are_connected(config: Config) -> None:
    shared_data = SharedData(config)
    await shared_data.async_init()
    await shared_data.file_store.write("en", {"welcome": "Welcome!"})
    await shared_data.component_load()
    try:
        assert isinstance(shared_data.client, GeminiTranslationClient)
        assert shared_data.trans_manager.is_initialized

        bundle = shared_data.resource_bundle
        assert bundle.t("welcome", "en") == "Welcome!"
        assert bundle.t("welcome", "fr") == "Welcome!"
        assert "welcome:fr" in shared_data.trans_manager.queued_requests
        assert bundle.describe("nav.home") == "Section: nav"
    finally:
        await shared_data.component_teardown()
