"""Tests for the localize console entry point."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

import localize
from models.config_models import Config

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setattr(localize, "setup_logging", lambda config: None)
    return tmp_path


def cli_args(workspace: Path, *command: str) -> list[str]:
    return ["--config", str(workspace / "missing.ini"), "--locales-dir", str(workspace / "locales"), *command]


def test_parser_requires_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        localize.build_parser().parse_args([])
    assert exc_info.value.code == 2
    assert "usage: localize" in capsys.readouterr().err


def test_parser_collects_init_languages() -> None:
    args = localize.build_parser().parse_args(["init", "--with", "fr", "--with", "de"])
    assert args.command == "init"
    assert args.with_languages == ["fr", "de"]
    assert args.config == localize.CFG_FILE


def test_load_config_without_file_uses_defaults(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = localize.build_parser().parse_args(cli_args(workspace, "--debug", "list"))

    config: Config = localize.load_config(args)

    assert config.STORE.LOCALES_DIR == str(workspace / "locales")
    assert config.GENERAL.DEBUG is True
    assert config.TRANSLATION.ENGINE == Config().TRANSLATION.ENGINE
    assert "not found, using defaults" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_init_then_list(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert await localize.main(cli_args(workspace, "init", "--with", "fr")) == localize.EXIT_OK

    data: dict = json.loads((workspace / "locales" / "en" / "translation.json").read_text(encoding="utf-8"))
    assert data["nav"]["home"] == "Home"
    assert (workspace / "locales" / "fr").is_dir()

    capsys.readouterr()
    assert await localize.main(cli_args(workspace, "list")) == localize.EXIT_OK
    assert "Total: 1 languages" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_add_language_without_api_key(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    await localize.main(cli_args(workspace, "init"))
    capsys.readouterr()

    assert await localize.main(cli_args(workspace, "add-language", "fr", "French")) == localize.EXIT_OK

    captured = capsys.readouterr()
    assert "Suggested name for fr: Français" in captured.out
    assert "Language French (fr) added successfully!" in captured.out
    assert "translations are queued but no API key is configured" in captured.err
    assert (workspace / "locales" / "fr" / "translation.json").exists()


@pytest.mark.asyncio
async def test_add_language_with_invalid_code(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    await localize.main(cli_args(workspace, "init"))
    capsys.readouterr()

    assert await localize.main(cli_args(workspace, "add-language", "Deutsch", "German")) == localize.EXIT_FAILURE

    captured = capsys.readouterr()
    assert "Invalid language code: Deutsch" in captured.err
    assert "de - Deutsch" in captured.out


@pytest.mark.asyncio
async def test_add_existing_language_fails(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    await localize.main(cli_args(workspace, "init"))

    assert await localize.main(cli_args(workspace, "add-language", "en", "English")) == localize.EXIT_FAILURE
    assert "already exists" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_validate_key_without_key(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert await localize.main(cli_args(workspace, "validate-key")) == localize.EXIT_FAILURE

    out: str = capsys.readouterr().out
    assert "API key configured: no" in out
    assert "GEMINI_API_KEY" in out


@pytest.mark.asyncio
async def test_broken_config_file(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file: Path = workspace / "broken.ini"
    config_file.write_text("[TRANSLATION]\nENGINE = unquoted\n", encoding="utf-8")

    assert await localize.main(["--config", str(config_file), "list"]) == localize.EXIT_FAILURE
    assert "Failed to load configuration file" in capsys.readouterr().err
