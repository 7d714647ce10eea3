"""Tests for ResourceBundle lookups and the missing-key hook."""

from __future__ import annotations

import pytest

from handlers.resource_bundle import DEFAULT_NAMESPACE, ResourceBundle
from models.translation_models import TranslationEntry, TranslationOrigin


@pytest.fixture
def bundle() -> ResourceBundle:
    bundle = ResourceBundle(fallback_language="en")
    bundle.add_resource("en", DEFAULT_NAMESPACE, "greeting", "Hello, {{name}}!")
    bundle.add_resource("fr", DEFAULT_NAMESPACE, "greeting", "Bonjour, {{name}} !")
    return bundle


def test_lookup_interpolates_variables(bundle: ResourceBundle) -> None:
    assert bundle.t("greeting", "fr", name="Ana") == "Bonjour, Ana !"
    assert bundle.languages == ["en", "fr"]


def test_missing_key_uses_fallback_language_and_notifies(bundle: ResourceBundle) -> None:
    calls: list[tuple[list[str], str, str, str]] = []
    bundle.set_missing_key_handler(lambda langs, ns, key, fallback: calls.append((langs, ns, key, fallback)))

    assert bundle.t("greeting", "de", name="Ana") == "Hello, Ana!"
    assert calls == [(["de"], DEFAULT_NAMESPACE, "greeting", "Hello, {{name}}!")]


def test_missing_everywhere_uses_default_then_key(bundle: ResourceBundle) -> None:
    assert bundle.t("nav.home", "fr", "Home") == "Home"
    assert bundle.t("nav.home", "fr") == "nav.home"


def test_handler_failure_does_not_break_lookup(bundle: ResourceBundle) -> None:
    def failing_handler(langs: list[str], ns: str, key: str, fallback: str) -> None:
        _ = langs, ns, key, fallback
        msg = "handler failed"
        raise RuntimeError(msg)

    bundle.set_missing_key_handler(failing_handler)
    assert bundle.t("welcome", "fr", "Welcome!") == "Welcome!"


def test_add_entry_uses_default_namespace(bundle: ResourceBundle) -> None:
    bundle.add_entry(
        TranslationEntry(
            key="welcome",
            source_text="Welcome!",
            translated_text="Bienvenue !",
            language="fr",
            origin=TranslationOrigin.AI,
        )
    )
    assert bundle.has_resource("fr", DEFAULT_NAMESPACE, "welcome") is True
    assert bundle.t("welcome", "fr") == "Bienvenue !"


def test_describe_uses_context_provider(bundle: ResourceBundle) -> None:
    assert bundle.describe("player.play_button") == ""
    bundle.set_context_provider(lambda key: f"context of {key}")
    assert bundle.describe("player.play_button") == "context of player.play_button"
