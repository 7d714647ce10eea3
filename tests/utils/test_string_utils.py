from __future__ import annotations

import logging

import pytest

from utils.string_utils import StringUtils


def test_flatten_nested_tree_skips_non_string_leaves() -> None:
    tree = {"welcome": "Welcome!", "player": {"play": "Play", "volume": {"label": "Volume"}}, "count": 3}

    assert StringUtils.flatten(tree) == {
        "welcome": "Welcome!",
        "player.play": "Play",
        "player.volume.label": "Volume",
    }


def test_unflatten_builds_nested_tree() -> None:
    flat = {"nav.home": "Home", "nav.settings": "Settings", "language": "Language"}

    assert StringUtils.unflatten(flat) == {
        "nav": {"home": "Home", "settings": "Settings"},
        "language": "Language",
    }


def test_unflatten_prefers_branch_over_leaf() -> None:
    assert StringUtils.unflatten({"a": "leaf", "a.b": "child"}) == {"a": {"b": "child"}}
    assert StringUtils.unflatten({"a.b": "child", "a": "leaf"}) == {"a": {"b": "child"}}


@pytest.mark.parametrize("flat", [{"nav": "Menu", "nav.home": "Home"}, {"nav.home": "Home", "nav": "Menu"}])
def test_unflatten_warns_about_dropped_leaf(caplog: pytest.LogCaptureFixture, flat: dict[str, str]) -> None:
    caplog.set_level(logging.WARNING, logger="AutoLocale")

    assert StringUtils.unflatten(flat) == {"nav": {"home": "Home"}}

    warnings: list[str] = [rec.getMessage() for rec in caplog.records if rec.levelno == logging.WARNING]
    assert warnings == ["Translation key 'nav' dropped in favor of nested keys"]


def test_unflatten_without_conflicts_does_not_warn(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="AutoLocale")
    StringUtils.unflatten({"nav.home": "Home", "nav.settings": "Settings"})
    assert caplog.records == []


def test_interpolate_replaces_known_placeholders_only() -> None:
    text = "Hello, {{name}}! You have {{ count }} messages from {{sender}}."

    result: str = StringUtils.interpolate(text, {"name": "Ana", "count": 3})

    assert result == "Hello, Ana! You have 3 messages from {{sender}}."


def test_interpolate_without_variables_returns_text() -> None:
    assert StringUtils.interpolate("Hello, {{name}}!") == "Hello, {{name}}!"
    assert StringUtils.interpolate("Hello, {{name}}!", {}) == "Hello, {{name}}!"


def test_interpolate_none_value_becomes_empty() -> None:
    assert StringUtils.interpolate("[{{value}}]", {"value": None}) == "[]"


def test_cache_and_pending_keys() -> None:
    assert StringUtils.build_cache_key("nav.home", "fr") == "translation:fr:nav.home"
    assert StringUtils.build_pending_key("nav.home", "fr") == "pending:fr:nav.home"
    assert StringUtils.language_prefix("fr") == "translation:fr:"


def test_key_depth_counts_segments() -> None:
    assert StringUtils.key_depth("welcome") == 1
    assert StringUtils.key_depth("player.controls.play_button") == 3


def test_ensure_str() -> None:
    assert StringUtils.ensure_str(None) == ""
    assert StringUtils.ensure_str("x") == "x"
