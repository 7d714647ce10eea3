"""Regular expressions for translation keys, language codes and AI responses."""

from __future__ import annotations

import re
from re import Pattern
from typing import Final

__all__: list[str] = [
    "BATCH_LINE_PREFIX_PATTERN",
    "INTERPOLATION_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "TRANSLATION_KEY_PATTERN",
]

# Two-letter language code with optional region, e.g. "en", "zh-CN"
LANGUAGE_CODE_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")

# Dot-segmented key; spaces are allowed inside segments, e.g. "player.controls.play"
TRANSLATION_KEY_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-zA-Z0-9._\s-]+$")

# Numbering the model echoes back on batch responses, e.g. "3. Bonjour"
BATCH_LINE_PREFIX_PATTERN: Final[Pattern[str]] = re.compile(r"^\d+\.\s*")

# Variable placeholder, e.g. "Hello, {{name}}!"
INTERPOLATION_PATTERN: Final[Pattern[str]] = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")
