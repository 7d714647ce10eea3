"""Prompt construction and response parsing for text-to-text translation models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.trans.const_languages import language_display_name
from models.re_models import BATCH_LINE_PREFIX_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["build_batch_prompt", "build_prompt", "parse_batch_response"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def build_prompt(text: str, source_language: str, target_language: str, context: str | None = None) -> str:
    """Build the prompt for translating a single text.

    Args:
        text (str): Text to translate.
        source_language (str): Language code of the text.
        target_language (str): Language code to translate into.
        context (str | None): Where the text appears in the UI, if known.

    Returns:
        str: The prompt.
    """
    lines: list[str] = [
        f"You are a professional translator. Translate the following text from {source_language} "
        f"to {language_display_name(target_language)} ({target_language}).",
        "",
        "Rules:",
        "1. Maintain the original meaning and tone",
        "2. Keep any placeholders like {{variable}} unchanged",
        "3. Preserve formatting and special characters",
        "4. Return ONLY the translated text, no explanations",
        "5. If the text contains technical terms, keep them accurate",
    ]
    if context:
        lines.append(f"6. Context: {context}")
    lines += ["", f'Text to translate: "{text}"', "", "Translation:"]
    return "\n".join(lines)


def build_batch_prompt(
    texts: list[str], source_language: str, target_language: str, context: str | None = None
) -> str:
    """Build the prompt for translating several texts in one request.

    The texts are numbered ``1. "text"`` and the model is asked for one translation per line.

    Args:
        texts (list[str]): Texts to translate.
        source_language (str): Language code of the texts.
        target_language (str): Language code to translate into.
        context (str | None): Where the texts appear in the UI, if known.

    Returns:
        str: The prompt.
    """
    lines: list[str] = [
        f"You are a professional translator. Translate the following texts from {source_language} "
        f"to {language_display_name(target_language)} ({target_language}).",
        "",
        "Rules:",
        "1. Maintain the original meaning and tone for each text",
        "2. Keep any placeholders like {{variable}} unchanged",
        "3. Preserve formatting and special characters",
        "4. Return translations in the same order, one per line",
        "5. If a text contains technical terms, keep them accurate",
    ]
    if context:
        lines.append(f"6. Context: {context}")
    lines += ["", "Texts to translate:"]
    lines += [f'{index}. "{text}"' for index, text in enumerate(texts, start=1)]
    lines += ["", "Translations (one per line, in order):"]
    return "\n".join(lines)


def parse_batch_response(response: str, original_texts: list[str]) -> list[str]:
    """Split a batch response into one translation per original text.

    Blank lines are dropped and leading numbering is removed. A missing or empty line
    falls back to the corresponding original text.

    Args:
        response (str): Raw model output.
        original_texts (list[str]): Texts that were sent, in order.

    Returns:
        list[str]: Translations, same length as ``original_texts``.
    """
    lines: list[str] = [line for line in response.strip().splitlines() if line.strip()]
    if len(lines) != len(original_texts):
        logger.warning("Expected %d translations, got %d", len(original_texts), len(lines))

    translations: list[str] = []
    for index, original in enumerate(original_texts):
        if index < len(lines):
            translation: str = BATCH_LINE_PREFIX_PATTERN.sub("", lines[index].strip()).strip()
            translations.append(translation or original)
        else:
            translations.append(original)
    return translations
