"""Display names of commonly used languages, keyed by language code."""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["COMMON_LANGUAGES", "language_display_name"]

COMMON_LANGUAGES: Final[dict[str, str]] = {
    "en": "English",
    "pt": "Português",
    "es": "Español",
    "fr": "Français",
    "de": "Deutsch",
    "it": "Italiano",
    "ja": "日本語",
    "ko": "한국어",
    "zh": "中文",
    "zh-CN": "中文 (简体)",
    "zh-TW": "中文 (繁體)",
    "ru": "Русский",
    "ar": "العربية",
    "hi": "हिन्दी",
    "nl": "Nederlands",
    "sv": "Svenska",
    "da": "Dansk",
    "no": "Norsk",
    "fi": "Suomi",
    "pl": "Polski",
    "cs": "Čeština",
    "sk": "Slovenčina",
    "hu": "Magyar",
    "ro": "Română",
    "bg": "Български",
    "hr": "Hrvatski",
    "sl": "Slovenščina",
    "et": "Eesti",
    "lv": "Latviešu",
    "lt": "Lietuvių",
    "uk": "Українська",
    "tr": "Türkçe",
    "he": "עברית",
    "th": "ไทย",
    "vi": "Tiếng Việt",
    "id": "Bahasa Indonesia",
    "ms": "Bahasa Melayu",
    "tl": "Filipino",
}


def language_display_name(code: str) -> str:
    """Return the display name of a language, or the code itself when it is not known."""
    return COMMON_LANGUAGES.get(code, code)
