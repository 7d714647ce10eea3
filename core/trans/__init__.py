"""AI translation: client interface, rate limiting, prompts and the translation manager."""

from core.trans.const_languages import COMMON_LANGUAGES, language_display_name
from core.trans.interface import TranslationClientInterface
from core.trans.manager import TranslationManager
from core.trans.rate_limiter import RateLimiter

__all__: list[str] = [
    "COMMON_LANGUAGES",
    "RateLimiter",
    "TranslationClientInterface",
    "TranslationManager",
    "language_display_name",
]
