"""Abstract base class for AI translation clients.

Concrete clients register themselves by engine name when they are defined; the engine
named in ``TRANSLATION.ENGINE`` is instantiated at start-up.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import AsyncIterator

    from models.config_models import Config
    from models.translation_models import RateLimitStatus, StreamingTranslationResult

__all__: list[str] = ["TranslationClientInterface"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationClientInterface(ABC):
    """Abstract base class for translation clients.

    Every failure is raised as ``TranslationError``: validation problems with a VALIDATION code,
    service problems with an AI_SERVICE code.

    Attributes:
        registered (ClassVar[dict[str, type[TranslationClientInterface]]]): Registered client classes,
            keyed by engine name.
    """

    registered: ClassVar[dict[str, type[TranslationClientInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its engine name.

        Subclasses whose ``fetch_engine_name()`` returns an empty string are not registered.

        Raises:
            TypeError: If the subclass does not provide ``fetch_engine_name``.
            ValueError: If another client is already registered under the same name.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TranslationClientInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        name: object = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    def __init__(self, config: Config) -> None:
        self.config: Config = config
        self._api_key: str = ""

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Return the name the client is registered under.

        Called from ``__init_subclass__``, so it must work on the class itself.
        """
        raise NotImplementedError

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, key: str) -> None:
        self._api_key = key.strip()
        logger.info("API key %s for '%s'", "set" if self._api_key else "cleared", self.fetch_engine_name())

    def get_authentication_key(self) -> str:
        """Read the API key from the environment.

        The variable is ``<ENGINE NAME>_API_KEY`` in upper case, e.g. ``GEMINI_API_KEY``.

        Returns:
            str: The key, or an empty string if the variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_KEY", "")

    @abstractmethod
    async def component_load(self) -> None:
        """Open network resources and read the API key."""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        raise NotImplementedError

    @abstractmethod
    async def translate_text(self, text: str, target_language: str, context: str | None = None) -> str:
        """Translate one text.

        Args:
            text (str): Text in the source language.
            target_language (str): Language code to translate into.
            context (str | None): Where the text appears in the UI, if known.

        Returns:
            str: The translated text.

        Raises:
            TranslationError: EMPTY_SOURCE_TEXT, INVALID_TRANSLATION_FORMAT or INVALID_LANGUAGE_CODE for bad
                input; AI_API_KEY_MISSING without a key; AI_QUOTA_EXCEEDED when the daily limit is spent;
                a non-retryable AI code, or AI_TRANSLATION_FAILED after retries, for service failures.
        """
        raise NotImplementedError

    @abstractmethod
    async def translate_batch(self, texts: list[str], target_language: str, context: str | None = None) -> list[str]:
        """Translate several texts to one language, preserving order.

        Raises:
            TranslationError: MISSING_REQUIRED_FIELD for an empty list, otherwise as ``translate_text``.
        """
        raise NotImplementedError

    @abstractmethod
    def translate_to_all_languages(
        self, text: str, languages: list[str], context: str | None = None
    ) -> AsyncIterator[StreamingTranslationResult]:
        """Translate one text into several languages, yielding results as they complete.

        Languages that fail are logged and skipped.
        """
        raise NotImplementedError

    @abstractmethod
    async def is_online(self) -> bool:
        """Return True if a key is configured and the service host is reachable."""
        raise NotImplementedError

    @abstractmethod
    def get_rate_limit_status(self) -> RateLimitStatus:
        raise NotImplementedError
