"""In-process resource bundle used by UI code to look up localized texts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.translation_models import TranslationEntry

__all__: list[str] = ["DEFAULT_NAMESPACE", "ContextProvider", "MissingKeyHandler", "ResourceBundle"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_NAMESPACE: Final[str] = "translation"

type MissingKeyHandler = Callable[[list[str], str, str, str], None]
type ContextProvider = Callable[[str], str]


class ResourceBundle:
    """Texts by language, namespace and key, with a hook for keys that are missing.

    Args:
        fallback_language (str | None): Language consulted when the requested one lacks a key.
    """

    def __init__(self, fallback_language: str | None = None) -> None:
        self.fallback_language: str | None = fallback_language
        self._resources: dict[str, dict[str, dict[str, str]]] = {}
        self._missing_key_handler: MissingKeyHandler | None = None
        self._context_provider: ContextProvider | None = None

    @property
    def languages(self) -> list[str]:
        return sorted(self._resources)

    def add_resource(self, language: str, namespace: str, key: str, value: str) -> None:
        self._resources.setdefault(language, {}).setdefault(namespace, {})[key] = value
        logger.debug("Resource added: [%s] %s:%s", language, namespace, key)

    def add_entry(self, entry: TranslationEntry) -> None:
        """Add a translation announced by the translation manager."""
        self.add_resource(entry.language, DEFAULT_NAMESPACE, entry.key, entry.translated_text)

    def get_resource(self, language: str, namespace: str, key: str) -> str | None:
        return self._resources.get(language, {}).get(namespace, {}).get(key)

    def has_resource(self, language: str, namespace: str, key: str) -> bool:
        return self.get_resource(language, namespace, key) is not None

    def t(
        self,
        key: str,
        language: str,
        default: str | None = None,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        **variables: Any,
    ) -> str:
        """Look up a text and substitute ``{{name}}`` placeholders.

        When the language lacks the key, the missing-key handler is called with the text
        that is shown instead: the fallback language's text, else ``default``, else the key.

        Args:
            key (str): Translation key.
            language (str): Requested language.
            default (str | None): Text to show when no language has the key.
            namespace (str): Resource namespace.
            **variables (Any): Placeholder values.

        Returns:
            str: The interpolated text.
        """
        text: str | None = self.get_resource(language, namespace, key)
        if text is not None:
            return StringUtils.interpolate(text, variables)

        fallback: str | None = None
        if self.fallback_language and self.fallback_language != language:
            fallback = self.get_resource(self.fallback_language, namespace, key)
        fallback = fallback or default or key

        if self._missing_key_handler is not None:
            try:
                self._missing_key_handler([language], namespace, key, fallback)
            except Exception as err:  # noqa: BLE001
                logger.warning("Missing key handler failed for %s [%s]: %s", key, language, err)
        return StringUtils.interpolate(fallback, variables)

    def set_missing_key_handler(self, handler: MissingKeyHandler | None) -> None:
        self._missing_key_handler = handler

    def set_context_provider(self, provider: ContextProvider | None) -> None:
        self._context_provider = provider

    def describe(self, key: str) -> str:
        """Return the UI context of a key from the context provider, or an empty string."""
        if self._context_provider is None:
            return ""
        return self._context_provider(key)
