from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from models.re_models import INTERPOLATION_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    import re

__all__: list[str] = ["StringUtils"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

KEY_SEPARATOR: Final[str] = "."
CACHE_KEY_PREFIX: Final[str] = "translation"
PENDING_KEY_PREFIX: Final[str] = "pending"


class StringUtils:
    """Utility class for translation key and text handling.

    Provides static methods to flatten and unflatten translation trees, interpolate
    ``{{variable}}`` placeholders and build cache keys.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def flatten(tree: dict[str, Any], prefix: str = "") -> dict[str, str]:
        """Flatten a nested translation tree into dot-separated keys.

        Only string leaves are kept; other leaf types are dropped.

        Args:
            tree (dict[str, Any]): Nested mapping as stored on disk.
            prefix (str): Key prefix for the current nesting level.

        Returns:
            dict[str, str]: Flat key to text mapping.
        """
        result: dict[str, str] = {}
        for key, value in tree.items():
            full_key: str = f"{prefix}{KEY_SEPARATOR}{key}" if prefix else str(key)
            if isinstance(value, str):
                result[full_key] = value
            elif isinstance(value, dict):
                result.update(StringUtils.flatten(value, full_key))
        return result

    @staticmethod
    def unflatten(flat: dict[str, str]) -> dict[str, Any]:
        """Expand dot-separated keys into a nested translation tree.

        When a key is both a leaf and a branch (``a`` and ``a.b``), the branch wins and the
        dropped leaf is logged as a warning.

        Args:
            flat (dict[str, str]): Flat key to text mapping.

        Returns:
            dict[str, Any]: Nested mapping suitable for JSON serialization.
        """
        result: dict[str, Any] = {}
        for key, value in flat.items():
            segments: list[str] = key.split(KEY_SEPARATOR)
            node: dict[str, Any] = result
            for depth, segment in enumerate(segments[:-1], start=1):
                child: Any = node.get(segment)
                if not isinstance(child, dict):
                    if child is not None:
                        logger.warning(
                            "Translation key '%s' dropped in favor of nested keys",
                            KEY_SEPARATOR.join(segments[:depth]),
                        )
                    child = {}
                    node[segment] = child
                node = child
            if isinstance(node.get(segments[-1]), dict):
                logger.warning("Translation key '%s' dropped in favor of nested keys", key)
            else:
                node[segments[-1]] = value
        return result

    @staticmethod
    def interpolate(text: str, variables: dict[str, Any] | None = None) -> str:
        """Replace ``{{name}}`` placeholders with values from ``variables``.

        Placeholders without a matching variable are left untouched.

        Args:
            text (str): Text that may contain placeholders.
            variables (dict[str, Any] | None): Values to substitute.

        Returns:
            str: The interpolated text.
        """
        if not variables:
            return text

        def _replace(match: re.Match[str]) -> str:
            name: str = match.group(1)
            if name in variables:
                return StringUtils.ensure_str(variables[name])
            return match.group(0)

        return INTERPOLATION_PATTERN.sub(_replace, text)

    @staticmethod
    def build_cache_key(key: str, language: str) -> str:
        return f"{CACHE_KEY_PREFIX}:{language}:{key}"

    @staticmethod
    def build_pending_key(key: str, language: str) -> str:
        return f"{PENDING_KEY_PREFIX}:{language}:{key}"

    @staticmethod
    def language_prefix(language: str) -> str:
        """Return the cache key prefix shared by every entry of ``language``."""
        return f"{CACHE_KEY_PREFIX}:{language}:"

    @staticmethod
    def key_depth(key: str) -> int:
        return len(key.split(KEY_SEPARATOR))
