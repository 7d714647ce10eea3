"""Loading and validation of autolocale.ini.

Every section of the INI file maps to a dataclass of ``Config``. Values are coerced to the
type of the dataclass default, and the finished configuration is checked before use.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Final

from core.trans import engines  # noqa: F401
from core.trans.interface import TranslationClientInterface
from models.config_models import Config
from models.re_models import LANGUAGE_CODE_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Numeric settings that may be zero; every other numeric setting must be positive
NON_NEGATIVE_SETTINGS: Final[frozenset[str]] = frozenset(
    {
        "TRANSLATION.BATCH_DELAY",
        "TRANSLATION.QUEUE_BATCH_DELAY",
        "GEMINI.MIN_REQUEST_INTERVAL",
        "GEMINI.TEMPERATURE",
        "RETRY.JITTER_FACTOR",
        "RECOVERY.LOW_QUOTA_THRESHOLD",
    }
)


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Reads the INI file into a typed ``Config``, applies command-line overrides and validates the result.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        locales_dir (str | None): Optional override for the locales directory.
        source_language (str | None): Optional override for the source language.
        debug (bool): Enable debug logging regardless of the file setting.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self._convert_settings(parser)
        self.config.GENERAL.SCRIPT_NAME = self.config.GENERAL.SCRIPT_NAME or script_name
        apply_overrides(self.config, **args)
        validate_config(self.config)

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Copy every known setting of the INI file onto the config; unknown sections and keys are ignored."""
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Skipping undefined section: '%s'", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        for key in fields(getattr(self.config, section.name)):
            try:
                parser[section.name][key.name]
            except KeyError:
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)


def apply_overrides(
    config: Config,
    *,
    locales_dir: str | None = None,
    source_language: str | None = None,
    debug: bool = False,
    **_: Any,
) -> None:
    """Apply command-line overrides to a configuration.

    Args:
        config (Config): Configuration to update in place.
        locales_dir (str | None): Locales directory, if given.
        source_language (str | None): Source language code, if given.
        debug (bool): Force debug logging on.
    """
    if locales_dir is not None:
        config.STORE.LOCALES_DIR = locales_dir
    if source_language is not None:
        config.TRANSLATION.SOURCE_LANGUAGE = source_language
    if debug:
        config.GENERAL.DEBUG = True


def validate_config(config: Config) -> None:
    """Validate configuration values that the pipeline relies on.

    Raises:
        ConfigValueError: If the engine is unknown, the source language is malformed,
            the locales directory is empty, or a numeric limit is out of range.
        ConfigTypeError: If a setting has an unexpected type.
    """
    engine: object = config.TRANSLATION.ENGINE
    if not isinstance(engine, str):
        msg = f"Unsupported type used for 'TRANSLATION.ENGINE': {type(engine)}"
        raise ConfigTypeError(msg)
    if engine not in TranslationClientInterface.registered:
        msg = (
            f"Unknown translation engine '{engine}'. "
            f"Available engines: {', '.join(sorted(TranslationClientInterface.registered))}"
        )
        raise ConfigValueError(msg)

    source_language: object = config.TRANSLATION.SOURCE_LANGUAGE
    if not isinstance(source_language, str) or not LANGUAGE_CODE_PATTERN.fullmatch(source_language):
        msg = f"Invalid value for 'TRANSLATION.SOURCE_LANGUAGE': {source_language!r}. Expected format: 'en' or 'en-US'"
        raise ConfigValueError(msg)

    locales_dir: object = config.STORE.LOCALES_DIR
    if not isinstance(locales_dir, str) or not locales_dir.strip():
        msg = "'STORE.LOCALES_DIR' must be a non-empty path"
        raise ConfigValueError(msg)
    if not isinstance(config.STORE.TRANSLATION_FILE, str) or not config.STORE.TRANSLATION_FILE.strip():
        msg = "'STORE.TRANSLATION_FILE' must be a non-empty file name"
        raise ConfigValueError(msg)

    for section in fields(config):
        section_value: Any = getattr(config, section.name)
        for key in fields(section_value):
            value: Any = getattr(section_value, key.name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                continue
            field_name: str = f"{section.name}.{key.name}"
            if field_name in NON_NEGATIVE_SETTINGS:
                if value < 0:
                    msg = f"'{field_name}' must not be negative: {value}"
                    raise ConfigValueError(msg)
            elif value <= 0:
                msg = f"'{field_name}' must be positive: {value}"
                raise ConfigValueError(msg)


class _ConfigFormatter:
    """Coerces INI strings to the type of the matching ``Config`` default.

    Numbers and booleans may be written bare; every other value is a Python literal,
    so strings must be quoted.
    """

    QUOTE_CHARS: ClassVar[tuple[str, ...]] = ("'", '"')

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Return the INI value of ``section.key`` as a typed Python object.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If a literal has invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        name: str = f"{section.name}.{key.name}"
        default: Any = getattr(getattr(self.config, section.name), key.name)
        coerce: Callable[[str, str], Any] | None = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }.get(type(default))

        if coerce is not None:
            try:
                return coerce(section.name, key.name)
            except ValueError as err:
                msg = f"Invalid value for {name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {name}: {err}"
                raise ConfigTypeError(msg) from err

        raw: str = self.parser[section.name][key.name]
        try:
            return ast.literal_eval(raw)
        except ValueError as err:
            msg = f"Invalid literal for {name}: {raw} (strings must be quoted)"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {name}: {raw}"
            raise ConfigFormatError(msg) from err

    def parse_as_float(self, section: str, option: str) -> float:
        return float(self._unquoted(section, option))

    def parse_as_integer(self, section: str, option: str) -> int:
        return int(float(self._unquoted(section, option)))

    def parse_as_boolean(self, section: str, option: str) -> bool:
        return self.parser.getboolean(section, option)

    def _unquoted(self, section: str, option: str) -> str:
        value: str = self.parser.get(section, option).strip()
        for char in self.QUOTE_CHARS:
            value = value.removeprefix(char).removesuffix(char)
        return value
