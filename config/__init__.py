"""Configuration loading and validation for AutoLocale.

This package provides utilities for loading, parsing, and validating configuration
settings from the autolocale.ini file.
"""

from config.loader import (
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigLoader,
    ConfigLoaderError,
    ConfigTypeError,
    ConfigValueError,
    apply_overrides,
    validate_config,
)

__all__: list[str] = [
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
    "apply_overrides",
    "validate_config",
]
