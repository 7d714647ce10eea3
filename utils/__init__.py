"""Utility modules for AutoLocale.

This package provides utility functions for logging, file handling, string manipulation
and retry policy.
"""

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.retry_utils import RetryUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["FileUtils", "LoggerUtils", "RetryUtils", "StringUtils"]
