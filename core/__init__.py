"""Core services of AutoLocale.

This package contains the translation cache, the translation file store, the AI translation
client and manager, the error recovery service, the operator console service, and the shared
data container that wires them together.
"""

from core.cli_service import CliService
from core.shared_data import SharedData
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "CliService",
    "SharedData",
]
