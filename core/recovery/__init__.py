"""Error recovery and health reporting."""

from core.recovery.service import ErrorCallback, ErrorRecoveryService

__all__: list[str] = ["ErrorCallback", "ErrorRecoveryService"]
