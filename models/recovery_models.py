"""Models for error recovery results and system health reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

__all__: list[str] = [
    "ApiKeyValidationResult",
    "ErrorContext",
    "ErrorRecoveryResult",
    "HealthIssue",
    "HealthState",
    "IssueSeverity",
    "NetworkRecoveryResult",
    "ServiceHealth",
    "SystemHealthStatus",
]

type HealthState = Literal["healthy", "degraded", "critical"]
type IssueSeverity = Literal["warning", "error", "critical"]

HEALTH_RANK: dict[str, int] = {"healthy": 0, "degraded": 1, "critical": 2}


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    Attributes:
        operation (str): Operation name, e.g. ``"loadTranslations"``.
        service (str): Component that raised the error.
        language (str | None): Language involved, if any.
        key (str | None): Translation key involved, if any.
        retry_count (int): Attempts already made for this operation.
    """

    operation: str
    service: str
    language: str | None = None
    key: str | None = None
    retry_count: int = 0


@dataclass(frozen=True)
class ErrorRecoveryResult:
    """Outcome of a recovery attempt.

    Attributes:
        recovered (bool): Whether processing can continue.
        message (str): Human-readable summary.
        should_retry (bool): Whether the failed operation should be retried.
        fallback_value (str | None): Substitute text to serve, if one was produced.
        retry_delay (float | None): Seconds to wait before retrying.
    """

    recovered: bool
    message: str
    should_retry: bool = False
    fallback_value: str | None = None
    retry_delay: float | None = None


@dataclass(frozen=True)
class ApiKeyValidationResult:
    is_valid: bool
    is_configured: bool
    message: str
    suggested_action: str | None = None


@dataclass(frozen=True)
class NetworkRecoveryResult:
    is_online: bool
    can_retry: bool
    estimated_recovery_time: float | None = None


@dataclass(frozen=True)
class ServiceHealth:
    status: HealthState
    last_check: datetime = field(default_factory=lambda: datetime.now().astimezone())
    message: str | None = None


@dataclass(frozen=True)
class HealthIssue:
    severity: IssueSeverity
    service: str
    message: str
    suggested_action: str | None = None


@dataclass
class SystemHealthStatus:
    """Aggregated health of the pipeline.

    Attributes:
        overall (HealthState): Worst status among all services.
        services (dict[str, ServiceHealth]): Per-service probe results
            (``ai``, ``fileSystem``, ``cache``, ``network``).
        issues (list[HealthIssue]): One entry per non-healthy service.
    """

    overall: HealthState = "healthy"
    services: dict[str, ServiceHealth] = field(default_factory=dict)
    issues: list[HealthIssue] = field(default_factory=list)
