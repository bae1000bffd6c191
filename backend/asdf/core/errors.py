"""Error classes shared across the ASDF services backend."""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and alerting."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ASDFError(Exception):
    """
    Base exception for all ASDF errors.

    Carries a stable machine-readable code, structured details and a
    severity hint so callers can discriminate failures without parsing
    messages.
    """

    default_code: str = "ERROR"
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retryable: bool = False

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.code = kwargs.get("code") or self.default_code
        self.details = kwargs.get("details") or {}
        self.recovery_hint = kwargs.get("recovery_hint")
        self.context = kwargs.get("context") or {}

    def to_dict(self, include_details: bool = True) -> dict[str, Any]:
        """Serialize error for API responses and structured logs."""
        data: dict[str, Any] = {
            "error": self.code,
            "message": self.message,
            "severity": self.severity.value,
        }

        if include_details and self.details:
            data["details"] = dict(self.details)

        if self.recovery_hint:
            data["recovery_hint"] = self.recovery_hint

        if self.retryable:
            data["retryable"] = True

        return data

    def with_context(self, **context: Any) -> "ASDFError":
        """Add context to error and return self for chaining."""
        self.context.update(context)
        return self

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ApplicationError(ASDFError):
    """Base class for application layer errors."""

    default_code = "APPLICATION_ERROR"
    severity = ErrorSeverity.MEDIUM


class InfrastructureError(ASDFError):
    """Base class for infrastructure errors."""

    default_code = "INFRASTRUCTURE_ERROR"
    severity = ErrorSeverity.HIGH
    retryable = True


class NotFoundError(ApplicationError):
    """Resource not found error."""

    default_code = "NOT_FOUND"
    severity = ErrorSeverity.LOW

    def __init__(self, resource: str, identifier: Any, **kwargs: Any) -> None:
        message = f"{resource} not found: {identifier}"
        super().__init__(message, **kwargs)
        self.details.update({"resource": resource, "identifier": str(identifier)})


class ConfigurationError(InfrastructureError):
    """Configuration error."""

    default_code = "CONFIGURATION_ERROR"
    severity = ErrorSeverity.CRITICAL
    retryable = False

    def __init__(
        self, message: str, config_key: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        if config_key:
            self.details["config_key"] = config_key


__all__ = [
    "ASDFError",
    "ApplicationError",
    "ConfigurationError",
    "ErrorSeverity",
    "InfrastructureError",
    "NotFoundError",
]
