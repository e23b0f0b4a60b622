"""
Custom exception classes for the pollwatch package.

Provides specific exception types for the few failure modes that are allowed to
surface to callers. Everything that happens inside a running poll loop degrades
to a signal or a smaller snapshot instead of raising.
"""

from typing import Any


class BaseError(Exception):
    """
    Base exception class for all pollwatch errors.

    All custom exceptions in the package inherit from this base class
    to enable consistent error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context information
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation including error code if present."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"context={self.context})"
        )


class ConfigurationError(BaseError):
    """Raised when a watcher or setting is constructed with an invalid value."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected_type: str | None = None,
        actual_value: Any | None = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if expected_type:
            context["expected_type"] = expected_type
        if actual_value is not None:
            context["actual_value"] = str(actual_value)

        super().__init__(message, error_code="CONFIG_ERROR", context=context)


class MonitoringError(BaseError):
    """Raised when a watcher lifecycle operation cannot be carried out."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(
            message,
            error_code="MONITORING_ERROR",
            context=context,
            cause=underlying_error,
        )


class TargetInaccessibleError(MonitoringError):
    """Raised when a watched root cannot be listed (removed, unmounted, permission denied)."""

    def __init__(self, message: str, path: str | None = None, underlying_error: Exception | None = None):
        super().__init__(message, path=path, operation="collect", underlying_error=underlying_error)
        self.error_code = "TARGET_INACCESSIBLE"
