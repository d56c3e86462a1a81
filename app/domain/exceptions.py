"""Domain exceptions for the dashboard application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DashboardException(Exception):
    """Base exception for all dashboard application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error envelope ({error, message, details?})."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(DashboardException):
    """Raised when input validation fails (missing id, unknown field, bad value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DashboardException):
    """Raised when authentication fails (missing, expired or invalid token)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DashboardException):
    """Raised when the caller may not act on the target record."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'team', 'submission').
            action: Optional action that was attempted (e.g. 'update').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(DashboardException):
    """Raised when a requested record is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'cohort', 'team').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TableNotConfiguredException(DashboardException):
    """Raised when a logical table has no configured record-store table id."""

    def __init__(self, table_name: str) -> None:
        super().__init__(
            f"Record store table is not configured: {table_name}",
            "CONFIGURATION_ERROR",
            {"table": table_name},
        )


class InsufficientPointsException(DashboardException):
    """Raised when a reward costs more points than the user has available."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Not enough points: {required} required, {available} available",
            "INSUFFICIENT_POINTS",
            {"required": required, "available": available},
        )


class WorkflowFailedException(DashboardException):
    """Raised when a multi-step workflow fails after compensation ran.

    details carries the workflow name, the failed step, the steps that were
    compensated and any compensations that themselves failed.
    """

    def __init__(
        self,
        workflow: str,
        step: str,
        reason: str,
        compensated: list[str],
        compensation_failures: list[str],
    ) -> None:
        super().__init__(
            f"{workflow} failed at step '{step}': {reason}",
            "WORKFLOW_FAILED",
            {
                "workflow": workflow,
                "step": step,
                "compensated": compensated,
                "compensation_failures": compensation_failures,
            },
        )
