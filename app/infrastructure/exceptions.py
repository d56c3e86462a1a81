"""Infrastructure exceptions for the record store and object storage.

All extend DashboardException so presentation can map them to HTTP
responses consistently.
"""

from typing import Any

import httpx

from app.domain.exceptions import DashboardException


def _user_message(status_code: int | None, error: Exception, operation: str) -> str:
    """Pick the message shown to API callers for a failed store call."""
    if status_code == 429:
        return "Rate limit exceeded. Please try again in a few moments."
    if status_code in (401, 403):
        return "Authentication failed. Please contact support."
    if status_code == 404:
        return "The requested data could not be found."
    if isinstance(error, httpx.TimeoutException):
        return "The request timed out. Please try again."
    if isinstance(error, httpx.TransportError):
        return "Network error. Please check your connection."
    return f"An error occurred while {operation}. Please try again or contact support."


class RecordStoreException(DashboardException):
    """A record store call failed; carries operation name and entity context.

    Attributes:
        operation: What the repository was doing (e.g. 'fetching submissions by team').
        status_code: HTTP status returned by the store, or None for transport errors.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        error_code = "RECORD_STORE_UNAVAILABLE" if status_code == 429 else "RECORD_STORE_ERROR"
        details: dict[str, Any] = {"operation": operation, **(context or {})}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, error_code, details)

    @classmethod
    def from_error(
        cls, operation: str, error: Exception, **context: Any
    ) -> "RecordStoreException":
        """Wrap a client or transport error with operation context."""
        status_code = getattr(error, "status_code", None)
        return cls(
            operation,
            _user_message(status_code, error, operation),
            status_code=status_code,
            context=context,
        )


class StorageException(DashboardException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """File or object not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root or the backend refused access."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class IdentityProviderUnavailableException(DashboardException):
    """Signing keys could not be fetched from the identity provider."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            "Unable to verify credentials right now. Please try again.",
            "IDENTITY_PROVIDER_UNAVAILABLE",
            {"reason": reason},
        )
