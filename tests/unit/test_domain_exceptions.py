"""Tests for domain and infrastructure exceptions (error_code, message, details)."""

import httpx

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DashboardException,
    InsufficientPointsException,
    ResourceNotFoundException,
    TableNotConfiguredException,
    ValidationException,
    WorkflowFailedException,
)
from app.infrastructure.airtable._rest_client import AirtableAPIError
from app.infrastructure.exceptions import RecordStoreException, StorageUploadError


def test_dashboard_exception_default_error_code() -> None:
    """Base DashboardException uses class name as error_code when not provided."""
    exc = DashboardException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "DashboardException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "DashboardException", "message": "Something failed"}


def test_to_dict_includes_details_when_present() -> None:
    exc = DashboardException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Team ID is required", field="team_id")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "team_id"}


def test_validation_exception_without_field() -> None:
    exc = ValidationException("Invalid")
    assert exc.details == {}


def test_authentication_exception_default_message() -> None:
    exc = AuthenticationException()
    assert exc.message == "Not authenticated"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_with_resource_and_action() -> None:
    """AuthorizationException with resource and action builds message and details."""
    exc = AuthorizationException(resource="team", action="update")
    assert exc.message == "Permission denied: update on team"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "team", "action": "update"}


def test_authorization_exception_custom_message() -> None:
    exc = AuthorizationException(message="Admin role required")
    assert exc.message == "Admin role required"
    assert exc.details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("cohort", "rec123")
    assert exc.message == "cohort not found: rec123"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "cohort", "resource_id": "rec123"}


def test_table_not_configured_exception() -> None:
    exc = TableNotConfiguredException("rewards")
    assert exc.error_code == "CONFIGURATION_ERROR"
    assert exc.details == {"table": "rewards"}


def test_insufficient_points_exception() -> None:
    exc = InsufficientPointsException(required=50, available=20)
    assert exc.error_code == "INSUFFICIENT_POINTS"
    assert exc.details == {"required": 50, "available": 20}


def test_workflow_failed_exception_details() -> None:
    exc = WorkflowFailedException("create_team", "create_participation", "boom", ["create_team"], [])
    assert exc.error_code == "WORKFLOW_FAILED"
    assert "create_participation" in exc.message
    assert exc.details["compensated"] == ["create_team"]
    assert exc.details["compensation_failures"] == []


def test_record_store_exception_from_rate_limit_error() -> None:
    """A 429 from the store maps to RECORD_STORE_UNAVAILABLE with a retry message."""
    exc = RecordStoreException.from_error(
        "fetching cohorts", AirtableAPIError(429, "Too many requests"), cohort_id="rec1"
    )
    assert exc.error_code == "RECORD_STORE_UNAVAILABLE"
    assert exc.status_code == 429
    assert "Rate limit" in exc.message
    assert exc.details == {"operation": "fetching cohorts", "cohort_id": "rec1", "status_code": 429}


def test_record_store_exception_from_timeout() -> None:
    exc = RecordStoreException.from_error("fetching teams", httpx.ReadTimeout("slow"))
    assert exc.error_code == "RECORD_STORE_ERROR"
    assert exc.status_code is None
    assert "timed out" in exc.message
    assert "status_code" not in exc.details


def test_record_store_exception_generic_message_names_operation() -> None:
    exc = RecordStoreException.from_error("updating submission", AirtableAPIError(422, "bad field"))
    assert exc.message.startswith("An error occurred while updating submission")


def test_storage_upload_error() -> None:
    exc = StorageUploadError("uploads/a.pdf", "disk full")
    assert exc.error_code == "STORAGE_UPLOAD_ERROR"
    assert exc.details == {"file_path": "uploads/a.pdf", "reason": "disk full"}
