"""Tests for domain exceptions (error_code, message, details, to_dict)."""

from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    NoVersionsYetException,
    RegistryException,
    ResourceNotFoundException,
    SnapshotNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
    VersionAssignmentConflictException,
)


def test_registry_exception_default_error_code() -> None:
    """Base RegistryException uses class name as error_code when not provided."""
    exc = RegistryException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "RegistryException"
    assert exc.details == {}


def test_registry_exception_to_dict() -> None:
    exc = RegistryException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="name")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "name"}
    assert ValidationException("No field").details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("flow", "f1")
    assert exc.message == "flow not found: f1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "flow", "resource_id": "f1"}


def test_snapshot_not_found_is_a_resource_not_found() -> None:
    exc = SnapshotNotFoundException("f1", 3)
    assert isinstance(exc, ResourceNotFoundException)
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details["resource_id"] == "f1/versions/3"
    assert exc.details["flow_identifier"] == "f1"
    assert exc.details["version"] == 3


def test_no_versions_yet_is_distinct_from_not_found() -> None:
    exc = NoVersionsYetException("f1")
    assert not isinstance(exc, ResourceNotFoundException)
    assert exc.error_code == "NO_VERSIONS_YET"
    assert exc.details == {"flow_identifier": "f1"}


def test_flow_already_exists_exception() -> None:
    exc = FlowAlreadyExistsException("f1")
    assert exc.error_code == "FLOW_ALREADY_EXISTS"
    assert "f1" in exc.message


def test_version_assignment_conflict_exception() -> None:
    exc = VersionAssignmentConflictException("f1", attempts=5)
    assert exc.error_code == "VERSION_ASSIGNMENT_CONFLICT"
    assert exc.details == {"flow_identifier": "f1", "attempts": 5}


def test_sql_not_configured_exception() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
