"""Domain exceptions for the flow registry.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class RegistryException(Exception):
    """Base exception for all flow registry errors.

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
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RegistryException):
    """Raised when input is malformed or self-contradictory (blank id, missing payload, id mismatch)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(RegistryException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'flow').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SnapshotNotFoundException(ResourceNotFoundException):
    """Raised when a flow exists but the requested version does not."""

    def __init__(self, flow_identifier: str, version: int) -> None:
        super().__init__("flow_snapshot", f"{flow_identifier}/versions/{version}")
        self.details["flow_identifier"] = flow_identifier
        self.details["version"] = version


class NoVersionsYetException(RegistryException):
    """Raised when the latest version of a flow with no snapshots is requested.

    The flow itself exists; only "latest version" is meaningless until a
    first version is created. Kept distinct from ResourceNotFoundException
    so callers can tell an empty lineage from a missing flow.
    """

    def __init__(self, flow_identifier: str) -> None:
        super().__init__(
            f"Flow {flow_identifier} has no versions yet",
            "NO_VERSIONS_YET",
            {"flow_identifier": flow_identifier},
        )


class FlowAlreadyExistsException(RegistryException):
    """Raised when creating a flow whose identifier is already registered."""

    def __init__(self, flow_identifier: str) -> None:
        super().__init__(
            f"Flow with identifier '{flow_identifier}' already exists",
            "FLOW_ALREADY_EXISTS",
            {"flow_identifier": flow_identifier},
        )


class VersionAssignmentConflictException(RegistryException):
    """Raised when a concurrent write won the next version number for a flow.

    Repositories raise it for a single lost race; the flow store retries and
    only lets it reach callers once retries are exhausted (transient failure).
    """

    def __init__(self, flow_identifier: str, attempts: int = 1) -> None:
        super().__init__(
            f"Could not assign a version to flow {flow_identifier} after {attempts} attempt(s); retry.",
            "VERSION_ASSIGNMENT_CONFLICT",
            {"flow_identifier": flow_identifier, "attempts": attempts},
        )


class SqlNotConfiguredException(RegistryException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
