"""Flow identifier and version consistency checks.

Pure, stateless validation that runs before any mutating call. Each check
returns a ValidationResult (the normalized input, or an error message and
field) instead of raising; callers decide when a failure becomes a
ValidationException via ValidationResult.unwrap().
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from flow_registry.application.dtos.flow import (
    FlowCreate,
    FlowUpdate,
    SnapshotCreate,
    SnapshotMetadataCreate,
)
from flow_registry.domain.exceptions import ValidationException

_ID_MISMATCH_MESSAGE = "Flow id in path param must match flow id in body"

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Tagged result of a validation step: either value (ok) or error (+ optional field)."""

    value: T | None = None
    error: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ValidationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, field: str | None = None) -> ValidationResult[T]:
        return cls(error=message, field=field)

    def unwrap(self) -> T:
        """Return the validated value or raise ValidationException with the recorded error."""
        if self.error is not None:
            raise ValidationException(self.error, field=self.field)
        return self.value  # type: ignore[return-value]


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_flow_id(flow_id: str | None) -> ValidationResult[str]:
    """Flow identifiers must be non-blank."""
    if is_blank(flow_id):
        return ValidationResult.failure("Flow Id cannot be blank", field="flow_id")
    return ValidationResult.success(flow_id)


def validate_flow_create(data: FlowCreate | None) -> ValidationResult[FlowCreate]:
    """Require a payload with a non-blank name; a supplied identifier must be non-blank."""
    if data is None:
        return ValidationResult.failure("Flow cannot be null", field="flow")
    if is_blank(data.name):
        return ValidationResult.failure("Flow name cannot be blank", field="name")
    if data.identifier is not None and is_blank(data.identifier):
        return ValidationResult.failure("Flow Id cannot be blank", field="identifier")
    return ValidationResult.success(data)


def validate_flow_update(
    flow_id: str | None, data: FlowUpdate | None
) -> ValidationResult[FlowUpdate]:
    """Check path id, payload and body id; fill a missing body id from the path.

    A name, when given, must not be blank.
    """
    checked_id = validate_flow_id(flow_id)
    if not checked_id.ok:
        return ValidationResult.failure(checked_id.error, checked_id.field)
    if data is None:
        return ValidationResult.failure("Flow cannot be null", field="flow")
    if data.identifier is not None and data.identifier != flow_id:
        return ValidationResult.failure(_ID_MISMATCH_MESSAGE, field="identifier")
    if data.name is not None and is_blank(data.name):
        return ValidationResult.failure("Flow name cannot be blank", field="name")
    if data.identifier is None:
        data = replace(data, identifier=flow_id)
    return ValidationResult.success(data)


def validate_snapshot_create(
    flow_id: str | None, data: SnapshotCreate | None
) -> ValidationResult[SnapshotCreate]:
    """Check path id, payload and embedded flow id; fill a missing embedded id from the path.

    When the snapshot carries no metadata at all, metadata holding only the
    path flow id is attached so every persisted version names its flow.
    """
    checked_id = validate_flow_id(flow_id)
    if not checked_id.ok:
        return ValidationResult.failure(checked_id.error, checked_id.field)
    if data is None:
        return ValidationResult.failure(
            "VersionedFlowSnapshot cannot be null", field="snapshot"
        )
    if data.flow_contents is None:
        return ValidationResult.failure(
            "Flow contents cannot be null", field="flow_contents"
        )
    metadata = data.snapshot_metadata or SnapshotMetadataCreate()
    if metadata.flow_identifier is not None and metadata.flow_identifier != flow_id:
        return ValidationResult.failure(_ID_MISMATCH_MESSAGE, field="flow_identifier")
    if metadata.flow_identifier is None:
        data = replace(data, snapshot_metadata=replace(metadata, flow_identifier=flow_id))
    return ValidationResult.success(data)


def validate_version_number(version: int | None) -> ValidationResult[int]:
    """Version numbers start at 1; absent, zero and negative values are rejected."""
    if version is None:
        return ValidationResult.failure("Version number is required", field="version")
    if isinstance(version, bool) or not isinstance(version, int):
        return ValidationResult.failure(
            "Version number must be an integer", field="version"
        )
    if version < 1:
        return ValidationResult.failure(
            f"Version number must be a positive integer, got {version}",
            field="version",
        )
    return ValidationResult.success(version)
