"""Application services: stateless flow validation."""

from flow_registry.application.services.flow_validation import (
    ValidationResult,
    validate_flow_create,
    validate_flow_id,
    validate_flow_update,
    validate_snapshot_create,
    validate_version_number,
)

__all__ = [
    "ValidationResult",
    "validate_flow_create",
    "validate_flow_id",
    "validate_flow_update",
    "validate_snapshot_create",
    "validate_version_number",
]
