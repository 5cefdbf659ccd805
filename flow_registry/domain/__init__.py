"""Domain layer: entities, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from flow_registry.domain.entities import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)
from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    NoVersionsYetException,
    RegistryException,
    ResourceNotFoundException,
    SnapshotNotFoundException,
    ValidationException,
    VersionAssignmentConflictException,
)
from flow_registry.domain.value_objects import NoVersionsYet, SnapshotMetadataSet

__all__ = [
    # Entities
    "FlowSnapshotEntity",
    "SnapshotMetadataEntity",
    "VersionedFlowEntity",
    # Exceptions
    "FlowAlreadyExistsException",
    "NoVersionsYetException",
    "RegistryException",
    "ResourceNotFoundException",
    "SnapshotNotFoundException",
    "ValidationException",
    "VersionAssignmentConflictException",
    # Value objects
    "NoVersionsYet",
    "SnapshotMetadataSet",
]
