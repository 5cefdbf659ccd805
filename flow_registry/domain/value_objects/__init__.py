"""Domain value objects (version lineage)."""

from flow_registry.domain.value_objects.versioning import (
    FIRST_VERSION,
    MAX_VERSION,
    NoVersionsYet,
    SnapshotMetadataSet,
    next_version,
)

__all__ = [
    "FIRST_VERSION",
    "MAX_VERSION",
    "NoVersionsYet",
    "SnapshotMetadataSet",
    "next_version",
]
