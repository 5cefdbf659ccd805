"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from flow_registry.domain.entities.flow import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)

__all__ = [
    "FlowSnapshotEntity",
    "SnapshotMetadataEntity",
    "VersionedFlowEntity",
]
