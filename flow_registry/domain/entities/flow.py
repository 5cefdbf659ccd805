"""Versioned flow domain entities.

A flow is a named, identified entity that accumulates an ordered history of
immutable snapshots. Snapshot metadata and snapshot contents are frozen;
the flow itself only changes its descriptive fields.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from flow_registry.domain.exceptions import ValidationException
from flow_registry.domain.value_objects.versioning import SnapshotMetadataSet


@dataclass(frozen=True)
class SnapshotMetadataEntity:
    """Descriptor of one version of a flow (version number, timestamp, author)."""

    flow_identifier: str
    version: int
    timestamp: datetime
    author: str | None = None
    comments: str | None = None

    def __post_init__(self) -> None:
        if not self.flow_identifier or not self.flow_identifier.strip():
            raise ValidationException(
                "Snapshot metadata must reference a flow", field="flow_identifier"
            )
        if self.version < 1:
            raise ValidationException(
                f"Version must be a positive integer, got {self.version}",
                field="version",
            )


@dataclass(frozen=True)
class FlowSnapshotEntity:
    """Full content of one version. flow_contents is opaque to the registry."""

    snapshot_metadata: SnapshotMetadataEntity
    flow_contents: dict[str, Any]

    @property
    def flow_identifier(self) -> str:
        return self.snapshot_metadata.flow_identifier

    @property
    def version(self) -> int:
        return self.snapshot_metadata.version


@dataclass
class VersionedFlowEntity:
    """Domain entity for a versioned flow.

    snapshot_metadata is None on summary reads and a SnapshotMetadataSet on
    verbose reads. version_count is always populated.
    """

    identifier: str
    name: str
    description: str | None
    bucket_identifier: str | None
    created_at: datetime
    updated_at: datetime
    version_count: int = 0
    snapshot_metadata: SnapshotMetadataSet | None = None

    def __post_init__(self) -> None:
        if self.snapshot_metadata is not None:
            if self.snapshot_metadata.flow_identifier != self.identifier:
                raise ValidationException(
                    "Snapshot metadata set belongs to a different flow",
                    field="snapshot_metadata",
                )
            self.version_count = len(self.snapshot_metadata)

    def latest_snapshot_metadata(self) -> SnapshotMetadataEntity | None:
        """Return metadata of the highest version; requires a verbose read."""
        if self.snapshot_metadata is None:
            return None
        return self.snapshot_metadata.last()
