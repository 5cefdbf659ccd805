"""DTOs for flow and flow snapshot use cases (no dependency on ORM or presentation schemas)."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FlowCreate:
    """Input for creating a flow. identifier is optional; the store generates one when absent."""

    name: str
    identifier: str | None = None
    description: str | None = None
    bucket_identifier: str | None = None


@dataclass(frozen=True)
class FlowUpdate:
    """Input for updating a flow's descriptive fields (partial; None leaves a field unchanged)."""

    identifier: str | None = None
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class SnapshotMetadataCreate:
    """Caller-supplied metadata for a new version. The version number is never part of it."""

    flow_identifier: str | None = None
    author: str | None = None
    comments: str | None = None


@dataclass(frozen=True)
class SnapshotCreate:
    """Input for creating the next version of a flow (write-model)."""

    flow_contents: dict[str, Any]
    snapshot_metadata: SnapshotMetadataCreate | None = None
