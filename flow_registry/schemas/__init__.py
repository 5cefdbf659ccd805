"""API request/response schemas (pydantic)."""

from flow_registry.schemas.flow import (
    FieldsResponse,
    FlowCreateRequest,
    FlowSnapshotCreateRequest,
    FlowSnapshotResponse,
    FlowUpdateRequest,
    LinkResponse,
    SnapshotMetadataRequest,
    SnapshotMetadataResponse,
    VersionedFlowResponse,
    snapshot_metadata_responses,
)
from flow_registry.schemas.health import HealthResponse

__all__ = [
    "FieldsResponse",
    "FlowCreateRequest",
    "FlowSnapshotCreateRequest",
    "FlowSnapshotResponse",
    "FlowUpdateRequest",
    "HealthResponse",
    "LinkResponse",
    "SnapshotMetadataRequest",
    "SnapshotMetadataResponse",
    "VersionedFlowResponse",
    "snapshot_metadata_responses",
]
