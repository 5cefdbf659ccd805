"""Flow and flow snapshot API schemas."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flow_registry.application.dtos.flow import (
    FlowCreate,
    FlowUpdate,
    SnapshotCreate,
    SnapshotMetadataCreate,
)
from flow_registry.domain.entities.flow import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)


class FlowCreateRequest(BaseModel):
    """Request body for registering a flow. identifier is generated when omitted."""

    name: str | None = Field(default=None, max_length=500)
    identifier: str | None = Field(default=None, max_length=255)
    description: str | None = None
    bucket_identifier: str | None = Field(default=None, max_length=255)

    def to_dto(self) -> FlowCreate:
        return FlowCreate(
            name=self.name,
            identifier=self.identifier,
            description=self.description,
            bucket_identifier=self.bucket_identifier,
        )


class FlowUpdateRequest(BaseModel):
    """Request body for updating a flow (partial). identifier must match the path if given."""

    identifier: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=500)
    description: str | None = None

    def to_dto(self) -> FlowUpdate:
        return FlowUpdate(
            identifier=self.identifier,
            name=self.name,
            description=self.description,
        )


class SnapshotMetadataRequest(BaseModel):
    """Caller-supplied snapshot metadata. Any version sent by the client is ignored."""

    flow_identifier: str | None = Field(default=None, max_length=255)
    author: str | None = None
    comments: str | None = None


class FlowSnapshotCreateRequest(BaseModel):
    """Request body for creating the next version of a flow."""

    snapshot_metadata: SnapshotMetadataRequest | None = None
    flow_contents: dict[str, Any] | None = None

    def to_dto(self) -> SnapshotCreate:
        metadata = None
        if self.snapshot_metadata is not None:
            metadata = SnapshotMetadataCreate(
                flow_identifier=self.snapshot_metadata.flow_identifier,
                author=self.snapshot_metadata.author,
                comments=self.snapshot_metadata.comments,
            )
        return SnapshotCreate(flow_contents=self.flow_contents, snapshot_metadata=metadata)


class LinkResponse(BaseModel):
    """Discoverability link (relative href)."""

    rel: str = "self"
    href: str


class SnapshotMetadataResponse(BaseModel):
    """Metadata of one flow version."""

    model_config = ConfigDict(from_attributes=True)

    flow_identifier: str
    version: int
    timestamp: datetime
    author: str | None
    comments: str | None
    link: LinkResponse | None = None


class VersionedFlowResponse(BaseModel):
    """Flow response. snapshot_metadata is present only on verbose reads."""

    identifier: str
    name: str
    description: str | None
    bucket_identifier: str | None
    created_at: datetime
    updated_at: datetime
    version_count: int
    snapshot_metadata: list[SnapshotMetadataResponse] | None = None
    link: LinkResponse | None = None

    @classmethod
    def from_entity(cls, flow: VersionedFlowEntity) -> VersionedFlowResponse:
        metadata = None
        if flow.snapshot_metadata is not None:
            metadata = [
                SnapshotMetadataResponse.model_validate(m) for m in flow.snapshot_metadata
            ]
        return cls(
            identifier=flow.identifier,
            name=flow.name,
            description=flow.description,
            bucket_identifier=flow.bucket_identifier,
            created_at=flow.created_at,
            updated_at=flow.updated_at,
            version_count=flow.version_count,
            snapshot_metadata=metadata,
        )


class FlowSnapshotResponse(BaseModel):
    """One flow version: metadata plus opaque contents."""

    snapshot_metadata: SnapshotMetadataResponse
    flow_contents: dict[str, Any]

    @classmethod
    def from_entity(cls, snapshot: FlowSnapshotEntity) -> FlowSnapshotResponse:
        return cls(
            snapshot_metadata=SnapshotMetadataResponse.model_validate(
                snapshot.snapshot_metadata
            ),
            flow_contents=snapshot.flow_contents,
        )


def snapshot_metadata_responses(
    entries: Iterable[SnapshotMetadataEntity],
) -> list[SnapshotMetadataResponse]:
    """Convert an iterable of metadata entities (e.g. a SnapshotMetadataSet)."""
    return [SnapshotMetadataResponse.model_validate(m) for m in entries]


class FieldsResponse(BaseModel):
    """Field names valid for sorting and searching flows."""

    content: str = "flow"
    fields: list[str]
