"""Link enrichment for flow responses (relative self links)."""

from __future__ import annotations

from collections.abc import Iterable

from flow_registry.schemas.flow import (
    LinkResponse,
    SnapshotMetadataResponse,
    VersionedFlowResponse,
)

FLOW_PATH = "flows/{flow_id}"
FLOW_SNAPSHOT_PATH = "flows/{flow_id}/versions/{version}"


class LinkService:
    """Implements ILinkService. Only sets `link`; identifiers and versions are untouched."""

    def populate_flow_links(
        self, flows: VersionedFlowResponse | Iterable[VersionedFlowResponse]
    ) -> None:
        if isinstance(flows, VersionedFlowResponse):
            flows = (flows,)
        for flow in flows:
            flow.link = LinkResponse(href=FLOW_PATH.format(flow_id=flow.identifier))
            if flow.snapshot_metadata:
                self.populate_snapshot_links(flow.snapshot_metadata)

    def populate_snapshot_links(
        self, snapshot_metadata: Iterable[SnapshotMetadataResponse]
    ) -> None:
        for metadata in snapshot_metadata:
            metadata.link = LinkResponse(
                href=FLOW_SNAPSHOT_PATH.format(
                    flow_id=metadata.flow_identifier, version=metadata.version
                )
            )
