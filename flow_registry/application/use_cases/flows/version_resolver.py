"""Flow version resolver: latest, specific, and full-listing policies over a flow's history.

Read-only; built on FlowStoreService and adds no persisted state.
"""

from __future__ import annotations

from flow_registry.application.services.flow_validation import validate_version_number
from flow_registry.application.use_cases.flows.flow_store import FlowStoreService
from flow_registry.domain.entities.flow import FlowSnapshotEntity
from flow_registry.domain.value_objects.versioning import (
    NoVersionsYet,
    SnapshotMetadataSet,
)
from flow_registry.shared.telemetry.tracing import traced


class FlowVersionResolver:
    """Selects versions of a flow: all (ascending), latest, or one by number."""

    def __init__(self, flow_store: FlowStoreService) -> None:
        self._flow_store = flow_store

    @traced("flow_versions.list_versions")
    async def list_versions(self, flow_id: str) -> SnapshotMetadataSet:
        """Return the flow's snapshot metadata in ascending version order.

        Raises:
            ResourceNotFoundException: If the flow does not exist.
        """
        flow = await self._flow_store.get_flow(flow_id, verbose=True)
        if flow.snapshot_metadata is None:
            return SnapshotMetadataSet(flow.identifier)
        return flow.snapshot_metadata

    @traced("flow_versions.latest_version")
    async def latest_version(self, flow_id: str) -> FlowSnapshotEntity | NoVersionsYet:
        """Return the snapshot with the highest version, or NoVersionsYet for an empty history.

        Raises:
            ResourceNotFoundException: If the flow does not exist.
        """
        flow = await self._flow_store.get_flow(flow_id, verbose=True)
        last = flow.latest_snapshot_metadata()
        if last is None:
            return NoVersionsYet(flow.identifier)
        return await self._flow_store.get_flow_snapshot(last.flow_identifier, last.version)

    @traced("flow_versions.specific_version")
    async def specific_version(
        self, flow_id: str, version_number: int | None
    ) -> FlowSnapshotEntity:
        """Return the snapshot for version_number (must be a positive integer).

        Raises:
            ValidationException: If version_number is absent or not positive.
            ResourceNotFoundException: If the flow or that version does not exist.
        """
        version = validate_version_number(version_number).unwrap()
        return await self._flow_store.get_flow_snapshot(flow_id, version)
