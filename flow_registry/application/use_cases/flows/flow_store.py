"""Flow store: CRUD on flows and their snapshots with identifier/version invariants.

Every mutating call is validated first (flow_validation) and then delegated to
an IFlowRepository. Version numbers are always assigned by the repository;
a lost race on version assignment is retried here and only surfaces as
VersionAssignmentConflictException once retries are exhausted.
"""

from __future__ import annotations

import logging

from flow_registry.application.dtos.flow import FlowCreate, FlowUpdate, SnapshotCreate
from flow_registry.application.dtos.query import QueryParameters
from flow_registry.application.interfaces.repositories import IFlowRepository
from flow_registry.application.services.flow_validation import (
    validate_flow_create,
    validate_flow_id,
    validate_flow_update,
    validate_snapshot_create,
    validate_version_number,
)
from flow_registry.core.constants import FLOW_FIELDS
from flow_registry.domain.entities.flow import FlowSnapshotEntity, VersionedFlowEntity
from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    ResourceNotFoundException,
    SnapshotNotFoundException,
    ValidationException,
    VersionAssignmentConflictException,
)
from flow_registry.domain.value_objects.versioning import MAX_VERSION
from flow_registry.shared.telemetry.tracing import add_span_attributes, traced
from flow_registry.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

DEFAULT_VERSION_ASSIGN_MAX_ATTEMPTS = 5


class FlowStoreService:
    """Creates, reads, updates and deletes flows and flow snapshots."""

    def __init__(
        self,
        flow_repo: IFlowRepository,
        *,
        version_assign_max_attempts: int = DEFAULT_VERSION_ASSIGN_MAX_ATTEMPTS,
    ) -> None:
        if version_assign_max_attempts < 1:
            raise ValueError("version_assign_max_attempts must be at least 1")
        self._flow_repo = flow_repo
        self._max_attempts = version_assign_max_attempts

    @staticmethod
    def get_flow_fields() -> set[str]:
        """Return the field names valid for sorting/searching flows."""
        return set(FLOW_FIELDS)

    @traced("flow_store.get_flows")
    async def get_flows(
        self, query: QueryParameters | None = None
    ) -> list[VersionedFlowEntity]:
        """Return all flows sorted per query (no version history).

        Raises:
            ValidationException: If a sort parameter names an unknown field.
        """
        query = query or QueryParameters()
        for param in query.sort_parameters:
            if param.field_name not in FLOW_FIELDS:
                raise ValidationException(
                    f"Invalid sort field '{param.field_name}'; "
                    f"valid fields: {sorted(FLOW_FIELDS)}",
                    field="sort",
                )
        return await self._flow_repo.list_flows(query)

    @traced("flow_store.get_flow")
    async def get_flow(self, flow_id: str, verbose: bool = False) -> VersionedFlowEntity:
        """Return flow by id; verbose populates the ordered snapshot metadata.

        Raises:
            ValidationException: If flow_id is blank.
            ResourceNotFoundException: If the flow does not exist.
        """
        validate_flow_id(flow_id).unwrap()
        flow = await self._flow_repo.get_flow(flow_id, verbose=verbose)
        if flow is None:
            raise ResourceNotFoundException("flow", flow_id)
        return flow

    @traced("flow_store.create_flow")
    async def create_flow(self, data: FlowCreate | None) -> VersionedFlowEntity:
        """Create a flow with no versions; generate an identifier when none is given.

        Raises:
            ValidationException: If the payload is absent or name/identifier is blank.
            FlowAlreadyExistsException: If the identifier is already registered.
        """
        data = validate_flow_create(data).unwrap()
        identifier = data.identifier or generate_cuid()
        if await self._flow_repo.get_flow(identifier) is not None:
            raise FlowAlreadyExistsException(identifier)
        flow = await self._flow_repo.create_flow(identifier, data)
        logger.info("Created flow %s (%s)", flow.identifier, flow.name)
        return flow

    @traced("flow_store.update_flow")
    async def update_flow(
        self, flow_id: str, data: FlowUpdate | None
    ) -> VersionedFlowEntity:
        """Update descriptive fields of an existing flow; the identifier never changes.

        Raises:
            ValidationException: If flow_id is blank, data is absent, or the
                body identifier conflicts with flow_id.
            ResourceNotFoundException: If the flow does not exist.
        """
        data = validate_flow_update(flow_id, data).unwrap()
        flow = await self._flow_repo.update_flow(flow_id, data)
        if flow is None:
            raise ResourceNotFoundException("flow", flow_id)
        logger.info("Updated flow %s", flow_id)
        return flow

    @traced("flow_store.delete_flow")
    async def delete_flow(self, flow_id: str) -> VersionedFlowEntity:
        """Delete the flow and all of its versions; return its last-known state.

        Raises:
            ValidationException: If flow_id is blank.
            ResourceNotFoundException: If the flow does not exist.
        """
        validate_flow_id(flow_id).unwrap()
        flow = await self._flow_repo.delete_flow(flow_id)
        if flow is None:
            raise ResourceNotFoundException("flow", flow_id)
        logger.info("Deleted flow %s with %d version(s)", flow_id, flow.version_count)
        return flow

    @traced("flow_store.create_flow_snapshot")
    async def create_flow_snapshot(
        self, flow_id: str, data: SnapshotCreate | None
    ) -> FlowSnapshotEntity:
        """Create the next version of a flow; the version number is server-assigned.

        Raises:
            ValidationException: If flow_id is blank, the snapshot is absent, or
                its flow identifier conflicts with flow_id.
            ResourceNotFoundException: If the flow does not exist.
            VersionAssignmentConflictException: If concurrent writers kept
                winning the next version for every attempt.
        """
        data = validate_snapshot_create(flow_id, data).unwrap()
        for attempt in range(1, self._max_attempts + 1):
            try:
                snapshot = await self._flow_repo.create_snapshot(flow_id, data)
            except VersionAssignmentConflictException:
                logger.debug(
                    "Version assignment conflict for flow %s (attempt %d/%d)",
                    flow_id,
                    attempt,
                    self._max_attempts,
                )
                continue
            if snapshot is None:
                raise ResourceNotFoundException("flow", flow_id)
            add_span_attributes(flow_identifier=flow_id, version=snapshot.version)
            logger.info("Created version %d of flow %s", snapshot.version, flow_id)
            return snapshot
        logger.warning(
            "Version assignment for flow %s failed after %d attempts",
            flow_id,
            self._max_attempts,
        )
        raise VersionAssignmentConflictException(flow_id, attempts=self._max_attempts)

    @traced("flow_store.get_flow_snapshot")
    async def get_flow_snapshot(self, flow_id: str, version: int) -> FlowSnapshotEntity:
        """Return the snapshot for exactly this version of the flow.

        Raises:
            ValidationException: If flow_id is blank or version is not positive.
            ResourceNotFoundException: If the flow does not exist.
            SnapshotNotFoundException: If the flow exists but the version does not.
        """
        validate_flow_id(flow_id).unwrap()
        validate_version_number(version).unwrap()
        # No version above MAX_VERSION can ever be assigned.
        if version <= MAX_VERSION:
            snapshot = await self._flow_repo.get_snapshot(flow_id, version)
            if snapshot is not None:
                return snapshot
        if await self._flow_repo.get_flow(flow_id) is None:
            raise ResourceNotFoundException("flow", flow_id)
        raise SnapshotNotFoundException(flow_id, version)
