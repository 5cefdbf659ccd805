"""Flow and FlowSnapshot repository (PostgreSQL). Returns domain entities.

Version assignment runs inside a savepoint: read max(version) for the flow,
insert max + 1. The unique (flow_identifier, version) constraint rejects a
concurrent duplicate; that IntegrityError is reported as
VersionAssignmentConflictException so the caller can retry with a fresh
maximum.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from flow_registry.application.dtos.flow import FlowCreate, FlowUpdate, SnapshotCreate
from flow_registry.application.dtos.query import QueryParameters
from flow_registry.core.constants import (
    FLOW_FIELD_BUCKET_IDENTIFIER,
    FLOW_FIELD_CREATED_AT,
    FLOW_FIELD_DESCRIPTION,
    FLOW_FIELD_IDENTIFIER,
    FLOW_FIELD_NAME,
    FLOW_FIELD_UPDATED_AT,
)
from flow_registry.domain.entities.flow import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)
from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    ValidationException,
    VersionAssignmentConflictException,
)
from flow_registry.domain.value_objects.versioning import (
    SnapshotMetadataSet,
    next_version,
)
from flow_registry.infrastructure.persistence.models.flow import Flow, FlowSnapshot
from flow_registry.infrastructure.persistence.repositories.base import BaseRepository
from flow_registry.shared.enums import SortOrder
from flow_registry.shared.utils.datetime import ensure_utc

_SORT_COLUMNS = {
    FLOW_FIELD_IDENTIFIER: Flow.identifier,
    FLOW_FIELD_NAME: Flow.name,
    FLOW_FIELD_DESCRIPTION: Flow.description,
    FLOW_FIELD_BUCKET_IDENTIFIER: Flow.bucket_identifier,
    FLOW_FIELD_CREATED_AT: Flow.created_at,
    FLOW_FIELD_UPDATED_AT: Flow.updated_at,
}


def _metadata_to_entity(s: FlowSnapshot) -> SnapshotMetadataEntity:
    """Map FlowSnapshot ORM to SnapshotMetadataEntity."""
    return SnapshotMetadataEntity(
        flow_identifier=s.flow_identifier,
        version=s.version,
        timestamp=ensure_utc(s.timestamp),
        author=s.author,
        comments=s.comments,
    )


def _snapshot_to_entity(s: FlowSnapshot) -> FlowSnapshotEntity:
    """Map FlowSnapshot ORM to FlowSnapshotEntity (metadata + contents)."""
    return FlowSnapshotEntity(
        snapshot_metadata=_metadata_to_entity(s),
        flow_contents=dict(s.flow_contents),
    )


def _flow_to_entity(
    f: Flow,
    version_count: int,
    snapshots: list[FlowSnapshot] | None = None,
) -> VersionedFlowEntity:
    """Map Flow ORM to VersionedFlowEntity; snapshots given means a verbose read."""
    metadata_set = None
    if snapshots is not None:
        metadata_set = SnapshotMetadataSet(
            f.identifier, (_metadata_to_entity(s) for s in snapshots)
        )
    return VersionedFlowEntity(
        identifier=f.identifier,
        name=f.name,
        description=f.description,
        bucket_identifier=f.bucket_identifier,
        created_at=ensure_utc(f.created_at),
        updated_at=ensure_utc(f.updated_at),
        version_count=version_count,
        snapshot_metadata=metadata_set,
    )


class FlowRepository(BaseRepository[Flow]):
    """Flow repository. Snapshot rows are only ever inserted, never updated."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Flow)

    async def list_flows(self, query: QueryParameters) -> list[VersionedFlowEntity]:
        """Return all flows ordered by query.sort_parameters (name, identifier by default)."""
        counts = (
            select(
                FlowSnapshot.flow_identifier,
                func.count(FlowSnapshot.id).label("version_count"),
            )
            .group_by(FlowSnapshot.flow_identifier)
            .subquery()
        )
        q = select(Flow, func.coalesce(counts.c.version_count, 0)).outerjoin(
            counts, counts.c.flow_identifier == Flow.identifier
        )
        order_by = []
        for param in query.sort_parameters:
            column = _SORT_COLUMNS.get(param.field_name)
            if column is None:
                raise ValidationException(
                    f"Invalid sort field '{param.field_name}'", field="sort"
                )
            order_by.append(column.desc() if param.order == SortOrder.DESC else column.asc())
        if not order_by:
            order_by = [Flow.name.asc()]
        order_by.append(Flow.identifier.asc())
        result = await self.db.execute(q.order_by(*order_by))
        return [_flow_to_entity(f, count) for f, count in result.all()]

    async def _count_versions(self, flow_id: str) -> int:
        r = await self.db.execute(
            select(func.count(FlowSnapshot.id)).where(
                FlowSnapshot.flow_identifier == flow_id
            )
        )
        return r.scalar() or 0

    async def _max_version(self, flow_id: str) -> int:
        r = await self.db.execute(
            select(func.max(FlowSnapshot.version)).where(
                FlowSnapshot.flow_identifier == flow_id
            )
        )
        return r.scalar() or 0

    async def _list_snapshot_rows(self, flow_id: str) -> list[FlowSnapshot]:
        result = await self.db.execute(
            select(FlowSnapshot)
            .where(FlowSnapshot.flow_identifier == flow_id)
            .order_by(FlowSnapshot.version.asc())
        )
        return list(result.scalars().all())

    async def _to_entity(self, flow: Flow, *, verbose: bool) -> VersionedFlowEntity:
        if verbose:
            rows = await self._list_snapshot_rows(flow.identifier)
            return _flow_to_entity(flow, len(rows), rows)
        return _flow_to_entity(flow, await self._count_versions(flow.identifier))

    async def get_flow(
        self, flow_id: str, *, verbose: bool = False
    ) -> VersionedFlowEntity | None:
        """Return flow by identifier; include ordered snapshot metadata when verbose."""
        flow = await self.get_by_id(flow_id)
        if flow is None:
            return None
        return await self._to_entity(flow, verbose=verbose)

    async def create_flow(self, identifier: str, data: FlowCreate) -> VersionedFlowEntity:
        """Insert a flow; a duplicate identifier raises FlowAlreadyExistsException."""
        flow = Flow(
            identifier=identifier,
            name=data.name,
            description=data.description,
            bucket_identifier=data.bucket_identifier,
        )
        try:
            async with self.db.begin_nested():
                flow = await self.create(flow)
        except IntegrityError as e:
            raise FlowAlreadyExistsException(identifier) from e
        return _flow_to_entity(flow, 0)

    async def update_flow(
        self, flow_id: str, data: FlowUpdate
    ) -> VersionedFlowEntity | None:
        """Update name/description; return updated flow or None if not found."""
        flow = await self.get_by_id(flow_id)
        if flow is None:
            return None
        if data.name is not None:
            flow.name = data.name
        if data.description is not None:
            flow.description = data.description
        flow.updated_at = func.now()
        flow = await self.update(flow)
        return await self._to_entity(flow, verbose=False)

    async def delete_flow(self, flow_id: str) -> VersionedFlowEntity | None:
        """Delete flow and its snapshots; return the last-known state (verbose)."""
        flow = await self.get_by_id(flow_id)
        if flow is None:
            return None
        last_known = await self._to_entity(flow, verbose=True)
        await self.delete(flow)
        return last_known

    async def _on_before_delete(self, obj: Flow) -> None:
        # ON DELETE CASCADE covers this too; explicit so the cascade does not depend on DDL.
        await self.db.execute(
            delete(FlowSnapshot).where(FlowSnapshot.flow_identifier == obj.identifier)
        )

    async def create_snapshot(
        self, flow_id: str, data: SnapshotCreate
    ) -> FlowSnapshotEntity | None:
        """Insert the next version of flow_id; None if the flow does not exist.

        Raises:
            VersionAssignmentConflictException: If another writer inserted the
                same version first (savepoint rolled back; caller may retry).
        """
        if await self.get_by_id(flow_id) is None:
            return None
        metadata = data.snapshot_metadata
        try:
            async with self.db.begin_nested():
                version = next_version(await self._max_version(flow_id))
                row = FlowSnapshot(
                    flow_identifier=flow_id,
                    version=version,
                    author=metadata.author if metadata else None,
                    comments=metadata.comments if metadata else None,
                    flow_contents=data.flow_contents,
                )
                self.db.add(row)
                await self.db.flush()
                await self.db.refresh(row)
        except IntegrityError as e:
            raise VersionAssignmentConflictException(flow_id) from e
        return _snapshot_to_entity(row)

    async def get_snapshot(
        self, flow_id: str, version: int
    ) -> FlowSnapshotEntity | None:
        """Return the snapshot for exactly this version, or None."""
        result = await self.db.execute(
            select(FlowSnapshot).where(
                FlowSnapshot.flow_identifier == flow_id,
                FlowSnapshot.version == version,
            )
        )
        row = result.scalar_one_or_none()
        return _snapshot_to_entity(row) if row else None
