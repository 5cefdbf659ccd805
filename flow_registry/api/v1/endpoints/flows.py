"""Flow API: thin routes delegating to the flow store and version resolver.

Link enrichment runs here, after the core returns; the core never sees links.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Query

from flow_registry.api.v1.dependencies import (
    get_flow_store,
    get_flow_store_for_write,
    get_link_service,
    get_version_resolver,
)
from flow_registry.application.dtos.query import QueryParameters
from flow_registry.application.interfaces.services import ILinkService
from flow_registry.application.use_cases.flows import FlowStoreService, FlowVersionResolver
from flow_registry.domain.exceptions import NoVersionsYetException
from flow_registry.domain.value_objects.versioning import NoVersionsYet
from flow_registry.schemas.flow import (
    FieldsResponse,
    FlowCreateRequest,
    FlowSnapshotCreateRequest,
    FlowSnapshotResponse,
    FlowUpdateRequest,
    SnapshotMetadataResponse,
    VersionedFlowResponse,
    snapshot_metadata_responses,
)

router = APIRouter()


def _flow_response(flow, link_service: ILinkService) -> VersionedFlowResponse:
    response = VersionedFlowResponse.from_entity(flow)
    link_service.populate_flow_links(response)
    return response


def _snapshot_response(snapshot, link_service: ILinkService) -> FlowSnapshotResponse:
    response = FlowSnapshotResponse.from_entity(snapshot)
    link_service.populate_snapshot_links([response.snapshot_metadata])
    return response


@router.get("", response_model=list[VersionedFlowResponse])
async def get_flows(
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
    sort: Annotated[list[str] | None, Query(description="field:order, e.g. name:ASC")] = None,
):
    """List all flows (no version history), sorted by the given sort parameters."""
    flows = await flow_store.get_flows(QueryParameters.from_strings(sort))
    responses = [VersionedFlowResponse.from_entity(f) for f in flows]
    link_service.populate_flow_links(responses)
    return responses


@router.post("", response_model=VersionedFlowResponse, status_code=201)
async def create_flow(
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store_for_write)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
    body: Annotated[FlowCreateRequest | None, Body()] = None,
):
    """Register a flow with no versions. The identifier is generated when omitted."""
    flow = await flow_store.create_flow(body.to_dto() if body else None)
    return _flow_response(flow, link_service)


@router.get("/fields", response_model=FieldsResponse)
async def get_flow_fields():
    """Field names valid for sorting and searching flows."""
    return FieldsResponse(fields=sorted(FlowStoreService.get_flow_fields()))


@router.get("/{flow_id}", response_model=VersionedFlowResponse)
async def get_flow(
    flow_id: str,
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
    verbose: bool = False,
):
    """Get a flow; verbose includes its snapshot metadata in ascending version order."""
    flow = await flow_store.get_flow(flow_id, verbose=verbose)
    return _flow_response(flow, link_service)


@router.put("/{flow_id}", response_model=VersionedFlowResponse)
async def update_flow(
    flow_id: str,
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store_for_write)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
    body: Annotated[FlowUpdateRequest | None, Body()] = None,
):
    """Update a flow's name/description. A body identifier must match the path."""
    flow = await flow_store.update_flow(flow_id, body.to_dto() if body else None)
    return _flow_response(flow, link_service)


@router.delete("/{flow_id}", response_model=VersionedFlowResponse)
async def delete_flow(
    flow_id: str,
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store_for_write)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
):
    """Delete a flow and all of its versions; returns its last-known state."""
    flow = await flow_store.delete_flow(flow_id)
    return _flow_response(flow, link_service)


@router.post(
    "/{flow_id}/versions", response_model=FlowSnapshotResponse, status_code=201
)
async def create_flow_version(
    flow_id: str,
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store_for_write)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
    body: Annotated[FlowSnapshotCreateRequest | None, Body()] = None,
):
    """Create the next version of a flow. The version number is assigned by the server."""
    snapshot = await flow_store.create_flow_snapshot(
        flow_id, body.to_dto() if body else None
    )
    return _snapshot_response(snapshot, link_service)


@router.get("/{flow_id}/versions", response_model=list[SnapshotMetadataResponse])
async def get_flow_versions(
    flow_id: str,
    resolver: Annotated[FlowVersionResolver, Depends(get_version_resolver)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
):
    """List snapshot metadata of a flow in ascending version order."""
    responses = snapshot_metadata_responses(await resolver.list_versions(flow_id))
    link_service.populate_snapshot_links(responses)
    return responses


@router.get("/{flow_id}/versions/latest", response_model=FlowSnapshotResponse)
async def get_latest_flow_version(
    flow_id: str,
    resolver: Annotated[FlowVersionResolver, Depends(get_version_resolver)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
):
    """Get the highest version of a flow (404 NO_VERSIONS_YET when it has none)."""
    result = await resolver.latest_version(flow_id)
    if isinstance(result, NoVersionsYet):
        raise NoVersionsYetException(result.flow_identifier)
    return _snapshot_response(result, link_service)


@router.get(
    "/{flow_id}/versions/{version_number}", response_model=FlowSnapshotResponse
)
async def get_flow_version(
    flow_id: str,
    version_number: Annotated[str, Path(pattern=r"^\d+$")],
    resolver: Annotated[FlowVersionResolver, Depends(get_version_resolver)],
    link_service: Annotated[ILinkService, Depends(get_link_service)],
):
    """Get one version of a flow by number."""
    snapshot = await resolver.specific_version(flow_id, int(version_number))
    return _snapshot_response(snapshot, link_service)
