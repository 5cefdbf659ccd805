"""Flow store dependencies (composition root).

Routes depend only on these providers. The storage backend is chosen by
settings.database_backend: "postgres" opens a SQLAlchemy session per request
(transactional for writes), "memory" reuses the process-wide in-memory store.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends

from flow_registry.application.interfaces.repositories import IFlowRepository
from flow_registry.application.interfaces.services import ILinkService
from flow_registry.application.use_cases.flows import FlowStoreService, FlowVersionResolver
from flow_registry.core.config import Settings, get_settings
from flow_registry.infrastructure.memory import get_in_memory_flow_repository
from flow_registry.infrastructure.persistence.database import session_scope
from flow_registry.infrastructure.persistence.repositories import FlowRepository
from flow_registry.infrastructure.services import LinkService


@asynccontextmanager
async def _flow_repo_scope(
    settings: Settings, *, transactional: bool
) -> AsyncIterator[IFlowRepository]:
    if settings.database_backend == "memory":
        yield get_in_memory_flow_repository()
        return
    async with session_scope(transactional=transactional) as session:
        yield FlowRepository(session)


async def get_flow_repo(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[IFlowRepository]:
    """Flow repository for read operations."""
    async with _flow_repo_scope(settings, transactional=False) as repo:
        yield repo


async def get_flow_repo_for_write(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[IFlowRepository]:
    """Flow repository for create/update/delete (commits on success, rolls back on error)."""
    async with _flow_repo_scope(settings, transactional=True) as repo:
        yield repo


async def get_flow_store(
    flow_repo: Annotated[IFlowRepository, Depends(get_flow_repo)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FlowStoreService:
    """Flow store for read operations."""
    return FlowStoreService(
        flow_repo, version_assign_max_attempts=settings.version_assign_max_attempts
    )


async def get_flow_store_for_write(
    flow_repo: Annotated[IFlowRepository, Depends(get_flow_repo_for_write)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FlowStoreService:
    """Flow store for writes (flow CRUD and version creation)."""
    return FlowStoreService(
        flow_repo, version_assign_max_attempts=settings.version_assign_max_attempts
    )


async def get_version_resolver(
    flow_store: Annotated[FlowStoreService, Depends(get_flow_store)],
) -> FlowVersionResolver:
    """Version resolver (list, latest, specific) over the read flow store."""
    return FlowVersionResolver(flow_store)


def get_link_service() -> ILinkService:
    """Link enrichment for responses."""
    return LinkService()
