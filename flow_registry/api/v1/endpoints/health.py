"""Health check endpoint. No storage access; used for liveness probes."""

from fastapi import APIRouter

from flow_registry.core.config import get_settings
from flow_registry.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status and the configured storage backend."""
    return HealthResponse(backend=get_settings().database_backend)
