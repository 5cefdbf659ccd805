"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging,
telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from flow_registry.core.config import get_settings
from flow_registry.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, tracer provider (when create_app registered
    telemetry). Shutdown order: telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    logger.info(
        "Starting %s %s (backend=%s)",
        settings.app_name,
        settings.app_version,
        settings.database_backend,
    )

    from flow_registry.shared.telemetry.telemetry import get_telemetry

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        if settings.database_backend == "postgres":
            from flow_registry.infrastructure.persistence.database import get_engine

            telemetry.instrument_sqlalchemy(get_engine())
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if telemetry is not None:
        telemetry.shutdown()

    from flow_registry.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
