"""Pytest configuration and fixtures for the flow registry.

HTTP tests run against flow_registry.main:app over ASGI. The storage backend
defaults to the in-memory store; set DATABASE_BACKEND=postgres and
DATABASE_URL to run the requires_db tests (and the API tests) against Postgres.
"""

import os

os.environ.setdefault("DATABASE_BACKEND", "memory")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from flow_registry.core.config import get_settings
from flow_registry.infrastructure.memory import get_in_memory_flow_repository
from flow_registry.infrastructure.persistence import database
from flow_registry.main import app


@pytest.fixture(autouse=True)
def _reset_in_memory_store():
    """Each test starts with an empty in-memory store."""
    get_in_memory_flow_repository().clear()
    yield
    get_in_memory_flow_repository().clear()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await database.dispose_engine()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_BACKEND=postgres and DATABASE_URL with a migrated schema.
    Skips (pytest.skip) when Postgres is not configured. Run without DB via:
    pytest -m 'not requires_db'.
    """
    if get_settings().database_backend != "postgres":
        pytest.skip(
            "Postgres not configured: set DATABASE_BACKEND=postgres and DATABASE_URL, "
            "then run: alembic upgrade head"
        )
    async with database.session_scope() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
