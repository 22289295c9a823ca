"""Pytest configuration and shared fixtures.

Organization:
    - Cache Fixtures: in-memory cache store standing in for Redis
    - Database Fixtures: SQLAlchemy engine and sessions on in-memory SQLite
    - Application Fixtures: FastAPI app wired to both, and HTTP clients
    - Data Fixtures: a company with two recruiters, a posting factory

The application lifespan is not run by ``ASGITransport``; the ``app`` fixture
publishes the store and session factory on ``app.state`` itself, the same
attributes the lifespan sets in production.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from tests.helpers import (
    OTHER_RECRUITER_ID,
    RECRUITER_ID,
    InMemoryCacheStore,
    as_user,
    posting_payload,
)

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def orchestrator(cache_store: InMemoryCacheStore):
    from jobboard_service.infra.cache import CacheOrchestrator

    return CacheOrchestrator(cache_store)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on a single shared in-memory SQLite connection.

    Yields:
        Engine with every feature table created.
    """
    import jobboard_service.features.models  # noqa: F401
    from jobboard_service.core.database import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine):
    from jobboard_service.infra.database import build_session_factory

    return build_session_factory(db_engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(session_factory, cache_store: InMemoryCacheStore):
    """FastAPI application wired to the test database and cache store."""
    from jobboard_service.app.main import create_app

    application = create_app()
    application.state.session_factory = session_factory
    application.state.cache_store = cache_store
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the application.

    Example:
        async def test_liveness(client):
            response = await client.get("/health/live")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def lenient_client(app) -> AsyncGenerator[AsyncClient]:
    """Client that returns the 500 response instead of re-raising server errors.

    Starlette re-raises unhandled exceptions after sending the 500 so the
    server can log them; outage tests inspect the response instead.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
async def company(client: AsyncClient) -> dict[str, Any]:
    """A registered company with ``RECRUITER_ID`` and ``OTHER_RECRUITER_ID`` attached."""
    response = await client.post(
        "/company",
        json={"name": "Acme", "website": "https://acme.example", "description": "Rockets"},
        headers=as_user("admin"),
    )
    assert response.status_code == 201, response.text
    data = response.json()

    for recruiter_id in (RECRUITER_ID, OTHER_RECRUITER_ID):
        response = await client.post(
            f"/company/{data['id']}/recruiters",
            json={"recruiter_id": recruiter_id},
            headers=as_user("admin"),
        )
        assert response.status_code == 201, response.text
    return data


@pytest.fixture
def create_posting(client: AsyncClient, company: dict[str, Any]):
    """Factory creating (and by default publishing) a posting over HTTP."""

    async def _create(
        recruiter_id: str = RECRUITER_ID, *, publish: bool = True, **overrides: Any
    ) -> dict[str, Any]:
        response = await client.post(
            "/job-posting", json=posting_payload(**overrides), headers=as_user(recruiter_id)
        )
        assert response.status_code == 201, response.text
        data = response.json()
        if publish:
            response = await client.post(
                f"/job-posting/{data['id']}/publish", headers=as_user(recruiter_id)
            )
            assert response.status_code == 200, response.text
            data = response.json()
        return data

    return _create
