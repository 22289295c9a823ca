"""Async engine and session factory construction.

The engine is built during application startup from ``DatabaseSettings``
and published on ``app.state``; nothing connects at import time.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jobboard_service.core.database import Base

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from jobboard_service.core.settings.database import DatabaseSettings

logger = logging.getLogger(__name__)


def build_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine (psycopg3 for PostgreSQL, aiosqlite in tests)."""
    return create_async_engine(settings.url, **settings.sqlalchemy_engine_kwargs())


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(engine: AsyncEngine, *, create_tables: bool = False) -> None:
    """Verify connectivity and optionally create missing tables.

    Importing the feature models registers their tables on ``Base.metadata``.
    """
    import jobboard_service.features.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_tables:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized", extra={"create_tables": create_tables})


async def close_database(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Database connections closed")


@asynccontextmanager
async def get_async_session(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session scope for code outside the request cycle (scripts, tests).

    Example:
        async with get_async_session(factory) as session:
            result = await session.execute(select(Company))
    """
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
