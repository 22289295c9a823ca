"""Application lifespan management.

Startup Order:
1. Logging
2. Database (engine, session factory, connectivity check)
3. Cache (Redis); degraded mode unless REDIS_STARTUP_REQUIRE_CACHE

Shutdown Order: reverse of startup.

Everything created here is published on ``app.state``:
``engine``, ``session_factory`` and ``cache_store`` (``None`` when Redis was
unavailable and the service runs uncached).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from jobboard_service.core.settings import (
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_redis_settings,
)
from jobboard_service.infra.cache.redis import RedisCache
from jobboard_service.infra.database import (
    build_engine,
    build_session_factory,
    close_database,
    init_database,
)
from jobboard_service.infra.logging.config import setup_logging, shutdown

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_database(app: FastAPI) -> None:
    db_settings = get_db_settings()

    engine = build_engine(db_settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    await init_database(engine, create_tables=db_settings.create_tables)


async def _startup_cache(app: FastAPI) -> None:
    """Connect Redis, or continue without a store unless the cache is required."""
    redis_settings = get_redis_settings()
    cache = RedisCache(redis_settings)

    try:
        await cache.connect()
    except Exception as e:
        if redis_settings.startup_require_cache:
            logger.error(
                "Redis cache required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_cache": True},
            )
            raise
        logger.warning(
            "Redis cache unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_cache": False},
        )
        app.state.cache_store = None
        return

    app.state.cache_store = cache
    logger.info("Redis cache initialized", extra={"key_prefix": redis_settings.key_prefix})


async def _shutdown_cache(app: FastAPI) -> None:
    store = getattr(app.state, "cache_store", None)
    if isinstance(store, RedisCache):
        try:
            await store.disconnect()
        except Exception as e:
            logger.warning("Error closing Redis connection", extra={"error": str(e)})
    app.state.cache_store = None


async def _shutdown_database(app: FastAPI) -> None:
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await close_database(engine)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    setup_logging(get_logging_settings())
    app_settings = get_app_settings()
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    await _startup_database(app)
    try:
        await _startup_cache(app)
    except Exception:
        await _shutdown_database(app)
        raise

    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_cache(app)
        await _shutdown_database(app)
        logger.info("Application shutdown complete")
        shutdown()
