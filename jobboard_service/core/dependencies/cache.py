"""Cache dependencies.

The store is created at startup and published on ``app.state.cache_store``.
When Redis was unreachable at startup (degraded mode) there is no store and
endpoints that need the application cache fail with a 500, like any
other store failure.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from jobboard_service.core.settings import get_redis_settings
from jobboard_service.infra.cache import (
    CacheNotConfiguredError,
    CacheOrchestrator,
    CacheStore,
    http_cache_key,
)


def get_cache_store(request: Request) -> CacheStore:
    store = getattr(request.app.state, "cache_store", None)
    if store is None:
        msg = "Cache store is not available"
        raise CacheNotConfiguredError(msg)
    return store


def get_orchestrator(
    store: Annotated[CacheStore, Depends(get_cache_store)],
) -> CacheOrchestrator:
    return CacheOrchestrator.from_settings(store, get_redis_settings())


def get_http_key(request: Request) -> str:
    """HTTP cache key of the current request, as the response cache computes it."""
    return http_cache_key(request)


CacheStoreDep = Annotated[CacheStore, Depends(get_cache_store)]
OrchestratorDep = Annotated[CacheOrchestrator, Depends(get_orchestrator)]
HttpKeyDep = Annotated[str, Depends(get_http_key)]
