"""Cache layer: key building, Redis store, tag index and orchestrator."""

from __future__ import annotations

from jobboard_service.infra.cache.exceptions import (
    CacheError,
    CacheKeyAbsentError,
    CacheNotConfiguredError,
)
from jobboard_service.infra.cache.keys import build_http_key, build_key, http_cache_key
from jobboard_service.infra.cache.orchestrator import CacheOrchestrator
from jobboard_service.infra.cache.redis import RedisCache
from jobboard_service.infra.cache.store import CacheStore
from jobboard_service.infra.cache.tags import TagIndex

__all__ = [
    "CacheError",
    "CacheKeyAbsentError",
    "CacheNotConfiguredError",
    "CacheOrchestrator",
    "CacheStore",
    "RedisCache",
    "TagIndex",
    "build_http_key",
    "build_key",
    "http_cache_key",
]
