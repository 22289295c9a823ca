"""LRU-cached settings loaders.

Settings are validated once and cached for the lifetime of the process.
Tests clear a loader to force a reload::

    get_redis_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .database import DatabaseSettings
from .http_cache import HttpCacheSettings
from .logs import LoggingSettings
from .redis import RedisSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Get cached Redis settings."""
    return RedisSettings()


@lru_cache(maxsize=1)
def get_http_cache_settings() -> HttpCacheSettings:
    """Get cached HTTP response cache settings."""
    return HttpCacheSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


def clear_all_caches() -> None:
    """Drop every cached settings instance (tests and reloads)."""
    get_app_settings.cache_clear()
    get_redis_settings.cache_clear()
    get_http_cache_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()
