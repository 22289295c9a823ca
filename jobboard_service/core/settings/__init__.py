"""Per-domain Pydantic settings.

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files
    3. Environment variables
    4. .env file
    5. secrets_dir
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .http_cache import HttpCacheSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_http_cache_settings,
    get_logging_settings,
    get_redis_settings,
)
from .logs import LoggingSettings
from .redis import RedisSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "HttpCacheSettings",
    "LoggingSettings",
    "RedisSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_http_cache_settings",
    "get_logging_settings",
    "get_redis_settings",
]
