"""FastAPI dependencies for route handlers.

Features import their dependencies from here rather than from ``infra``.

Usage:
    from jobboard_service.core.dependencies import (
        CurrentUserDep,
        DbSessionDep,
        HttpKeyDep,
        OrchestratorDep,
    )
"""

from __future__ import annotations

from jobboard_service.core.dependencies.auth import (
    CurrentUserDep,
    get_current_user_id,
)
from jobboard_service.core.dependencies.cache import (
    CacheStoreDep,
    HttpKeyDep,
    OrchestratorDep,
    get_cache_store,
    get_http_key,
    get_orchestrator,
)
from jobboard_service.core.dependencies.database import DbSessionDep, get_db_session

__all__ = [
    "CacheStoreDep",
    "CurrentUserDep",
    "DbSessionDep",
    "HttpKeyDep",
    "OrchestratorDep",
    "get_cache_store",
    "get_current_user_id",
    "get_db_session",
    "get_http_key",
    "get_orchestrator",
]
