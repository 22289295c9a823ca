"""Database engine and session management."""

from __future__ import annotations

from jobboard_service.infra.database.session import (
    build_engine,
    build_session_factory,
    close_database,
    get_async_session,
    init_database,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "close_database",
    "get_async_session",
    "init_database",
]
