"""Database models base and repository helpers."""

from __future__ import annotations

from jobboard_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from jobboard_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "SearchResult",
    "TimestampMixin",
    "TimestampedBase",
]
