"""Cache-specific exceptions."""

from __future__ import annotations


class CacheError(Exception):
    """Base class for cache layer errors."""


class CacheKeyAbsentError(CacheError):
    """Raised by a store that reports deletes of keys it does not hold.

    Tag invalidation skips members that fail this way; they were already gone.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Cache key not present: {key}")


class CacheNotConfiguredError(CacheError):
    """Raised when a cache operation is requested but no store was connected."""
