"""Store contract shared by the orchestrator, the tag index and the HTTP cache."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Remote key/value store with TTL and set operations.

    TTL semantics for ``set``:

    * ``ttl=None`` applies the store's configured default;
    * ``ttl=0`` stores without expiry, overriding the default;
    * ``ttl>0`` expires after that many seconds;
    * a negative ``ttl`` raises ``ValueError``.

    A stored ``None`` cannot be told apart from a miss.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...

    async def delete(self, key: str) -> bool: ...

    async def add_members(self, key: str, *members: str) -> int: ...

    async def members(self, key: str) -> set[str]: ...

    async def member_count(self, key: str) -> int: ...

    async def expire(self, key: str, ttl: int) -> bool: ...
