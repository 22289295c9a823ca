"""Application-level read-through cache with tag invalidation.

Reads go through ``get_or_set`` (single key) or ``remember_list`` (key plus
tag). Writes, after persisting, call ``invalidate`` for every tag whose data
they touched and ``delete`` for concrete keys they know about, including the
HTTP keys served by the response cache middleware.

There is no request coalescing: concurrent misses on one key each run the
supplier and the last write wins.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING

from jobboard_service.infra.cache.keys import QueryInput, build_http_key
from jobboard_service.infra.cache.tags import TagIndex

if TYPE_CHECKING:
    from jobboard_service.core.settings.redis import RedisSettings
    from jobboard_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)


class CacheOrchestrator:
    """Coordinate cached reads and invalidating writes over one store."""

    def __init__(self, store: CacheStore, tags: TagIndex | None = None) -> None:
        self.store = store
        self.tags = tags or TagIndex(store)

    @classmethod
    def from_settings(cls, store: CacheStore, settings: RedisSettings) -> CacheOrchestrator:
        return cls(
            store,
            TagIndex(store, ttl=settings.tag_index_ttl, warn_size=settings.tag_index_warn_size),
        )

    async def get_or_set[T](
        self,
        key: str,
        supplier: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for ``key`` or compute, store and return it.

        Args:
            key: Cache key.
            supplier: Called only on a miss. Its exceptions propagate and
                nothing is stored.
            ttl: ``None`` for the store default, ``0`` for no expiry,
                otherwise seconds.
        """
        cached = await self.store.get(key)
        if cached is not None:
            return cached

        value = await supplier()
        await self.store.set(key, value, ttl)
        return value

    async def remember_list[T](
        self,
        tag: str,
        key: str,
        supplier: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """``get_or_set`` plus registration of ``key`` under ``tag``.

        The key is tracked on hits as well, so a membership set dropped by
        an earlier invalidation is rebuilt by the next read.
        """
        value = await self.get_or_set(key, supplier, ttl)
        await self.tags.track(tag, key)
        return value

    async def track_key(self, tag: str, key: str) -> None:
        await self.tags.track(tag, key)

    async def invalidate(self, tag: str) -> int:
        return await self.tags.invalidate(tag)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        removed = 0
        for tag in dict.fromkeys(tags):
            removed += await self.tags.invalidate(tag)
        return removed

    async def delete(self, *keys: str) -> int:
        """Delete concrete keys; returns how many existed."""
        removed = 0
        for key in keys:
            if await self.store.delete(key):
                removed += 1
        return removed

    # HTTP mirror
    #
    # The response cache middleware is tag-unaware. Call sites serving a
    # cacheable GET register the request's HTTP key under an HTTP tag so that
    # writes can drop the cached responses along with the application keys.

    async def track_http(self, tag: str, http_key: str) -> None:
        await self.tags.track(tag, http_key)

    async def forget_http(
        self,
        user_id: str | int | None,
        path: str,
        query: QueryInput | None = None,
    ) -> bool:
        """Delete the cached response of one known URL."""
        return await self.store.delete(build_http_key(user_id, path, query))
