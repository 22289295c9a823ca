"""Tag index: tag -> membership set of concrete cache keys.

A tag names a coarse invalidation scope (``idx|jobs|public|list``). Every key
cached under it is recorded in a set stored in the same store at
``tag:{tag}``, so invalidating the tag can find and delete keys whose exact
shape (filters, pagination) is unknown to the writer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jobboard_service.infra.cache.exceptions import CacheKeyAbsentError
from jobboard_service.infra.metrics.tracking import track_tag_invalidation, track_tag_oversized

if TYPE_CHECKING:
    from jobboard_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)

TAG_KEY_PREFIX = "tag:"


def tag_key(tag: str) -> str:
    return f"{TAG_KEY_PREFIX}{tag}"


class TagIndex:
    """Track cache keys under tags and delete them per tag.

    Args:
        store: Store holding both the cached entries and the membership sets.
        ttl: Expiry in seconds refreshed on the membership set at every
            ``track``; ``0`` keeps sets until invalidated. A non-zero value
            must be at least the TTL of the entries tracked under the tag,
            otherwise live entries can outlive their membership record.
        warn_size: Log a warning once a set holds more than this many
            members; ``0`` disables the check.
    """

    def __init__(self, store: CacheStore, *, ttl: int = 0, warn_size: int = 0) -> None:
        self.store = store
        self.ttl = ttl
        self.warn_size = warn_size

    async def track(self, tag: str, member_key: str) -> None:
        """Record ``member_key`` under ``tag``; idempotent.

        The member does not need a live entry; a dangling member is removed
        harmlessly at the next invalidation.
        """
        key = tag_key(tag)
        await self.store.add_members(key, member_key)
        if self.ttl:
            await self.store.expire(key, self.ttl)
        if self.warn_size:
            size = await self.store.member_count(key)
            if size > self.warn_size:
                track_tag_oversized(tag)
                logger.warning(
                    "Tag membership set above warning size",
                    extra={"tag": tag, "size": size, "warn_size": self.warn_size},
                )

    async def invalidate(self, tag: str) -> int:
        """Delete every entry tracked under ``tag``, then the set itself.

        Members that the store reports as absent are skipped; any other store
        error propagates and leaves the set in place so a retry can finish
        the job.

        Returns:
            Number of entries actually removed. An unknown tag returns 0.
        """
        key = tag_key(tag)
        members = await self.store.members(key)

        removed = 0
        for member in sorted(members):
            try:
                if await self.store.delete(member):
                    removed += 1
            except CacheKeyAbsentError:
                logger.debug("Tagged key already absent", extra={"tag": tag, "key": member})

        await self.store.delete(key)
        track_tag_invalidation(tag, removed)
        logger.info(
            "Invalidated tag",
            extra={"tag": tag, "members": len(members), "removed": removed},
        )
        return removed

    async def size(self, tag: str) -> int:
        """Current number of members recorded under ``tag``."""
        return await self.store.member_count(tag_key(tag))
