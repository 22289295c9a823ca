"""Redis cache client with automatic retry and connection pooling.

``RedisCache`` implements the ``CacheStore`` contract on top of
``redis.asyncio``:

- connection pooling driven by ``RedisSettings``
- JSON serialization of every stored value
- explicit TTL semantics (default, no-expiry, finite)
- set operations backing the tag index
- retry with exponential backoff on connection/timeout errors; once attempts
  are exhausted the original redis exception is raised unchanged
- Prometheus hit/miss counters and operation durations with trace exemplars

Every physical key is namespaced with ``RedisSettings.key_prefix``; callers
only ever see logical keys.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar, cast

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from jobboard_service.core.settings import get_redis_settings
from jobboard_service.infra.cache.exceptions import CacheNotConfiguredError
from jobboard_service.infra.logging.lazy import get_lazy_logger
from jobboard_service.infra.metrics.tracking import track_cache_lookup, track_cache_operation
from jobboard_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from jobboard_service.core.settings.redis import RedisSettings

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (RedisConnectionError, RedisTimeoutError)


class RedisCache:
    """Redis-backed ``CacheStore``.

    Example:
        cache = RedisCache(get_redis_settings())
        await cache.connect()

        await cache.set("jobs|public|detail|42", {"id": 42}, ttl=60)
        value = await cache.get("jobs|public|detail|42")

        await cache.disconnect()

    Tests may pass a ready client (``RedisCache(settings, client=fake)``)
    instead of calling ``connect()``.
    """

    def __init__(
        self,
        settings: RedisSettings | None = None,
        *,
        client: Redis | None = None,
    ) -> None:
        self.settings = settings or get_redis_settings()
        self.key_prefix = self.settings.key_prefix
        self.default_ttl = self.settings.default_ttl
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = client

    async def connect(self) -> None:
        """Create the connection pool and verify it with PING.

        Raises:
            RedisConnectionError: If Redis cannot be reached.
        """
        logger.info(
            "Connecting to Redis",
            extra={
                "host": self.settings.host,
                "port": self.settings.port,
                "db": self.settings.db,
                "max_connections": self.settings.max_connections,
            },
        )

        try:
            self._pool = ConnectionPool.from_url(
                self.settings.url,
                **self.settings.connection_pool_kwargs(),
            )
            self._client = Redis(connection_pool=self._pool)
            await cast("Awaitable[bool]", self._client.ping())
        except Exception as e:
            logger.exception("Failed to connect to Redis", extra={"error": str(e)})
            await self.disconnect()
            raise

        logger.info("Redis connection established successfully")

    async def disconnect(self) -> None:
        """Close the client and pool."""
        if self._client is not None:
            await cast("Any", self._client).aclose()
            self._client = None

        if self._pool is not None:
            await cast("Any", self._pool).aclose()
            self._pool = None

        logger.info("Redis connection closed")

    @property
    def client(self) -> Redis:
        if self._client is None:
            msg = "Redis client not connected. Call connect() first."
            raise CacheNotConfiguredError(msg)
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def physical_key(self, key: str) -> str:
        """Namespaced Redis key for a logical cache key."""
        return f"{self.key_prefix}{key}"

    def resolve_ttl(self, ttl: int | None) -> int:
        """Map a caller TTL onto the TTL actually written (0 = no expiry).

        Raises:
            ValueError: If ``ttl`` is negative.
        """
        if ttl is None:
            return self.default_ttl
        if ttl < 0:
            msg = f"Cache TTL must be >= 0 seconds, got {ttl}"
            raise ValueError(msg)
        return ttl

    async def _execute(self, operation: str, command: Callable[[], Awaitable[T]]) -> T:
        """Run one Redis command with retries and duration tracking."""
        attempt = retry(
            max_attempts=self.settings.max_retries,
            initial_delay=self.settings.retry_delay,
            max_delay=2.0,
            exceptions=TRANSIENT_ERRORS,
            reraise=True,
            operation=f"redis.{operation}",
        )(command)

        start_time = time.perf_counter()
        try:
            return await attempt()
        finally:
            track_cache_operation(operation, time.perf_counter() - start_time)

    async def get(self, key: str) -> Any | None:
        """Get a value, or ``None`` on a miss.

        Raises:
            RedisConnectionError: If Redis is unreachable after retries.
        """
        try:
            raw = await self._execute("get", lambda: self.client.get(self.physical_key(key)))
        except Exception as e:
            logger.exception("Failed to get value from cache", extra={"key": key, "error": str(e)})
            raise

        track_cache_lookup("redis", hit=raw is not None)
        if raw is None:
            _lazy.debug(lambda: f"Cache miss for {key}")
            return None

        _lazy.debug(lambda: f"Cache hit for {key} ({len(raw)} bytes)")
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return raw

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a JSON-encoded value.

        Args:
            key: Logical cache key.
            value: JSON-serializable payload.
            ttl: ``None`` for the configured default, ``0`` for no expiry,
                otherwise seconds.

        Raises:
            ValueError: If ``ttl`` is negative.
            TypeError: If ``value`` is not JSON-serializable.
        """
        effective_ttl = self.resolve_ttl(ttl)
        payload = json.dumps(value)
        expiry = effective_ttl or None

        try:
            result = await self._execute(
                "set",
                lambda: self.client.set(self.physical_key(key), payload, ex=expiry),
            )
        except Exception as e:
            logger.exception("Failed to set value in cache", extra={"key": key, "error": str(e)})
            raise
        return bool(result)

    async def delete(self, key: str) -> bool:
        """Delete a key; returns whether anything was removed."""
        try:
            result = await self._execute(
                "delete", lambda: self.client.delete(self.physical_key(key))
            )
        except Exception as e:
            logger.exception(
                "Failed to delete value from cache", extra={"key": key, "error": str(e)}
            )
            raise
        return bool(result)

    async def add_members(self, key: str, *members: str) -> int:
        if not members:
            return 0
        added = await self._execute(
            "sadd",
            lambda: cast("Awaitable[int]", self.client.sadd(self.physical_key(key), *members)),
        )
        return int(added or 0)

    async def members(self, key: str) -> set[str]:
        result = await self._execute(
            "smembers",
            lambda: cast("Awaitable[set[str]]", self.client.smembers(self.physical_key(key))),
        )
        return set(result or ())

    async def member_count(self, key: str) -> int:
        result = await self._execute(
            "scard",
            lambda: cast("Awaitable[int]", self.client.scard(self.physical_key(key))),
        )
        return int(result or 0)

    async def expire(self, key: str, ttl: int) -> bool:
        result = await self._execute(
            "expire", lambda: self.client.expire(self.physical_key(key), ttl)
        )
        return bool(result)

    async def health_check(self) -> bool:
        """Check if Redis is healthy and responsive."""
        try:
            await cast("Awaitable[bool]", self.client.ping())
        except Exception as e:
            logger.warning("Redis health check failed", extra={"error": str(e)})
            return False
        return True
