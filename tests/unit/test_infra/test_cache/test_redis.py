"""Unit tests for the Redis cache store."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from jobboard_service.core.settings.redis import RedisSettings
from jobboard_service.infra.cache.exceptions import CacheNotConfiguredError
from jobboard_service.infra.cache.redis import RedisCache


@pytest.fixture
def settings() -> RedisSettings:
    return RedisSettings(key_prefix="test:", default_ttl=60, max_retries=2, retry_delay=0.0)


@pytest.fixture
def redis_client() -> AsyncMock:
    client = AsyncMock()
    client.get.return_value = None
    client.set.return_value = True
    client.delete.return_value = 1
    client.sadd.return_value = 1
    client.smembers.return_value = set()
    client.scard.return_value = 0
    client.expire.return_value = True
    client.ping.return_value = True
    return client


@pytest.fixture
def cache(settings: RedisSettings, redis_client: AsyncMock) -> RedisCache:
    return RedisCache(settings, client=redis_client)


@pytest.mark.unit
class TestRedisCacheValues:
    """Test suite for get/set/delete."""

    async def test_get_miss_returns_none(self, cache: RedisCache, redis_client: AsyncMock):
        assert await cache.get("jobs|public|detail|1") is None
        redis_client.get.assert_awaited_once_with("test:jobs|public|detail|1")

    async def test_get_hit_decodes_json(self, cache: RedisCache, redis_client: AsyncMock):
        redis_client.get.return_value = json.dumps({"id": 1, "title": "Engineer"})

        assert await cache.get("k") == {"id": 1, "title": "Engineer"}

    async def test_get_returns_non_json_values_unchanged(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        redis_client.get.return_value = "plain text"

        assert await cache.get("k") == "plain text"

    async def test_set_without_ttl_uses_default(self, cache: RedisCache, redis_client: AsyncMock):
        assert await cache.set("k", {"a": 1}) is True

        redis_client.set.assert_awaited_once_with("test:k", json.dumps({"a": 1}), ex=60)

    async def test_set_with_zero_ttl_never_expires(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        await cache.set("k", [1, 2], ttl=0)

        redis_client.set.assert_awaited_once_with("test:k", "[1, 2]", ex=None)

    async def test_set_with_explicit_ttl(self, cache: RedisCache, redis_client: AsyncMock):
        await cache.set("k", "v", ttl=5)

        redis_client.set.assert_awaited_once_with("test:k", '"v"', ex=5)

    async def test_set_rejects_negative_ttl(self, cache: RedisCache, redis_client: AsyncMock):
        with pytest.raises(ValueError, match="TTL"):
            await cache.set("k", "v", ttl=-1)

        redis_client.set.assert_not_awaited()

    async def test_set_rejects_unserializable_values(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        with pytest.raises(TypeError):
            await cache.set("k", object())

        redis_client.set.assert_not_awaited()

    async def test_delete_reports_whether_key_existed(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        assert await cache.delete("k") is True

        redis_client.delete.return_value = 0
        assert await cache.delete("k") is False

    def test_resolve_ttl(self, cache: RedisCache):
        assert cache.resolve_ttl(None) == 60
        assert cache.resolve_ttl(0) == 0
        assert cache.resolve_ttl(30) == 30


@pytest.mark.unit
class TestRedisCacheSets:
    """Test suite for the set operations backing the tag index."""

    async def test_add_members(self, cache: RedisCache, redis_client: AsyncMock):
        redis_client.sadd.return_value = 2

        assert await cache.add_members("tag:t", "a", "b") == 2
        redis_client.sadd.assert_awaited_once_with("test:tag:t", "a", "b")

    async def test_add_no_members_skips_redis(self, cache: RedisCache, redis_client: AsyncMock):
        assert await cache.add_members("tag:t") == 0
        redis_client.sadd.assert_not_awaited()

    async def test_members(self, cache: RedisCache, redis_client: AsyncMock):
        redis_client.smembers.return_value = {"a", "b"}

        assert await cache.members("tag:t") == {"a", "b"}

    async def test_member_count(self, cache: RedisCache, redis_client: AsyncMock):
        redis_client.scard.return_value = 3

        assert await cache.member_count("tag:t") == 3

    async def test_expire(self, cache: RedisCache, redis_client: AsyncMock):
        assert await cache.expire("tag:t", 120) is True
        redis_client.expire.assert_awaited_once_with("test:tag:t", 120)


@pytest.mark.unit
class TestRedisCacheFailures:
    """Test suite for retries and error propagation."""

    async def test_transient_error_is_retried(self, cache: RedisCache, redis_client: AsyncMock):
        redis_client.get.side_effect = [RedisConnectionError("reset"), '"value"']

        assert await cache.get("k") == "value"
        assert redis_client.get.await_count == 2

    async def test_exhausted_retries_raise_the_redis_error(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        redis_client.get.side_effect = RedisConnectionError("down")

        with pytest.raises(RedisConnectionError):
            await cache.get("k")
        assert redis_client.get.await_count == 2

    async def test_non_transient_errors_are_not_retried(
        self, cache: RedisCache, redis_client: AsyncMock
    ):
        redis_client.set.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(ResponseError):
            await cache.set("k", "v")
        assert redis_client.set.await_count == 1

    async def test_unconnected_cache_raises(self, settings: RedisSettings):
        cache = RedisCache(settings)

        assert cache.is_connected is False
        with pytest.raises(CacheNotConfiguredError):
            await cache.get("k")

    async def test_health_check(self, cache: RedisCache, redis_client: AsyncMock):
        assert await cache.health_check() is True

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert await cache.health_check() is False

    async def test_physical_key_is_prefixed(self, cache: RedisCache):
        assert cache.physical_key("jobs|public|list") == "test:jobs|public|list"
