"""Test doubles and request helpers shared across the suite."""

from __future__ import annotations

from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError

RECRUITER_ID = "recruiter-1"
OTHER_RECRUITER_ID = "recruiter-2"
CANDIDATE_ID = "candidate-1"


class InMemoryCacheStore:
    """Dict-backed ``CacheStore`` with the same TTL rules as ``RedisCache``.

    ``fail = True`` makes every operation raise a redis ``ConnectionError``,
    which is what ``RedisCache`` raises once its retries are exhausted.
    Expiry is recorded but never enforced.
    """

    def __init__(self, default_ttl: int = 60) -> None:
        self.default_ttl = default_ttl
        self.values: dict[str, Any] = {}
        self.sets: dict[str, set[str]] = {}
        self.ttls: dict[str, int] = {}
        self.fail = False
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if self.fail:
            msg = "Connection refused"
            raise RedisConnectionError(msg)

    async def get(self, key: str) -> Any | None:
        self._check("get", key)
        return self.values.get(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self._check("set", key)
        if ttl is not None and ttl < 0:
            msg = f"Cache TTL must be >= 0 seconds, got {ttl}"
            raise ValueError(msg)
        self.values[key] = value
        self.ttls[key] = self.default_ttl if ttl is None else ttl
        return True

    async def delete(self, key: str) -> bool:
        self._check("delete", key)
        existed = key in self.values or key in self.sets
        self.values.pop(key, None)
        self.sets.pop(key, None)
        self.ttls.pop(key, None)
        return existed

    async def add_members(self, key: str, *members: str) -> int:
        self._check("add_members", key)
        current = self.sets.setdefault(key, set())
        before = len(current)
        current.update(members)
        return len(current) - before

    async def members(self, key: str) -> set[str]:
        self._check("members", key)
        return set(self.sets.get(key, set()))

    async def member_count(self, key: str) -> int:
        self._check("member_count", key)
        return len(self.sets.get(key, set()))

    async def expire(self, key: str, ttl: int) -> bool:
        self._check("expire", key)
        if key not in self.values and key not in self.sets:
            return False
        self.ttls[key] = ttl
        return True

    async def health_check(self) -> bool:
        return not self.fail

    def keys_with_prefix(self, prefix: str) -> list[str]:
        return sorted(key for key in self.values if key.startswith(prefix))

    def operations(self, name: str) -> list[str]:
        return [key for operation, key in self.calls if operation == name]


def as_user(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


def posting_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Senior Python Developer",
        "description": "Build async services with FastAPI and Redis.",
        "location": "Berlin",
        "employment_type": "full-time",
        "work_location_type": "hybrid",
        "salary_min": 60000,
        "salary_max": 80000,
        "salary_currency": "eur",
        "skills": ["Python", "FastAPI", "python"],
    }
    payload.update(overrides)
    return payload
