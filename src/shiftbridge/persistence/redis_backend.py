"""Redis cache backend implementing ICacheBackend."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import redis

from shiftbridge.core.exceptions import CacheError

T = TypeVar("T")


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis.

    Keys are namespaced with ``prefix`` so several deployments can share
    one Redis database.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 prefix: str = "shiftbridge:") -> None:
        self._prefix = prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _call(self, op: str, key: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            raise CacheError(f"Redis {op} failed for key={key!r}: {exc}") from exc

    def get(self, key: str) -> str | None:
        return self._call("GET", key, lambda: self._client.get(self._key(key)))

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._call("SETEX", key, lambda: self._client.setex(self._key(key), ttl, value))

    def delete(self, key: str) -> None:
        self._call("DELETE", key, lambda: self._client.delete(self._key(key)))
