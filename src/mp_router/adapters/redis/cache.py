"""Redis adapter – RedisDedupCache."""
from __future__ import annotations

from typing import Any

import redis

from mp_router.kernel.errors import CacheError
from mp_router.kernel.messaging import DedupCache


class RedisDedupCache(DedupCache):
    """Redis-backed dedup cache; ``set_if_absent`` is a single ``SET NX EX``."""

    def __init__(self, url: str | None = None, *, client: Any = None, **kwargs: Any) -> None:
        if client is None:
            if url is None:
                raise ValueError("RedisDedupCache needs a url or a client")
            client = redis.Redis.from_url(url, **kwargs)
        self._client = client

    def get(self, key: str) -> bytes | None:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise CacheError(f"Redis GET {key!r} failed", cause=exc) from exc

    def set_if_absent(self, key: str, value: bytes, ttl: int) -> bool:
        try:
            return bool(self._client.set(key, value, nx=True, ex=ttl))
        except redis.RedisError as exc:
            raise CacheError(f"Redis SET NX {key!r} failed", cause=exc) from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise CacheError(f"Redis DEL {key!r} failed", cause=exc) from exc

    def close(self) -> None:
        self._client.close()


__all__ = ["RedisDedupCache"]
