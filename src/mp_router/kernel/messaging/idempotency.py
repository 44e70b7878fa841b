"""Kernel messaging – dedup cache port."""
from __future__ import annotations

import abc


class DedupCache(abc.ABC):
    """Port: key/value store used for idempotency bookkeeping."""

    @abc.abstractmethod
    def get(self, key: str) -> bytes | None: ...

    @abc.abstractmethod
    def set_if_absent(self, key: str, value: bytes, ttl: int) -> bool:
        """Atomically store *value* under *key* unless the key exists.

        Returns ``True`` when the value was inserted, ``False`` when the
        key was already present. The key expires after *ttl* seconds.
        """


__all__ = ["DedupCache"]
