"""Application pipeline – built-in middleware implementations.

The router installs them as ``DedupMiddleware`` (when enabled) →
``LoggerMiddleware`` → ``RecoveryMiddleware``, so recovery sits closest
to the user handlers and the logger's exit code runs after any panic
below it has been contained.
"""
from __future__ import annotations

import time
import traceback
from typing import Any

from mp_router.application.pipeline.context import Context
from mp_router.application.pipeline.middleware import Middleware
from mp_router.kernel.errors import InfrastructureError, SerializationError
from mp_router.kernel.messaging import DedupCache
from mp_router.kernel.time import Clock, SystemClock
from mp_router.observability.logging import get_logger

NO_RESPONSE = "none"


def _message_id(ctx: Context) -> str | None:
    """Return the ``mid`` field of a JSON object payload, if usable."""
    try:
        data = ctx.bind_json()
    except SerializationError:
        return None
    if not isinstance(data, dict):
        return None
    mid = data.get("mid")
    if isinstance(mid, bool):
        return None
    if isinstance(mid, int):
        return str(mid)
    if isinstance(mid, str) and mid:
        return mid
    return None


class DedupMiddleware(Middleware):
    """Drop redeliveries of a message whose ``mid`` was seen within *expiration* seconds.

    Messages without a usable ``mid`` are let through, and so are
    messages arriving while the cache is failing.
    """

    def __init__(self, cache: DedupCache, key_prefix: str, expiration: int, logger: Any = None) -> None:
        self._cache = cache
        self._key_prefix = key_prefix
        self._expiration = expiration
        self._log = logger or get_logger("mp_router.dedup")

    def __call__(self, ctx: Context) -> None:
        mid = _message_id(ctx)
        if mid is None:
            self._log.warning("dedup.mid_missing", session=ctx.session_id, topic=ctx.topic)
            ctx.next()
            return

        key = self._key_prefix + mid
        try:
            inserted = self._cache.set_if_absent(key, ctx.session_id.encode(), self._expiration)
        except InfrastructureError as exc:
            self._log.error(
                "dedup.cache_failed", session=ctx.session_id, topic=ctx.topic, key=key, error=exc.message
            )
            ctx.next()
            return

        if not inserted:
            self._log.info("dedup.duplicate", session=ctx.session_id, topic=ctx.topic, mid=mid)
            ctx.abort()
            return
        ctx.next()


class LoggerMiddleware(Middleware):
    """Write one record pairing the inbound message with the recorded response."""

    def __init__(self, logger: Any = None, clock: Clock | None = None) -> None:
        self._log = logger or get_logger("mp_router.access")
        self._clock = clock or SystemClock()

    def __call__(self, ctx: Context) -> None:
        started_at = self._clock.now()
        start = time.perf_counter()
        session = ctx.session_id
        topic = ctx.topic
        payload = ctx.message.text if ctx.message is not None else ""
        try:
            ctx.next()
        finally:
            fields: dict[str, Any] = {
                "session": session,
                "topic": topic,
                "payload": payload,
                "started_at": started_at.isoformat(),
                "finished_at": self._clock.now().isoformat(),
                "latency_ms": round((time.perf_counter() - start) * 1000, 3),
            }
            resp = ctx.response
            if resp is not None:
                fields["response_topic"] = resp.topic
                fields["response_payload"] = resp.text
            else:
                fields["response"] = NO_RESPONSE
            self._log.info("mqtt.dispatch", **fields)


class RecoveryMiddleware(Middleware):
    """Contain exceptions raised anywhere later in the chain."""

    def __init__(self, logger: Any = None) -> None:
        self._log = logger or get_logger("mp_router.recovery")

    def __call__(self, ctx: Context) -> None:
        try:
            ctx.next()
        except Exception as exc:  # noqa: BLE001
            self._log.error(
                "mqtt.panic_recovered",
                session=ctx.session_id,
                topic=ctx.topic,
                error=repr(exc),
                stack=traceback.format_exc(),
            )
            ctx.abort()


__all__ = ["NO_RESPONSE", "DedupMiddleware", "LoggerMiddleware", "RecoveryMiddleware"]
