"""Echo service: answers every ``echo/<device>`` request on ``echo/<device>/reply``.

Run with::

    export MP_ROUTER_NAME=echo MP_ROUTER_DEDUP=true
    export MQTT_BROKER=tcp://localhost:1883 MQTT_CLIENT_ID=echo-1
    export REDIS_URL=redis://localhost:6379/0
    python docs/examples/echo_service.py

Publish ``{"mid": "m-1", "text": "hi"}`` to ``echo/lamp`` and watch
``echo/lamp/reply``. Sending the same ``mid`` twice within
``MP_ROUTER_EXPIRATION`` seconds yields a single reply.
"""
from __future__ import annotations

import os
import signal
import threading

from mp_router.adapters.redis import RedisDedupCache
from mp_router.application import Context, Router
from mp_router.config import DotenvSettingsLoader, RouterSettings
from mp_router.observability import JsonLoggerFactory


def require_text(ctx: Context) -> None:
    body = ctx.bind_json()
    if not isinstance(body, dict) or not body.get("text"):
        ctx.abort()
        return
    ctx.set("text", body["text"])
    ctx.next()


def echo(ctx: Context) -> None:
    ctx.respond_json(f"{ctx.topic}/reply", 1, False, {"echo": ctx.must_get("text"), "session": ctx.session_id})


def main() -> None:
    JsonLoggerFactory.configure()
    settings = DotenvSettingsLoader().load(RouterSettings)
    cache = RedisDedupCache(os.environ.get("REDIS_URL", "redis://localhost:6379/0")) if settings.dedup else None

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    with Router(settings, cache=cache) as router:
        router.group("echo/").use(require_text).listen("+", 1, echo)
        stop.wait()


if __name__ == "__main__":
    main()
