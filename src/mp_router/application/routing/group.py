"""Application routing – Group."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

import structlog

from mp_router.application.pipeline import Handler
from mp_router.kernel.messaging import InboundMessage, MessageCallback, QoS
from mp_router.kernel.types import new_session_id
from mp_router.observability.logging import get_logger

if TYPE_CHECKING:
    from mp_router.application.routing.router import Router

_log = get_logger(__name__)


class Group:
    """A topic-prefix scope with its own middleware chain.

    A group starts with a copy of its parent's chain; ``use`` on either
    side afterwards does not leak into the other. ``listen`` snapshots
    the chain, so middleware added later only affects later
    subscriptions.

    Usage::

        api = router.group("devices/")
        api.use(auth)
        api.listen("+/status", 1, on_status)   # subscribes to devices/+/status
    """

    def __init__(self, router: Router, topic: str = "", handlers: Iterable[Handler] = ()) -> None:
        self._router = router
        self.topic = topic
        self._handlers: list[Handler] = list(handlers)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    def use(self, *handlers: Handler) -> "Group":
        """Append middleware (fluent API)."""
        self._handlers.extend(handlers)
        return self

    def group(self, topic: str) -> "Group":
        """Derive a nested group scoped under ``self.topic + topic``."""
        return Group(self._router, self.topic + topic, self._handlers)

    def listen(self, sub_topic: str, qos: QoS, *handlers: Handler) -> None:
        """Subscribe to ``self.topic + sub_topic`` and dispatch through the chain.

        Raises:
            SubscriptionError: the transport refused the subscription. It is not retried.
        """
        chain = (*self._handlers, *handlers)
        topic = self.topic + sub_topic
        self._router.transport.subscribe(topic, qos, self._dispatcher(chain))
        _log.info("mqtt.subscribed", topic=topic, qos=qos, handlers=len(chain))

    def _dispatcher(self, chain: Sequence[Handler]) -> MessageCallback:
        pool = self._router.pool

        def _on_message(message: InboundMessage) -> None:
            ctx = pool.acquire()
            session = new_session_id()
            try:
                ctx.reset()
                ctx.set_handlers(chain)
                ctx.message = message
                ctx.session_id = session
                with structlog.contextvars.bound_contextvars(session=session, topic=message.topic):
                    ctx.start()
            except Exception:  # noqa: BLE001
                _log.exception("mqtt.dispatch_failed", session=session, topic=message.topic)
            finally:
                pool.release(ctx)

        return _on_message


__all__ = ["Group"]
