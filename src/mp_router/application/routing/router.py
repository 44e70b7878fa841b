"""Application routing – Router."""
from __future__ import annotations

from typing import Any

from mp_router.application.pipeline import (
    Context,
    ContextPool,
    DedupMiddleware,
    Handler,
    LoggerMiddleware,
    RecoveryMiddleware,
)
from mp_router.application.routing.group import Group
from mp_router.config.settings import RouterSettings
from mp_router.config.validation import MissingRequiredSettingError
from mp_router.kernel.messaging import DedupCache, InboundMessage, MessageCallback, QoS, Topic, Transport
from mp_router.observability.logging import get_logger

_log = get_logger(__name__)


class Router:
    """Composition root: transport handle, root group, context pool, dedup config.

    The root chain is seeded with :class:`DedupMiddleware` (when
    ``settings.dedup``), :class:`LoggerMiddleware` and
    :class:`RecoveryMiddleware`, in that order. The transport is connected
    before the constructor returns; any validation or connection failure
    raises and no router is built.

    Usage::

        router = Router(RouterSettings(name="billing", client=client_settings))
        router.group("billing/").listen("invoice", 1, handle_invoice)

    Args:
        settings: Router options.
        transport: Pre-built transport; defaults to an
            :class:`~mp_router.adapters.paho.MqttTransport` built from
            ``settings.client``.
        cache: Dedup cache, required when ``settings.dedup`` is set.
        default_handler: Called for messages matching no subscription; an
            exception it raises is logged as ``mqtt.default_handler_failed``.
    """

    def __init__(
        self,
        settings: RouterSettings,
        *,
        transport: Transport | None = None,
        cache: DedupCache | None = None,
        default_handler: MessageCallback | None = None,
    ) -> None:
        if settings.dedup and cache is None:
            raise MissingRequiredSettingError("cache")
        if transport is None:
            if settings.client is None:
                raise MissingRequiredSettingError("client")
            from mp_router.adapters.paho import MqttTransport

            transport = MqttTransport(settings.client)

        self._settings = settings
        self._transport = transport
        self._cache = cache
        self._key_prefix = settings.key_prefix
        self._default_handler = default_handler or self._handler_not_found
        self._pool = ContextPool(self._allocate_context)
        self._group = Group(self)

        if settings.dedup and cache is not None:
            self.use(DedupMiddleware(cache, self._key_prefix, settings.expiration))
        self.use(LoggerMiddleware(), RecoveryMiddleware())

        self._transport.set_default_handler(self._on_unmatched)
        self._transport.connect()
        _log.info("router.connected", name=settings.name, dedup=settings.dedup)

    @property
    def settings(self) -> RouterSettings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def pool(self) -> ContextPool:
        return self._pool

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._group.handlers

    def group(self, topic: str) -> Group:
        """Return a new group under *topic* seeded with a copy of the root chain."""
        return self._group.group(topic)

    def use(self, *handlers: Handler) -> "Router":
        """Append to the root chain; only groups created afterwards see it."""
        self._group.use(*handlers)
        return self

    def publish(self, topic: Topic, qos: QoS, retained: bool, payload: bytes | str) -> None:
        data = payload.encode() if isinstance(payload, str) else payload
        self._transport.publish(topic, qos, retained, data)

    def close(self) -> None:
        self._transport.disconnect()
        _log.info("router.closed", name=self._settings.name)

    def __enter__(self) -> "Router":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def _allocate_context(self) -> Context:
        return Context(self)

    def _on_unmatched(self, message: InboundMessage) -> None:
        try:
            self._default_handler(message)
        except Exception:  # noqa: BLE001
            _log.exception("mqtt.default_handler_failed", topic=message.topic)

    def _handler_not_found(self, message: InboundMessage) -> None:
        _log.info("mqtt.handler_not_found", topic=message.topic)


__all__ = ["Router"]
