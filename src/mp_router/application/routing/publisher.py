"""Application routing – JsonPublisher (publish-only client)."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from mp_router.kernel.errors import PublishError, SerializationError
from mp_router.kernel.messaging import QoS, Topic, Transport
from mp_router.observability.logging import get_logger

if TYPE_CHECKING:
    from mp_router.config.settings import ClientSettings

_log = get_logger(__name__)


class JsonPublisher:
    """Send JSON messages without running a router (jobs, scripts, CLIs)."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @classmethod
    def connect(cls, settings: ClientSettings) -> "JsonPublisher":
        """Build and connect an MQTT transport from *settings*."""
        from mp_router.adapters.paho import MqttTransport

        transport = MqttTransport(settings)
        transport.connect()
        return cls(transport)

    @property
    def transport(self) -> Transport:
        return self._transport

    def pub(self, topic: Topic, qos: QoS, retained: bool, data: Any) -> None:
        try:
            payload = json.dumps(data, ensure_ascii=False).encode()
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode message for '{topic}' as JSON",
                payload_type=type(data).__name__,
                cause=exc,
            ) from exc
        try:
            self._transport.publish(topic, qos, retained, payload)
        except PublishError as exc:
            _log.error("mqtt.publish_failed", topic=topic, error=exc.message)
            raise
        _log.info("mqtt.published", topic=topic, payload=payload.decode())

    def close(self) -> None:
        self._transport.disconnect()


__all__ = ["JsonPublisher"]
