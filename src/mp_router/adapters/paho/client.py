"""paho adapter – MqttTransport."""
from __future__ import annotations

import functools
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

import paho.mqtt.client as mqtt

from mp_router.adapters.paho.tls import BrokerAddress, new_tls_context, parse_broker
from mp_router.config.settings import ClientSettings
from mp_router.kernel.errors import ConnectionError, PublishError, SubscriptionError
from mp_router.kernel.messaging import InboundMessage, MessageCallback, QoS, Topic, Transport
from mp_router.observability.logging import get_logger

_log = get_logger(__name__)


def _report_failure(topic: Topic, future: Future[None]) -> None:
    if future.cancelled() or future.exception() is None:
        return
    _log.error("mqtt.callback_failed", topic=topic, error=repr(future.exception()))


def to_inbound(message: mqtt.MQTTMessage) -> InboundMessage:
    return InboundMessage(
        topic=message.topic,
        payload=bytes(message.payload),
        qos=message.qos,
        retained=bool(message.retain),
        duplicate=bool(message.dup),
        message_id=message.mid,
    )


class MqttTransport(Transport):
    """paho-mqtt backed :class:`Transport` with blocking connect/subscribe/publish.

    The paho network loop runs on its own thread and never runs handlers
    itself, so a handler may publish and wait for the acknowledgement.
    With ``order_matters=False`` deliveries go to a pool of
    ``settings.workers`` threads and may be processed out of order. With
    ``order_matters=True`` they go to a single worker thread, which keeps
    broker order.

    ``ping_timeout`` bounds every blocking wait (CONNACK, SUBACK,
    publish completion).
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        client: mqtt.Client | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._settings = settings
        self._address: BrokerAddress = parse_broker(settings.broker)
        self._client = client or self._build_client()
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1 if settings.order_matters else settings.workers,
            thread_name_prefix="mqtt-dispatch",
        )
        self._default_handler: MessageCallback | None = None
        self._connected = threading.Event()
        self._connect_reason: Any = None
        self._acks = threading.Condition()
        self._suback: dict[int, list[Any]] = {}
        self._abandoned: set[int] = set()

        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_subscribe = self._on_subscribe
        self._client.on_message = self._on_unmatched

    @property
    def client(self) -> mqtt.Client:
        return self._client

    def _build_client(self) -> mqtt.Client:
        s = self._settings
        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=s.client_id,
            clean_session=s.clean_session,
            transport="websockets" if self._address.websocket else "tcp",
        )
        if self._address.websocket and self._address.path:
            client.ws_set_options(path=self._address.path)
        if s.uses_tls or self._address.secure:
            client.tls_set_context(
                new_tls_context(
                    s.ca_cert_path,
                    s.client_cert_path,
                    s.client_key_path,
                    insecure=s.tls_insecure,
                )
            )
        client.connect_timeout = float(s.ping_timeout)
        return client

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def connect(self) -> None:
        broker = self._settings.broker
        self._connected.clear()
        try:
            self._client.connect(self._address.host, self._address.port, keepalive=self._settings.keep_alive)
        except (OSError, ValueError) as exc:
            raise ConnectionError(broker, f"Could not connect to '{broker}': {exc}", cause=exc) from exc

        self._client.loop_start()
        if not self._connected.wait(self._settings.ping_timeout) or self._connect_failed():
            self._client.disconnect()
            self._client.loop_stop()
            reason = self._connect_reason if self._connect_reason is not None else "timeout"
            raise ConnectionError(broker, f"Broker '{broker}' refused connection: {reason}")
        _log.info("mqtt.connected", broker=broker, client_id=self._settings.client_id)

    def disconnect(self) -> None:
        self._client.disconnect()
        self._client.loop_stop()
        self._executor.shutdown(wait=True)

    def subscribe(self, topic: Topic, qos: QoS, callback: MessageCallback) -> None:
        self._client.message_callback_add(topic, self._wrap(callback))
        result, mid = self._client.subscribe(topic, qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            self._client.message_callback_remove(topic)
            raise SubscriptionError(topic, f"Could not subscribe to '{topic}': {mqtt.error_string(result)}")

        with self._acks:
            acked = self._acks.wait_for(lambda: mid in self._suback, timeout=self._settings.ping_timeout)
            codes = self._suback.pop(mid, [])
            if not acked:
                self._abandoned.add(mid)
        if not acked or any(getattr(code, "is_failure", False) for code in codes):
            self._client.message_callback_remove(topic)
            raise SubscriptionError(topic, f"Broker rejected subscription to '{topic}'")

    def publish(self, topic: Topic, qos: QoS, retained: bool, payload: bytes) -> None:
        info = self._client.publish(topic, payload, qos=qos, retain=retained)
        try:
            info.wait_for_publish(timeout=self._settings.ping_timeout)
        except (RuntimeError, ValueError) as exc:
            raise PublishError(topic, f"Could not publish to '{topic}': {exc}", cause=exc) from exc
        if info.rc != mqtt.MQTT_ERR_SUCCESS or not info.is_published():
            raise PublishError(topic, f"Could not publish to '{topic}': {mqtt.error_string(info.rc)}")

    def set_default_handler(self, callback: MessageCallback) -> None:
        self._default_handler = callback

    # ------------------------------------------------------------------
    # paho callbacks
    # ------------------------------------------------------------------

    def _wrap(self, callback: MessageCallback) -> Any:
        def _on_message(client: mqtt.Client, userdata: Any, message: mqtt.MQTTMessage) -> None:  # noqa: ARG001
            self._deliver(callback, to_inbound(message))

        return _on_message

    def _deliver(self, callback: MessageCallback, message: InboundMessage) -> None:
        future = self._executor.submit(callback, message)
        future.add_done_callback(functools.partial(_report_failure, message.topic))

    def _on_unmatched(self, client: mqtt.Client, userdata: Any, message: mqtt.MQTTMessage) -> None:  # noqa: ARG002
        if self._default_handler is not None:
            self._deliver(self._default_handler, to_inbound(message))

    def _connect_failed(self) -> bool:
        return bool(getattr(self._connect_reason, "is_failure", False))

    def _on_connect(self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:  # noqa: ARG002
        self._connect_reason = reason_code
        self._connected.set()

    def _on_disconnect(self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:  # noqa: ARG002
        _log.warning("mqtt.disconnected", broker=self._settings.broker, reason=str(reason_code))

    def _on_subscribe(self, client: mqtt.Client, userdata: Any, mid: int, reason_codes: Any, properties: Any) -> None:  # noqa: ARG002
        with self._acks:
            if mid in self._abandoned:
                self._abandoned.discard(mid)
                return
            self._suback[mid] = list(reason_codes)
            self._acks.notify_all()


__all__ = ["MqttTransport", "to_inbound"]
