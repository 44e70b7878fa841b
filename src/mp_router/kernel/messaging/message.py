"""Kernel messaging – message primitives and the transport port."""
from __future__ import annotations

import abc
import dataclasses
from typing import Callable, TypeAlias

Topic: TypeAlias = str
QoS: TypeAlias = int


@dataclasses.dataclass(frozen=True)
class InboundMessage:
    """A message delivered by the transport for one subscription."""

    topic: Topic
    payload: bytes = b""
    qos: QoS = 0
    retained: bool = False
    duplicate: bool = False
    message_id: int = 0

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")


@dataclasses.dataclass(frozen=True)
class Response:
    """Record of a message published by a handler while answering a dispatch."""

    topic: Topic
    qos: QoS
    retained: bool
    payload: bytes

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")


MessageCallback = Callable[[InboundMessage], None]


class Transport(abc.ABC):
    """Port: minimal publish/subscribe surface the router depends on.

    Every method blocks until the broker has acknowledged the operation
    (or the adapter gave up) and raises instead of returning an error.
    """

    @abc.abstractmethod
    def connect(self) -> None: ...

    @abc.abstractmethod
    def disconnect(self) -> None: ...

    @abc.abstractmethod
    def subscribe(self, topic: Topic, qos: QoS, callback: MessageCallback) -> None: ...

    @abc.abstractmethod
    def publish(self, topic: Topic, qos: QoS, retained: bool, payload: bytes) -> None: ...

    @abc.abstractmethod
    def set_default_handler(self, callback: MessageCallback) -> None:
        """Install the callback for messages that match no subscription."""


__all__ = [
    "InboundMessage",
    "MessageCallback",
    "QoS",
    "Response",
    "Topic",
    "Transport",
]
