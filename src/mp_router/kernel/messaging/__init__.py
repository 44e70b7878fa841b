"""Kernel messaging – message primitives, transport and cache ports."""
from mp_router.kernel.messaging.idempotency import DedupCache
from mp_router.kernel.messaging.message import (
    InboundMessage,
    MessageCallback,
    QoS,
    Response,
    Topic,
    Transport,
)

__all__ = [
    "DedupCache",
    "InboundMessage",
    "MessageCallback",
    "QoS",
    "Response",
    "Topic",
    "Transport",
]
