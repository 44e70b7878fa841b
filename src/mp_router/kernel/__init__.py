"""Kernel – transport-agnostic building blocks."""

from mp_router.kernel.errors import (
    ApplicationError,
    BaseError,
    ContextKeyError,
    InfrastructureError,
    PublishError,
    SerializationError,
    SubscriptionError,
)
from mp_router.kernel.messaging import DedupCache, InboundMessage, Response, Transport

__all__ = [
    "ApplicationError",
    "BaseError",
    "ContextKeyError",
    "DedupCache",
    "InboundMessage",
    "InfrastructureError",
    "PublishError",
    "Response",
    "SerializationError",
    "SubscriptionError",
    "Transport",
]
