"""Infrastructure errors: broker, cache and payload failures."""

from __future__ import annotations

from typing import Any

from mp_router.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a handler bug."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """Failed to connect to an external resource (broker, cache, …)."""

    default_code = "connection_error"

    def __init__(
        self,
        resource: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource


class TLSConfigError(InfrastructureError):
    """CA bundle or client key pair could not be loaded."""

    default_code = "tls_config_error"


class SubscriptionError(InfrastructureError):
    """The broker rejected (or never acknowledged) a subscription."""

    default_code = "subscription_error"

    def __init__(self, topic: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Could not subscribe to '{topic}'", **kwargs)
        self.topic = topic


class PublishError(InfrastructureError):
    """A publish did not complete."""

    default_code = "publish_error"

    def __init__(self, topic: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Could not publish to '{topic}'", **kwargs)
        self.topic = topic


class CacheError(InfrastructureError):
    """The dedup cache backend failed."""

    default_code = "cache_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "CacheError",
    "ConnectionError",
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "SubscriptionError",
    "TLSConfigError",
]
