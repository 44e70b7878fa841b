"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   ├── ConfigError      (mp_router.config.validation)
    │   └── ContextKeyError
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        ├── TLSConfigError
        ├── SubscriptionError
        ├── PublishError
        ├── CacheError
        └── SerializationError
"""

from mp_router.kernel.errors.application import ApplicationError, ContextKeyError
from mp_router.kernel.errors.base import BaseError
from mp_router.kernel.errors.infrastructure import (
    CacheError,
    ConnectionError,
    InfrastructureError,
    PublishError,
    SerializationError,
    SubscriptionError,
    TLSConfigError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "CacheError",
    "ConnectionError",
    "ContextKeyError",
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "SubscriptionError",
    "TLSConfigError",
]
