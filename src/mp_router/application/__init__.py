"""Application – dispatch pipeline and routing."""

from mp_router.application.pipeline import (
    Context,
    ContextPool,
    DedupMiddleware,
    Handler,
    LoggerMiddleware,
    Middleware,
    RecoveryMiddleware,
)
from mp_router.application.routing import Group, JsonPublisher, Router

__all__ = [
    "Context",
    "ContextPool",
    "DedupMiddleware",
    "Group",
    "Handler",
    "JsonPublisher",
    "LoggerMiddleware",
    "Middleware",
    "RecoveryMiddleware",
    "Router",
]
