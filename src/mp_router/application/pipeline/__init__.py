"""Application pipeline – Context, handler chain, pool and built-in middlewares."""
from mp_router.application.pipeline.context import ABORT_INDEX, Context
from mp_router.application.pipeline.middleware import Handler, Middleware
from mp_router.application.pipeline.middlewares import (
    NO_RESPONSE,
    DedupMiddleware,
    LoggerMiddleware,
    RecoveryMiddleware,
)
from mp_router.application.pipeline.pool import ContextPool

__all__ = [
    "ABORT_INDEX",
    "Context",
    "ContextPool",
    "DedupMiddleware",
    "Handler",
    "LoggerMiddleware",
    "Middleware",
    "NO_RESPONSE",
    "RecoveryMiddleware",
]
