"""Observability – structured logging helpers."""
from mp_router.observability.logging.factory import JsonLoggerFactory
from mp_router.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
