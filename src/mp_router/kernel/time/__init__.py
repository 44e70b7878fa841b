"""Kernel time – Clock port and implementations."""
from mp_router.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
