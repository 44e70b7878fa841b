"""Application pipeline – ContextPool."""
from __future__ import annotations

import contextlib
import threading
from typing import Callable, Iterator

from mp_router.application.pipeline.context import Context


class ContextPool:
    """Thread-safe free-list of reusable :class:`Context` objects.

    ``acquire`` pops an idle instance (or builds one with *factory*);
    ``release`` resets it and pushes it back. An instance is owned by
    exactly one caller between the two calls.
    """

    def __init__(self, factory: Callable[[], Context], max_idle: int | None = None) -> None:
        self._factory = factory
        self._max_idle = max_idle
        self._idle: list[Context] = []
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        """Number of idle contexts waiting for reuse."""
        with self._lock:
            return len(self._idle)

    def acquire(self) -> Context:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return self._factory()

    def release(self, ctx: Context) -> None:
        ctx.reset()
        with self._lock:
            if any(c is ctx for c in self._idle):
                raise RuntimeError("Context released twice")
            if self._max_idle is not None and len(self._idle) >= self._max_idle:
                return
            self._idle.append(ctx)

    @contextlib.contextmanager
    def lease(self) -> Iterator[Context]:
        ctx = self.acquire()
        try:
            yield ctx
        finally:
            self.release(ctx)


__all__ = ["ContextPool"]
