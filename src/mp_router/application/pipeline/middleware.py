"""Application pipeline – Middleware base."""
from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from mp_router.application.pipeline.context import Context

# A handler receives the Context and returns nothing: flow control goes
# through ctx.next()/ctx.abort(), results through the Context.
Handler = Callable[["Context"], None]


class Middleware(abc.ABC):
    """Single node in the handler chain."""

    @abc.abstractmethod
    def __call__(self, ctx: Context) -> None: ...


__all__ = ["Handler", "Middleware"]
