"""Application-layer errors: configuration and handler-facing misuse."""

from __future__ import annotations

from mp_router.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class ContextKeyError(ApplicationError):
    """``Context.must_get`` was asked for a key that was never set."""

    default_code = "context_key_missing"

    def __init__(self, key: str) -> None:
        super().__init__(f'Key "{key}" does not exist', detail={"key": key})
        self.key = key


__all__ = ["ApplicationError", "ContextKeyError"]
