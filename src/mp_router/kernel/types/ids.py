"""String-based identifier value objects."""

from __future__ import annotations

import dataclasses
import secrets
import string
import time

_LETTERS = string.ascii_letters
_SESSION_LETTERS = 10


@dataclasses.dataclass(frozen=True, slots=True)
class SessionId:
    """Per-dispatch correlation id: 10 random letters + Unix seconds.

    Examples::

        sid = SessionId.generate()   # e.g. "qWeRtYuIoP1760000000"
        sid = SessionId("abc")       # direct construction
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("SessionId must not be empty")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "SessionId":
        letters = "".join(secrets.choice(_LETTERS) for _ in range(_SESSION_LETTERS))
        return cls(f"{letters}{int(time.time())}")


def new_session_id() -> str:
    """Shorthand for ``str(SessionId.generate())``."""
    return SessionId.generate().value


__all__ = ["SessionId", "new_session_id"]
