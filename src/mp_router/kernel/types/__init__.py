"""Kernel types – identifiers."""
from mp_router.kernel.types.ids import SessionId, new_session_id

__all__ = ["SessionId", "new_session_id"]
