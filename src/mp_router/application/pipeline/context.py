"""Application pipeline – per-message execution Context."""
from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, Sequence, TypeVar

from mp_router.application.pipeline.middleware import Handler
from mp_router.kernel.errors import ContextKeyError, SerializationError
from mp_router.kernel.messaging import InboundMessage, QoS, Response, Topic

if TYPE_CHECKING:
    from mp_router.application.routing.router import Router

T = TypeVar("T")

# Larger than any chain can be; once the cursor is here every bound check fails.
ABORT_INDEX = sys.maxsize // 2


class Context:
    """State for one in-flight message: handler chain, cursor, key/value bag.

    The chain runs "onion" style. :meth:`start` calls the first handler;
    a handler that wants the rest of the chain to run calls :meth:`next`,
    which runs every remaining handler in turn before returning, so code
    after ``ctx.next()`` executes on the way back out. :meth:`abort`
    moves the cursor past the end and nothing further is invoked.

    Well-known values (the inbound message, the session id and the
    recorded response) are typed attributes; anything else a middleware
    wants to hand downstream goes into the bag via :meth:`set`.

    Instances are pooled and reused. They must never be kept after the
    handler that received them returns.
    """

    def __init__(self, router: Router | None = None) -> None:
        self._router = router
        self._handlers: Sequence[Handler] = ()
        self._index = -1
        self._keys: dict[str, Any] | None = None
        self.message: InboundMessage | None = None
        self.session_id: str = ""
        self.response: Response | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self._handlers = ()
        self._index = -1
        self._keys = None
        self.message = None
        self.session_id = ""
        self.response = None

    def set_handlers(self, handlers: Sequence[Handler]) -> None:
        self._handlers = handlers

    @property
    def router(self) -> Router | None:
        return self._router

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_aborted(self) -> bool:
        return self._index >= ABORT_INDEX

    # ------------------------------------------------------------------
    # Flow control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Invoke the first handler; it decides whether to call :meth:`next`."""
        self._index = 0
        if self._index < len(self._handlers):
            self._handlers[self._index](self)

    def next(self) -> None:
        """Run the remaining handlers. A no-op when none are left."""
        self._index += 1
        while self._index < len(self._handlers):
            self._handlers[self._index](self)
            self._index += 1

    def abort(self) -> None:
        self._index = ABORT_INDEX

    # ------------------------------------------------------------------
    # Key/value bag
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        if self._keys is None:
            self._keys = {}
        self._keys[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        if self._keys is None:
            return default
        return self._keys.get(key, default)

    def must_get(self, key: str) -> Any:
        if self._keys is None or key not in self._keys:
            raise ContextKeyError(key)
        return self._keys[key]

    @property
    def keys(self) -> dict[str, Any]:
        return dict(self._keys or {})

    # ------------------------------------------------------------------
    # Inbound message accessors
    # ------------------------------------------------------------------

    @property
    def topic(self) -> Topic:
        return self.message.topic if self.message is not None else ""

    @property
    def qos(self) -> QoS:
        return self.message.qos if self.message is not None else 0

    @property
    def payload(self) -> bytes:
        return self.message.payload if self.message is not None else b""

    def bind_json(self, target: type[T] | None = None) -> Any:
        """Decode the payload as JSON, optionally into *target*.

        ``target=None`` returns the decoded value. A class exposing
        ``model_validate`` (pydantic models) is validated through it; any
        other class is called with the decoded object's keys as keyword
        arguments.

        Raises:
            SerializationError: the payload is not JSON or does not fit *target*.
        """
        try:
            data = json.loads(self.payload)
        except ValueError as exc:
            raise SerializationError(
                f"Payload on '{self.topic}' is not valid JSON",
                payload_type="json",
                cause=exc,
            ) from exc
        if target is None:
            return data

        validate = getattr(target, "model_validate", None)
        try:
            if callable(validate):
                return validate(data)
            if isinstance(data, dict):
                return target(**data)
            return target(data)  # type: ignore[call-arg]
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot bind payload to {target.__name__}",
                payload_type=target.__name__,
                cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Responding
    # ------------------------------------------------------------------

    def respond(self, topic: Topic, qos: QoS, retained: bool, payload: bytes | str) -> None:
        """Publish *payload* and record it as this dispatch's :class:`Response`.

        Only the last successful call is visible to the logger.

        Raises:
            PublishError: the transport did not complete the publish; nothing is recorded.
        """
        data = payload.encode() if isinstance(payload, str) else bytes(payload)
        if self._router is None:
            raise RuntimeError("Context is not attached to a Router")
        self._router.transport.publish(topic, qos, retained, data)
        self.response = Response(topic=topic, qos=qos, retained=retained, payload=data)

    def respond_json(self, topic: Topic, qos: QoS, retained: bool, data: Any) -> None:
        try:
            encoded = json.dumps(data, ensure_ascii=False).encode()
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode response for '{topic}' as JSON",
                payload_type=type(data).__name__,
                cause=exc,
            ) from exc
        self.respond(topic, qos, retained, encoded)


__all__ = ["ABORT_INDEX", "Context"]
