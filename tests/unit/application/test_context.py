"""Unit tests for the dispatch Context: flow control, key bag, bind and respond."""

from __future__ import annotations

import dataclasses
from types import SimpleNamespace
from typing import Any

import pytest

from mp_router.application.pipeline import ABORT_INDEX, Context
from mp_router.kernel.errors import ContextKeyError, PublishError, SerializationError
from mp_router.kernel.messaging import InboundMessage, Response
from mp_router.testing import InMemoryTransport


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def recording(name: str, record: list[str], *, abort: bool = False, call_next: bool = True) -> Any:
    def _handler(ctx: Context) -> None:
        record.append(f"{name}:in")
        if abort:
            ctx.abort()
        if call_next:
            ctx.next()
        record.append(f"{name}:out")

    return _handler


def make_context(payload: bytes = b"", topic: str = "t/1") -> tuple[Context, InMemoryTransport]:
    transport = InMemoryTransport()
    ctx = Context(SimpleNamespace(transport=transport))  # type: ignore[arg-type]
    ctx.message = InboundMessage(topic=topic, payload=payload, qos=1)
    return ctx, transport


@dataclasses.dataclass
class Order:
    id: str
    qty: int


# ---------------------------------------------------------------------------
# Chain execution
# ---------------------------------------------------------------------------


class TestChainExecution:
    def test_start_on_empty_chain_is_noop(self) -> None:
        ctx = Context()
        ctx.start()
        assert ctx.index == 0

    def test_onion_order(self) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([recording("A", record), recording("B", record), recording("C", record)])
        ctx.start()
        assert record == ["A:in", "B:in", "C:in", "C:out", "B:out", "A:out"]

    def test_start_only_invokes_first_handler(self) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([recording("A", record, call_next=False), recording("B", record)])
        ctx.start()
        assert record == ["A:in", "A:out"]

    def test_next_keeps_running_handlers_that_do_not_call_next(self) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([
            recording("A", record),
            recording("B", record, call_next=False),
            recording("C", record, call_next=False),
        ])
        ctx.start()
        assert record == ["A:in", "B:in", "B:out", "C:in", "C:out", "A:out"]

    def test_next_with_no_remaining_handlers_is_noop(self) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([recording("A", record)])
        ctx.start()
        ctx.next()
        assert record == ["A:in", "A:out"]

    @pytest.mark.parametrize(
        ("length", "abort_at"),
        [(n, i) for n in range(1, 6) for i in range(n)],
    )
    def test_abort_stops_later_handlers_and_unwinds_earlier_ones(self, length: int, abort_at: int) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([recording(str(i), record, abort=i == abort_at) for i in range(length)])
        ctx.start()

        expected = [f"{i}:in" for i in range(abort_at + 1)]
        expected += [f"{i}:out" for i in reversed(range(abort_at + 1))]
        assert record == expected
        assert ctx.is_aborted

    def test_abort_without_calling_next(self) -> None:
        record: list[str] = []
        ctx = Context()
        ctx.set_handlers([
            recording("A", record),
            recording("B", record, abort=True, call_next=False),
            recording("C", record),
        ])
        ctx.start()
        assert record == ["A:in", "B:in", "B:out", "A:out"]

    def test_abort_index_exceeds_any_chain(self) -> None:
        ctx = Context()
        ctx.abort()
        assert ctx.index == ABORT_INDEX
        assert ctx.is_aborted


# ---------------------------------------------------------------------------
# Key/value bag
# ---------------------------------------------------------------------------


class TestKeys:
    def test_get_on_fresh_context_returns_default(self) -> None:
        ctx = Context()
        assert ctx.get("missing") is None
        assert ctx.get("missing", 42) == 42
        assert ctx.keys == {}

    def test_set_then_get(self) -> None:
        ctx = Context()
        ctx.set("user", "alice")
        assert ctx.get("user") == "alice"
        assert ctx.must_get("user") == "alice"

    def test_must_get_missing_raises(self) -> None:
        ctx = Context()
        with pytest.raises(ContextKeyError) as info:
            ctx.must_get("nope")
        assert info.value.key == "nope"

    def test_keys_returns_copy(self) -> None:
        ctx = Context()
        ctx.set("a", 1)
        ctx.keys["b"] = 2
        assert ctx.get("b") is None

    def test_reset_clears_everything(self) -> None:
        ctx, _ = make_context(b"{}")
        ctx.set("a", 1)
        ctx.session_id = "sid"
        ctx.response = Response("o", 0, False, b"")
        ctx.set_handlers([lambda c: None])
        ctx.abort()

        ctx.reset()

        assert ctx.get("a") is None
        assert ctx.message is None
        assert ctx.session_id == ""
        assert ctx.response is None
        assert ctx.handlers == ()
        assert ctx.index == -1
        assert not ctx.is_aborted


# ---------------------------------------------------------------------------
# Message accessors / bind_json
# ---------------------------------------------------------------------------


class TestBindJson:
    def test_accessors_read_message(self) -> None:
        ctx, _ = make_context(b"hello", topic="a/b")
        assert ctx.topic == "a/b"
        assert ctx.payload == b"hello"
        assert ctx.qos == 1

    def test_accessors_without_message(self) -> None:
        ctx = Context()
        assert ctx.topic == ""
        assert ctx.payload == b""
        assert ctx.qos == 0

    def test_decodes_to_plain_value(self) -> None:
        ctx, _ = make_context(b'{"mid": "abc", "n": 1}')
        assert ctx.bind_json() == {"mid": "abc", "n": 1}

    def test_binds_dataclass(self) -> None:
        ctx, _ = make_context(b'{"id": "o-1", "qty": 3}')
        order = ctx.bind_json(Order)
        assert order == Order(id="o-1", qty=3)

    def test_uses_model_validate_when_present(self) -> None:
        class Model:
            def __init__(self, data: Any) -> None:
                self.data = data

            @classmethod
            def model_validate(cls, data: Any) -> "Model":
                return cls(data)

        ctx, _ = make_context(b'[1, 2]')
        assert ctx.bind_json(Model).data == [1, 2]

    def test_invalid_json_raises(self) -> None:
        ctx, _ = make_context(b"not json")
        with pytest.raises(SerializationError):
            ctx.bind_json()

    def test_mismatched_fields_raise(self) -> None:
        ctx, _ = make_context(b'{"id": "o-1", "colour": "red"}')
        with pytest.raises(SerializationError) as info:
            ctx.bind_json(Order)
        assert info.value.payload_type == "Order"


# ---------------------------------------------------------------------------
# respond
# ---------------------------------------------------------------------------


class TestRespond:
    def test_publishes_and_records_response(self) -> None:
        ctx, transport = make_context()
        ctx.respond("out/topic", 1, False, b"pong")
        assert transport.published == [Response("out/topic", 1, False, b"pong")]
        assert ctx.response == Response("out/topic", 1, False, b"pong")

    def test_str_payload_is_encoded(self) -> None:
        ctx, transport = make_context()
        ctx.respond("out", 0, True, "héllo")
        assert transport.published[0].payload == "héllo".encode()
        assert transport.published[0].retained is True

    def test_last_response_wins(self) -> None:
        ctx, transport = make_context()
        ctx.respond("first", 0, False, b"1")
        ctx.respond("second", 0, False, b"2")
        assert len(transport.published) == 2
        assert ctx.response is not None
        assert ctx.response.topic == "second"

    def test_publish_failure_raises_and_records_nothing(self) -> None:
        ctx, transport = make_context()
        transport.fail_publish = True
        with pytest.raises(PublishError):
            ctx.respond("out", 0, False, b"x")
        assert ctx.response is None

    def test_respond_json(self) -> None:
        ctx, transport = make_context()
        ctx.respond_json("out", 0, False, {"ok": True})
        assert transport.published[0].payload == b'{"ok": true}'

    def test_respond_json_unserialisable(self) -> None:
        ctx, transport = make_context()
        with pytest.raises(SerializationError):
            ctx.respond_json("out", 0, False, {"obj": object()})
        assert transport.published == []

    def test_detached_context_cannot_respond(self) -> None:
        with pytest.raises(RuntimeError):
            Context().respond("out", 0, False, b"x")
