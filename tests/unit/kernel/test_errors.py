"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from mp_router.config import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_router.kernel.errors import (
    ApplicationError,
    BaseError,
    CacheError,
    ConnectionError,
    ContextKeyError,
    InfrastructureError,
    PublishError,
    SerializationError,
    SubscriptionError,
    TLSConfigError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        assert BaseError("wrap", cause=cause).__cause__ is cause

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr(self) -> None:
        assert repr(BaseError("m", code="c")) == "BaseError(code='c', message='m')"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConnectionError, TLSConfigError, SubscriptionError, PublishError, CacheError, SerializationError],
    )
    def test_infrastructure_errors(self, cls: type[BaseError]) -> None:
        assert issubclass(cls, InfrastructureError)

    @pytest.mark.parametrize(
        "cls",
        [ContextKeyError, ConfigError, MissingRequiredSettingError, InvalidSettingValueError],
    )
    def test_application_errors(self, cls: type[BaseError]) -> None:
        assert issubclass(cls, ApplicationError)

    def test_connection_error_default_message(self) -> None:
        err = ConnectionError("tcp://broker:1883")
        assert err.resource == "tcp://broker:1883"
        assert err.code == "connection_error"
        assert "tcp://broker:1883" in err.message

    def test_subscription_error_carries_topic(self) -> None:
        err = SubscriptionError("a/b")
        assert err.topic == "a/b"
        assert err.message == "Could not subscribe to 'a/b'"

    def test_publish_error_carries_topic(self) -> None:
        assert PublishError("out", "nope").topic == "out"

    def test_context_key_error(self) -> None:
        err = ContextKeyError("user")
        assert err.key == "user"
        assert err.message == 'Key "user" does not exist'
        assert err.detail == {"key": "user"}

    def test_serialization_error_payload_type(self) -> None:
        assert SerializationError("bad", payload_type="json").payload_type == "json"

    def test_missing_required_setting_message(self) -> None:
        err = MissingRequiredSettingError("broker")
        assert err.message == "broker is required"
        assert err.code == "missing_required_setting"
