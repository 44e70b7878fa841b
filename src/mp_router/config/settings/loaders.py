"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
import types
import typing
from typing import Any, TypeVar

from dotenv import load_dotenv

from mp_router.config.settings.base import Settings
from mp_router.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


def _unwrap_optional(type_hint: Any) -> Any:
    if isinstance(type_hint, types.UnionType) or typing.get_origin(type_hint) is typing.Union:
        args = [a for a in typing.get_args(type_hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return type_hint


def _is_settings(type_hint: Any) -> bool:
    return isinstance(type_hint, type) and issubclass(type_hint, Settings)


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables.

    Each field ``foo`` of a class with ``_prefix = "APP"`` is read from
    ``APP_FOO``. A field typed as another :class:`Settings` subclass is
    loaded recursively with that class's own prefix; when none of its
    variables are set and the field has a default, the default is kept.
    """

    def load(self, settings_class: type[T]) -> T:
        prefix = getattr(settings_class, "_prefix", "").upper()
        hints = typing.get_type_hints(settings_class)
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            has_default = (
                field.default is not dataclasses.MISSING
                or field.default_factory is not dataclasses.MISSING  # type: ignore[misc]
            )
            type_hint = _unwrap_optional(hints.get(field.name, str))

            if _is_settings(type_hint):
                if has_default and not self._any_set(type_hint):
                    continue
                kwargs[field.name] = self.load(type_hint)
                continue

            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = os.environ.get(env_key)

            if raw is None:
                if not has_default:
                    raise MissingRequiredSettingError(env_key)
                continue

            try:
                kwargs[field.name] = self._coerce(raw, type_hint)
            except ValueError as exc:
                raise InvalidSettingValueError(env_key, raw, str(exc)) from exc

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _any_set(self, settings_class: type[Settings]) -> bool:
        prefix = getattr(settings_class, "_prefix", "").upper()
        return any(
            f"{prefix}_{field.name}".upper().lstrip("_") in os.environ
            for field in dataclasses.fields(settings_class)  # type: ignore[arg-type]
        )

    def _coerce(self, value: str, type_hint: Any) -> Any:
        if type_hint is bool:
            return value.lower() in ("1", "true", "yes", "on")
        if type_hint is int:
            return int(value)
        if type_hint is float:
            return float(value)
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Load settings from a ``.env`` file then fall back to ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
