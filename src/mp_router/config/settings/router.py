"""Config settings – RouterSettings, ClientSettings."""
from __future__ import annotations

import dataclasses

from mp_router.config.settings.base import Settings
from mp_router.config.validation import InvalidSettingValueError, MissingRequiredSettingError

DEFAULT_KEEP_ALIVE = 10
DEFAULT_PING_TIMEOUT = 10
DEFAULT_EXPIRATION = 300
DEFAULT_WORKERS = 8


@dataclasses.dataclass
class ClientSettings(Settings):
    """MQTT client options.

    ``keep_alive`` and ``ping_timeout`` are seconds; ``0`` selects the
    default of 10. The TLS paths are optional, but a client certificate
    and its key must be given together.
    """

    _prefix = "MQTT"

    broker: str = ""
    client_id: str = ""
    ca_cert_path: str | None = None
    client_cert_path: str | None = None
    client_key_path: str | None = None
    keep_alive: int = DEFAULT_KEEP_ALIVE
    ping_timeout: int = DEFAULT_PING_TIMEOUT
    clean_session: bool = False
    order_matters: bool = False
    tls_insecure: bool = False
    workers: int = DEFAULT_WORKERS

    def _validate(self) -> None:
        if not self.broker:
            raise MissingRequiredSettingError("broker")
        if not self.client_id:
            raise MissingRequiredSettingError("client_id")
        if bool(self.client_cert_path) != bool(self.client_key_path):
            raise MissingRequiredSettingError(
                "client_key_path" if self.client_cert_path else "client_cert_path"
            )
        for name in ("keep_alive", "ping_timeout"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidSettingValueError(name, value, "must be >= 0")
            if value == 0:
                setattr(self, name, DEFAULT_KEEP_ALIVE if name == "keep_alive" else DEFAULT_PING_TIMEOUT)
        if self.workers < 1:
            raise InvalidSettingValueError("workers", self.workers, "must be >= 1")

    @property
    def uses_tls(self) -> bool:
        return bool(self.ca_cert_path or self.client_cert_path)


@dataclasses.dataclass
class RouterSettings(Settings):
    """Router-wide options; ``client`` is required unless a transport is injected."""

    _prefix = "MP_ROUTER"

    name: str = ""
    dedup: bool = False
    prefix: str = ""
    expiration: int = DEFAULT_EXPIRATION
    client: ClientSettings | None = None

    def _validate(self) -> None:
        if not self.name:
            raise MissingRequiredSettingError("name")
        if self.expiration <= 0:
            raise InvalidSettingValueError("expiration", self.expiration, "must be > 0")

    @property
    def key_prefix(self) -> str:
        """Namespace for dedup keys: ``<prefix>:mid:<name>:`` or ``mid:<name>:``."""
        if self.prefix:
            return f"{self.prefix}:mid:{self.name}:"
        return f"mid:{self.name}:"


__all__ = ["ClientSettings", "RouterSettings"]
