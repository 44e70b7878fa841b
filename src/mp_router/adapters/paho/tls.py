"""paho adapter – TLS context and broker URL parsing."""
from __future__ import annotations

import dataclasses
import ssl
from urllib.parse import urlsplit

from mp_router.kernel.errors import TLSConfigError

_DEFAULT_PORTS = {
    "tcp": 1883,
    "mqtt": 1883,
    "ssl": 8883,
    "tls": 8883,
    "mqtts": 8883,
    "ws": 80,
    "wss": 443,
}
_SECURE = frozenset({"ssl", "tls", "mqtts", "wss"})
_WEBSOCKET = frozenset({"ws", "wss"})


@dataclasses.dataclass(frozen=True)
class BrokerAddress:
    scheme: str
    host: str
    port: int
    path: str = ""

    @property
    def secure(self) -> bool:
        return self.scheme in _SECURE

    @property
    def websocket(self) -> bool:
        return self.scheme in _WEBSOCKET


def parse_broker(url: str) -> BrokerAddress:
    """Parse ``scheme://host:port``; a bare ``host[:port]`` means ``tcp``."""
    if "://" not in url:
        url = f"tcp://{url}"
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ValueError(f"Unsupported broker scheme '{scheme}' in {url!r}")
    if not parts.hostname:
        raise ValueError(f"Broker URL {url!r} has no host")
    return BrokerAddress(
        scheme=scheme,
        host=parts.hostname,
        port=parts.port or _DEFAULT_PORTS[scheme],
        path=parts.path,
    )


def new_tls_context(
    ca_cert_path: str | None,
    client_cert_path: str | None = None,
    client_key_path: str | None = None,
    insecure: bool = False,
) -> ssl.SSLContext:
    """Build a client-side TLS context.

    ``insecure`` turns off hostname and certificate verification.

    Raises:
        TLSConfigError: the CA bundle or the client key pair cannot be loaded.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    try:
        if ca_cert_path:
            context.load_verify_locations(cafile=ca_cert_path)
        else:
            context.load_default_certs()
        if client_cert_path:
            context.load_cert_chain(certfile=client_cert_path, keyfile=client_key_path)
    except (OSError, ssl.SSLError) as exc:
        raise TLSConfigError(f"Cannot load TLS material: {exc}", cause=exc) from exc
    return context


__all__ = ["BrokerAddress", "new_tls_context", "parse_broker"]
