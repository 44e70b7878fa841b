"""paho adapter – MQTT transport, TLS context, broker URL parsing."""
from mp_router.adapters.paho.client import MqttTransport, to_inbound
from mp_router.adapters.paho.tls import BrokerAddress, new_tls_context, parse_broker

__all__ = ["BrokerAddress", "MqttTransport", "new_tls_context", "parse_broker", "to_inbound"]
