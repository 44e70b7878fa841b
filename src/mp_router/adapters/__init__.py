"""Adapters – concrete transport and cache implementations.

Import the sub-package you need::

    from mp_router.adapters.paho import MqttTransport
    from mp_router.adapters.redis import RedisDedupCache
"""
