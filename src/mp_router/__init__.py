"""
mp_router – middleware-based MQTT message dispatch.

Import path convention::

    from mp_router.application import Router, Group, Context
    from mp_router.config import RouterSettings, ClientSettings
    from mp_router.adapters.redis import RedisDedupCache
    from mp_router.testing import InMemoryTransport
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
