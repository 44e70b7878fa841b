"""Redis adapter – dedup cache."""
from mp_router.adapters.redis.cache import RedisDedupCache

__all__ = ["RedisDedupCache"]
