"""Testing fakes – in-memory doubles for kernel ports."""
from mp_router.kernel.time import FrozenClock
from mp_router.testing.fakes.cache import InMemoryDedupCache
from mp_router.testing.fakes.clock import FakeClock
from mp_router.testing.fakes.transport import InMemoryTransport

__all__ = ["FakeClock", "FrozenClock", "InMemoryDedupCache", "InMemoryTransport"]
