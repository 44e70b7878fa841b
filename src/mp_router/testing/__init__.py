"""Testing support – in-memory fakes for the transport and dedup cache."""

from mp_router.testing.fakes import FakeClock, FrozenClock, InMemoryDedupCache, InMemoryTransport

__all__ = ["FakeClock", "FrozenClock", "InMemoryDedupCache", "InMemoryTransport"]
