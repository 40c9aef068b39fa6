"""
ports/cache_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the verification result cache.

Current implementation: VerificationCache (in-process TTL + LRU)
The cache is a performance optimisation only.  Nothing may depend on an
entry surviving: implementations are free to lose everything on restart.
"""
from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from innverify.domain.models import VerificationResult

# Monotonic seconds; injected so TTL expiry is deterministic in tests.
Clock = Callable[[], float]


@runtime_checkable
class CachePort(Protocol):
    """Contract for a keyed, time-bounded result store."""

    @property
    def capacity(self) -> int:
        ...

    @property
    def ttl(self) -> float:
        ...

    def get(self, key: str) -> Optional[VerificationResult]:
        """Return the fresh entry for ``key``, or None if absent / expired."""
        ...

    def put(self, key: str, value: VerificationResult) -> None:
        """Insert or overwrite ``key``, stamping it with the current time."""
        ...

    def __len__(self) -> int:
        ...
