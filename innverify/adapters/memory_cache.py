"""
adapters/memory_cache.py
──────────────────────────────────────────────────────────────────────────────
In-process verification cache: fixed capacity, fixed TTL, LRU eviction.

Design notes:
  - One VerificationCache is created in services/container.py and handed to
    the VerificationService; nothing else writes to it.
  - Expiry is lazy: an entry whose age is >= ttl is dropped on the read that
    finds it.  No background sweeper thread.
  - Recency is refreshed on get() hits and on put().  When a put() would
    exceed capacity, least-recently-used entries are evicted first.
  - Thread-safe: every operation runs under a single threading.Lock, so a
    reader never observes a half-applied eviction (FastAPI runs sync
    endpoints on a worker thread pool).
  - Negative results (status=error) are cached exactly like positive ones.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass

from innverify.domain.exceptions import ConfigurationError
from innverify.domain.models import VerificationResult
from innverify.ports.cache_port import Clock

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY: int = 100
DEFAULT_TTL_SECONDS: float = 3600.0  # 1 hour


@dataclass
class _Entry:
    value: VerificationResult
    inserted_at: float


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters, reported by the health endpoint."""

    size: int
    capacity: int
    ttl_seconds: float
    hits: int
    misses: int
    evictions: int
    expirations: int


class VerificationCache:
    """TTL + LRU map of INN → VerificationResult.

    Usage (injected by container.py — do not instantiate in request code):
        cache = VerificationCache(capacity=100, ttl=3600)
        cache.put("7700000000", result)
        cache.get("7700000000")          # result, or None once stale

    Args:
        capacity: Maximum number of live entries (>= 1).
        ttl:      Freshness window in seconds (> 0).
        clock:    Monotonic time source; defaults to time.monotonic.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ConfigurationError(f"Cache capacity must be >= 1, got {capacity}")
        if ttl <= 0:
            raise ConfigurationError(f"Cache TTL must be > 0 seconds, got {ttl}")
        self._capacity = capacity
        self._ttl = float(ttl)
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0
        logger.debug("VerificationCache initialised | capacity=%d ttl=%.0fs", capacity, ttl)

    # ── CachePort implementation ───────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> VerificationResult | None:
        """Return the cached result for ``key`` if it is still fresh.

        A hit moves the entry to the most-recently-used position.  A stale
        entry is removed and reported as a miss.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._is_expired(entry):
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                logger.debug("cache expired | key=%s", key)
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def put(self, key: str, value: VerificationResult) -> None:
        """Insert or overwrite ``key``; evict LRU entries beyond capacity."""
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            while len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("cache evicted | key=%s", evicted)
            self._entries[key] = _Entry(value=value, inserted_at=self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ── Operational helpers ────────────────────────────────────────────────

    def __contains__(self, key: object) -> bool:
        """Freshness-aware membership test; does not touch recency or stats."""
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._is_expired(entry)

    def invalidate(self, key: str) -> bool:
        """Drop ``key`` if present.  Returns True if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            logger.info("VerificationCache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                capacity=self._capacity,
                ttl_seconds=self._ttl,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    # ── Private helpers ────────────────────────────────────────────────────

    def _is_expired(self, entry: _Entry) -> bool:
        return self._clock() - entry.inserted_at >= self._ttl
