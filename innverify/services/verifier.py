"""
services/verifier.py
──────────────────────────────────────────────────────────────────────────────
Verification orchestrator: validate → cache → registry → normalise → cache.

This is the primary entry point for all interfaces (HTTP API, CLI,
Streamlit).  It knows nothing about infrastructure — it only speaks to the
RegistryPort and CachePort interfaces and in domain objects.

Request path:
  1. validate_inn(raw)            InvalidFormat → raised, cache untouched
  2. cache.get(inn)               hit → returned as-is, no network
  3. registry.fetch(inn)          TransportError → raised, nothing cached
  4. normalizer.normalize(resp)
  5. cache.put(inn, result)       every status, including "not found"
  6. return result

Single-flight (single_flight=True):
  Calls for the same INN queue on a per-key lock around steps 2–5.  The
  first caller performs the upstream call; the rest read the cache once they
  acquire the lock and return the stored result.  If the first caller fails
  with TransportError nothing is cached, so the next waiter performs its own
  call.  Different INNs never block each other.

  With single_flight=False two simultaneous misses may both reach the
  registry and both write the cache (last write wins).
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from innverify.domain.exceptions import TransportError
from innverify.domain.models import VerificationResult
from innverify.domain.validation import validate_inn
from innverify.ports.cache_port import CachePort
from innverify.ports.registry_port import RegistryPort
from innverify.services.normalizer import ResultNormalizer

logger = logging.getLogger(__name__)


class _KeyLocks:
    """Lazily created per-key locks, dropped once no caller holds or waits."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(key, (threading.Lock(), 0))
            self._locks[key] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                lock, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class VerificationService:
    """INN verification with a read-through cache.

    Inject via services/container.py — do not instantiate directly in
    application code.

    Args:
        registry:      Any object satisfying RegistryPort.
        cache:         Any object satisfying CachePort.
        normalizer:    ResultNormalizer (a default instance if omitted).
        single_flight: De-duplicate concurrent misses for the same INN.
    """

    def __init__(
        self,
        registry: RegistryPort,
        cache: CachePort,
        normalizer: Optional[ResultNormalizer] = None,
        single_flight: bool = True,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._normalizer = normalizer or ResultNormalizer()
        self._single_flight = single_flight
        self._key_locks = _KeyLocks()

    @property
    def registry(self) -> RegistryPort:
        return self._registry

    @property
    def cache(self) -> CachePort:
        return self._cache

    # ── Public API ─────────────────────────────────────────────────────────

    def verify(self, raw_inn: object) -> VerificationResult:
        """Verify an INN, serving from cache inside the freshness window.

        Args:
            raw_inn: Untrusted input; validated before any other work.

        Returns:
            VerificationResult (success / warning / error).

        Raises:
            InvalidFormat:  ``raw_inn`` is not a 10- or 12-digit INN.
            TransportError: Cache miss and the registry call failed.
        """
        inn = validate_inn(raw_inn)

        if not self._single_flight:
            return self._read_through(inn)

        # The cache read happens under the key lock, so a caller that queued
        # behind an in-flight lookup sees its stored result.
        with self._key_locks.hold(inn):
            return self._read_through(inn)

    # ── Private helpers ────────────────────────────────────────────────────

    def _read_through(self, inn: str) -> VerificationResult:
        cached = self._cache.get(inn)
        if cached is not None:
            logger.info("verify | inn=%s cache=hit status=%s", inn, cached.status.value)
            return cached

        try:
            response = self._registry.fetch(inn)
            result = self._normalizer.normalize(response)
        except TransportError as exc:
            logger.warning(
                "verify | inn=%s registry=%s failed (status=%s): %s",
                inn, self._registry.provider_name, exc.status_code, exc.message,
            )
            raise

        self._cache.put(inn, result)
        logger.info(
            "verify | inn=%s cache=miss registry=%s status=%s",
            inn, self._registry.provider_name, result.status.value,
        )
        return result
