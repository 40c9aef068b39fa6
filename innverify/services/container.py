"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

Provider selection is driven entirely by environment variables — no code
changes are needed to switch providers:

  REGISTRY_PROVIDER=dadata  (default) → DaDataRegistryAdapter

The VerificationCache is created here, once, and owned by the service; its
lifetime is the lifetime of the process.

Thread safety:
  @lru_cache(maxsize=1) makes get_service() return the same instance across
  calls.  With multiple uvicorn workers each worker process gets its own
  service and therefore its own cache (the cache is never shared across
  processes).
"""
from __future__ import annotations

import logging
from functools import lru_cache

from innverify.adapters.memory_cache import VerificationCache
from innverify.config.settings import Settings, get_settings
from innverify.domain.exceptions import ConfigurationError
from innverify.ports.registry_port import RegistryPort
from innverify.services.normalizer import ResultNormalizer
from innverify.services.verifier import VerificationService

logger = logging.getLogger(__name__)


def _build_registry(settings: Settings) -> RegistryPort:
    """Instantiate the RegistryPort adapter selected by REGISTRY_PROVIDER."""
    provider = settings.registry_provider.lower()
    if provider == "dadata":
        from innverify.adapters.dadata_registry import DaDataRegistryAdapter
        logger.info("Registry provider: DaData (%s)", settings.dadata_url)
        return DaDataRegistryAdapter(settings)
    raise ConfigurationError(
        f"Unknown REGISTRY_PROVIDER '{settings.registry_provider}'. "
        "Valid values: 'dadata'."
    )


def build_service(settings: Settings) -> VerificationService:
    """Wire a VerificationService from explicit settings (no caching)."""
    registry = _build_registry(settings)
    cache = VerificationCache(
        capacity=settings.cache_capacity,
        ttl=settings.cache_ttl_seconds,
    )
    service = VerificationService(
        registry=registry,
        cache=cache,
        normalizer=ResultNormalizer(),
        single_flight=settings.single_flight,
    )
    logger.info(
        "VerificationService ready | registry=%s capacity=%d ttl=%.0fs single_flight=%s",
        registry.provider_name,
        cache.capacity,
        cache.ttl,
        settings.single_flight,
    )
    return service


@lru_cache(maxsize=1)
def get_service() -> VerificationService:
    """Build and return the fully wired VerificationService singleton.

    Returns:
        VerificationService ready for use.

    Raises:
        ConfigurationError: If an unknown provider name or cache size is given.
        AuthenticationError: If registry credentials are missing.
    """
    return build_service(get_settings())
