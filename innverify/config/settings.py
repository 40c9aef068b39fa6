"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

To swap the registry or resize the cache, change the relevant env var:
  REGISTRY_PROVIDER   → swap registry adapter
  CACHE_CAPACITY      → max cached INNs
  CACHE_TTL_SECONDS   → freshness window
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level up from the package)
load_dotenv(Path(__file__).parent.parent.parent / ".env")

_DADATA_FIND_PARTY_URL = (
    "https://suggestions.dadata.ru/suggestions/api/4_1/rs/findById/party"
)


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _env_float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(key: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(key, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Provider selection ──────────────────────────────────────────────────
    # Valid values: "dadata"
    registry_provider: str = field(
        default_factory=lambda: _env("REGISTRY_PROVIDER", "dadata")
    )

    # ── DaData ─────────────────────────────────────────────────────────────
    dadata_api_key: str = field(
        default_factory=lambda: _env("DADATA_API_KEY", "")
    )
    dadata_secret_key: str = field(
        default_factory=lambda: _env("DADATA_SECRET_KEY", "")
    )
    dadata_url: str = field(
        default_factory=lambda: _env("DADATA_URL", _DADATA_FIND_PARTY_URL)
    )

    # ── Verification cache ─────────────────────────────────────────────────
    cache_capacity: int = field(
        default_factory=lambda: _env_int("CACHE_CAPACITY", 100)
    )
    cache_ttl_seconds: float = field(
        default_factory=lambda: _env_float("CACHE_TTL_SECONDS", 3600.0)
    )
    # Serialise concurrent misses for the same INN onto one upstream call.
    single_flight: bool = field(
        default_factory=lambda: _env_bool("SINGLE_FLIGHT", True)
    )

    # ── HTTP API ───────────────────────────────────────────────────────────
    api_host: str = field(default_factory=lambda: _env("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 3000))
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "*")
    )
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    # ── HTTP timeouts (seconds) ────────────────────────────────────────────
    registry_timeout: float = field(
        default_factory=lambda: _env_float("REGISTRY_TIMEOUT", 10.0)
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
