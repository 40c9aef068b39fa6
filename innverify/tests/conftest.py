"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and mock adapter implementations.

Mock adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test service logic
without any real registry connection.

Fixture hierarchy:
  clock          → FakeClock (manually advanced monotonic time)
  cache          → VerificationCache(capacity=100, ttl=3600) on the fake clock
  registry       → MockRegistryAdapter (counts calls, returns one active org)
  service        → VerificationService wired with registry + cache
  client         → FastAPI TestClient with get_service overridden
"""
from __future__ import annotations

from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from innverify.adapters.memory_cache import VerificationCache
from innverify.config.settings import Settings
from innverify.domain.exceptions import TransportError
from innverify.domain.models import RegistryResponse
from innverify.services.container import get_service
from innverify.services.verifier import VerificationService


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Return a Settings instance with sane test defaults."""
    return Settings(
        registry_provider="dadata",
        dadata_api_key="test-api-key",
        dadata_secret_key="test-secret",
        dadata_url="https://registry.test/findById/party",
        cache_capacity=100,
        cache_ttl_seconds=3600.0,
        single_flight=True,
        cors_origins=("*",),
        registry_timeout=5.0,
    )


# ── Registry payload builders ──────────────────────────────────────────────

def make_party(
    name: str = "ООО Ромашка",
    state: str = "ACTIVE",
    ogrn: Optional[str] = "1027700000000",
    address: str = "г Москва, ул Тверская, д 1",
    okved: Optional[str] = "62.01",
    **extra: Any,
) -> dict[str, Any]:
    """Build the ``data`` dict of one DaData party suggestion."""
    data: dict[str, Any] = {
        "name": {
            "full_with_opf": name,
            "short_with_opf": name,
            "full": name,
            "short": name,
        },
        "ogrn": ogrn,
        "address": {"value": address},
        "okved": okved,
        "state": {"status": state},
    }
    data.update(extra)
    return data


def make_response(*parties: dict[str, Any]) -> RegistryResponse:
    return RegistryResponse.model_validate(
        {"suggestions": [{"value": p["name"]["full_with_opf"] or "", "data": p} for p in parties]}
    )


# ── Mock adapters ──────────────────────────────────────────────────────────

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockRegistryAdapter:
    """Counting registry stub.

    Returns ``response`` for every INN unless ``responses`` has a specific
    entry; raises ``error`` instead when it is set.
    """

    provider_name = "mock-registry"

    def __init__(self, response: Optional[RegistryResponse] = None) -> None:
        self.response = response if response is not None else make_response(make_party())
        self.responses: dict[str, RegistryResponse] = {}
        self.error: Optional[Exception] = None
        self.calls: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def fetch(self, inn: str) -> RegistryResponse:
        self.calls.append(inn)
        if self.error is not None:
            raise self.error
        return self.responses.get(inn, self.response)


def transport_failure(status_code: Optional[int] = 503) -> TransportError:
    return TransportError(
        "registry lookup failed, please try again later",
        status_code=status_code,
        details="Service Unavailable",
    )


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture(name="make_party")
def make_party_fixture():
    return make_party


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture(name="transport_failure")
def transport_failure_fixture():
    return transport_failure


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return VerificationCache(capacity=100, ttl=3600, clock=clock)


@pytest.fixture
def registry():
    return MockRegistryAdapter()


@pytest.fixture
def service(registry, cache):
    return VerificationService(registry=registry, cache=cache)


@pytest.fixture
def client(service):
    from innverify.interfaces.api import create_app

    app = create_app()
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
