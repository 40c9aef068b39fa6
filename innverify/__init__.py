"""
innverify — INN Verification Proxy
==================================
Backend for the map directory Mini App: verifies a business INN against a
company registry, with a TTL + LRU cache in front of the upstream API.
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       Settings (env / .env) and user-facing message strings
  domain/       Pure business objects (models, exceptions, INN check) — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete implementations of each Port (DaData, in-memory cache)
  services/     Orchestration logic; depends only on Ports, never Adapters
  interfaces/   Delivery layer: FastAPI, CLI, Streamlit
  tests/        Full test suite: unit / integration / e2e

Swapping the registry provider:
  1. Write a new adapter in adapters/ implementing RegistryPort
  2. Add one branch in services/container.py
  3. Done — zero other files touched
"""
__version__ = "1.0.0"
