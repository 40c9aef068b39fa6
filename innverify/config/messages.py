"""
config/messages.py
──────────────────────────────────────────────────────────────────────────────
All user-facing message strings in one place.

The Mini App front-end renders these verbatim next to the verification
status, so wording changes here are visible to end users.  Keep every string
non-empty; the API contract promises a specific message per outcome.
"""
from __future__ import annotations

# ── Verification outcomes ──────────────────────────────────────────────────────
ORGANIZATION_FOUND = "organization found"
ORGANIZATION_INACTIVE = "organization found but is not currently active"
ORGANIZATION_NOT_FOUND = "organization not found"

# ── Input errors (HTTP 400) ────────────────────────────────────────────────────
INN_MISSING = "INN not provided"
INN_INVALID = "invalid INN format: expected 10 or 12 digits"
BODY_INVALID = "request body must be a JSON object with an 'inn' field"

# ── Upstream / server errors (HTTP 5xx) ────────────────────────────────────────
REGISTRY_UNAVAILABLE = "registry lookup failed, please try again later"
REGISTRY_MALFORMED = "registry returned an unexpected response"
INTERNAL_ERROR = "internal server error"

# ── Smoke route ────────────────────────────────────────────────────────────────
HELLO = "Hello from innverify API!"
