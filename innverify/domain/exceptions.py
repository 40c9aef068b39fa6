"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at InnVerifyError so callers can catch broadly
(except InnVerifyError) or narrowly (except TransportError).

The FastAPI layer maps these to HTTP status codes:
  InvalidFormat          → 400
  TransportError         → 502
  RegistryResponseError  → 502 (subclass of TransportError)
  ConfigurationError     → 500
  AuthenticationError    → 500

"Organization not found" and "organization inactive" are NOT exceptions:
they are VerificationResult values (status=error / status=warning).
"""
from __future__ import annotations

from typing import Optional


class InnVerifyError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(InnVerifyError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(InnVerifyError):
    """Raised when registry credentials are missing."""


class InvalidFormat(InnVerifyError):
    """Raised when an INN fails the syntactic check.

    Attributes:
        raw: The rejected input value, exactly as received.
    """

    def __init__(self, message: str, raw: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw = raw


class TransportError(InnVerifyError):
    """Raised when the registry call fails (network, non-2xx, bad body).

    Attributes:
        status_code: Upstream HTTP status, or None if no response arrived.
        details:     Upstream error summary (response text or exception text).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class RegistryResponseError(TransportError):
    """Raised when the registry body does not match the expected schema."""
