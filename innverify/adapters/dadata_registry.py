"""
adapters/dadata_registry.py
──────────────────────────────────────────────────────────────────────────────
Implements RegistryPort using the DaData "findById/party" suggestions API.

Key behaviour:
  - POST {"query": inn} to /suggestions/api/4_1/rs/findById/party via raw
    requests (no DaData SDK dependency)
  - Authenticates with "Authorization: Token <key>" and "X-Secret: <secret>"
  - Exactly one request per fetch(); no retries (the caller decides)
  - Every failure surfaces as TransportError: connection errors, timeouts,
    non-2xx responses (status + body kept as details) and unparseable bodies

Required env vars:
  DADATA_API_KEY      — DaData API key
  DADATA_SECRET_KEY   — DaData secret key
  REGISTRY_TIMEOUT    — seconds, default 10
"""
from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from innverify.config import messages
from innverify.config.settings import Settings
from innverify.domain.exceptions import (
    AuthenticationError,
    RegistryResponseError,
    TransportError,
)
from innverify.domain.models import RegistryResponse

logger = logging.getLogger(__name__)

# Upstream error bodies are passed to the client; keep them short.
_MAX_DETAILS_CHARS = 500


class DaDataRegistryAdapter:
    """DaData party lookup adapter.

    Injected into VerificationService via services/container.py when
    ``REGISTRY_PROVIDER=dadata`` (the default).
    """

    def __init__(self, settings: Settings) -> None:
        if not settings.dadata_api_key:
            raise AuthenticationError(
                "DADATA_API_KEY is not set. "
                "Add it to your .env file or environment."
            )
        self._settings = settings
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Token {settings.dadata_api_key}",
            "X-Secret": settings.dadata_secret_key,
        }
        logger.debug("DaDataRegistryAdapter ready | url=%s", settings.dadata_url)

    # ── RegistryPort implementation ────────────────────────────────────────

    @property
    def provider_name(self) -> str:
        return "dadata"

    def fetch(self, inn: str) -> RegistryResponse:
        """Look up one INN and return the parsed suggestions payload.

        Args:
            inn: Validated INN.

        Returns:
            RegistryResponse (possibly with zero suggestions).

        Raises:
            TransportError: On network failure, timeout or non-2xx status.
            RegistryResponseError: If the body is not the expected JSON.
        """
        try:
            resp = requests.post(
                self._settings.dadata_url,
                headers=self._headers,
                json={"query": inn},
                timeout=self._settings.registry_timeout,
            )
        except requests.Timeout as exc:
            logger.error("DaData request timed out after %.1fs | inn=%s",
                         self._settings.registry_timeout, inn)
            raise TransportError(messages.REGISTRY_UNAVAILABLE, details=str(exc)) from exc
        except requests.RequestException as exc:
            logger.error("DaData request error | inn=%s: %s", inn, exc)
            raise TransportError(messages.REGISTRY_UNAVAILABLE, details=str(exc)) from exc

        if not resp.ok:
            body = resp.text[:_MAX_DETAILS_CHARS]
            logger.error("DaData HTTP %d | inn=%s: %s", resp.status_code, inn, body)
            raise TransportError(
                messages.REGISTRY_UNAVAILABLE,
                status_code=resp.status_code,
                details=body,
            )

        return self._parse(resp, inn)

    # ── Private helpers ────────────────────────────────────────────────────

    def _parse(self, resp: requests.Response, inn: str) -> RegistryResponse:
        """Turn a 2xx response into a RegistryResponse."""
        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("DaData returned non-JSON body | inn=%s", inn)
            raise RegistryResponseError(
                messages.REGISTRY_MALFORMED,
                status_code=resp.status_code,
                details=resp.text[:_MAX_DETAILS_CHARS],
            ) from exc

        if not isinstance(payload, dict):
            raise RegistryResponseError(
                messages.REGISTRY_MALFORMED,
                status_code=resp.status_code,
                details=f"expected a JSON object, got {type(payload).__name__}",
            )

        try:
            return RegistryResponse.model_validate(payload)
        except ValidationError as exc:
            logger.error("DaData body failed schema validation | inn=%s: %s", inn, exc)
            raise RegistryResponseError(
                messages.REGISTRY_MALFORMED,
                status_code=resp.status_code,
                details=str(exc)[:_MAX_DETAILS_CHARS],
            ) from exc
