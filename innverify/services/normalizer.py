"""
services/normalizer.py
──────────────────────────────────────────────────────────────────────────────
Maps a provider-native RegistryResponse onto the canonical VerificationResult.

Resolution rules (first non-empty value wins, order is significant; the
Mini App shows these strings verbatim):

  name     full_with_opf → short_with_opf → full → short
  ogrn     ogrn → ogrnip
  okved    okved → okveds[0] (name, else code) → omitted
  address  address.value
  state    state.status, lowercased

Only the first suggestion is considered; multiple matches for one INN are
not disambiguated.

Status policy:
  - no suggestions            → ERROR   "organization not found"
  - state == "active"         → SUCCESS "organization found"
  - any other state           → WARNING "organization found but is not
                                          currently active"

A suggestion that lacks a name, registration number, address or state is a
malformed upstream payload and raises RegistryResponseError.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from innverify.config import messages
from innverify.domain.exceptions import RegistryResponseError
from innverify.domain.models import (
    ACTIVE_STATE,
    CompanyRecord,
    RegistryResponse,
    VerificationResult,
    VerificationStatus,
)

logger = logging.getLogger(__name__)

_NAME_KEYS = ("full_with_opf", "short_with_opf", "full", "short")
_OGRN_KEYS = ("ogrn", "ogrnip")


class ResultNormalizer:
    """Stateless converter from registry payloads to VerificationResult."""

    def normalize(self, response: RegistryResponse) -> VerificationResult:
        """Build the canonical result for a registry response.

        Args:
            response: Parsed registry payload.

        Returns:
            VerificationResult honouring the status/company invariant.

        Raises:
            RegistryResponseError: If the first suggestion is missing a
                required field.
        """
        if not response.suggestions:
            return VerificationResult(
                status=VerificationStatus.ERROR,
                message=messages.ORGANIZATION_NOT_FOUND,
            )

        if len(response.suggestions) > 1:
            logger.info(
                "registry returned %d suggestions; using the first",
                len(response.suggestions),
            )

        company = _build_company(response.suggestions[0].data)
        if company.state == ACTIVE_STATE:
            return VerificationResult(
                status=VerificationStatus.SUCCESS,
                message=messages.ORGANIZATION_FOUND,
                company=company,
            )
        return VerificationResult(
            status=VerificationStatus.WARNING,
            message=messages.ORGANIZATION_INACTIVE,
            company=company,
        )


# ── Field resolution ───────────────────────────────────────────────────────

def _build_company(data: dict[str, Any]) -> CompanyRecord:
    name = _first_non_empty(_as_dict(data.get("name")), _NAME_KEYS)
    if name is None:
        raise _malformed("suggestion has no organisation name")

    ogrn = _first_non_empty(data, _OGRN_KEYS)
    if ogrn is None:
        raise _malformed("suggestion has neither ogrn nor ogrnip")

    address = _text(_as_dict(data.get("address")).get("value"))
    if address is None:
        raise _malformed("suggestion has no address")

    state = _text(_as_dict(data.get("state")).get("status"))
    if state is None:
        raise _malformed("suggestion has no state.status")

    return CompanyRecord(
        name=name,
        ogrn=ogrn,
        address=address,
        okved=_resolve_okved(data),
        state=state.lower(),
    )


def _resolve_okved(data: dict[str, Any]) -> Optional[str]:
    primary = _text(data.get("okved"))
    if primary is not None:
        return primary

    okveds = data.get("okveds")
    if not isinstance(okveds, list) or not okveds:
        return None
    first = okveds[0]
    if isinstance(first, dict):
        return _first_non_empty(first, ("name", "code"))
    return _text(first)


def _first_non_empty(source: dict[str, Any], keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = _text(source.get(key))
        if value is not None:
            return value
    return None


def _text(value: Any) -> Optional[str]:
    """Return ``value`` as a stripped non-empty string, else None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _malformed(reason: str) -> RegistryResponseError:
    logger.error("malformed registry payload: %s", reason)
    return RegistryResponseError(messages.REGISTRY_MALFORMED, details=reason)
