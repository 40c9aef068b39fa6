"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

These models are the lingua franca of the entire system:
  • adapters produce RegistryResponse
  • services turn it into VerificationResult
  • interfaces (API, CLI, Streamlit) serialise VerificationResult

VerificationResult is frozen: the object stored in the cache is the exact
object handed back on every subsequent hit.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ACTIVE_STATE = "active"


# ── Enums ──────────────────────────────────────────────────────────────────────

class VerificationStatus(str, Enum):
    """Outcome class of a verification."""
    SUCCESS = "success"   # found and active
    WARNING = "warning"   # found, not active
    ERROR   = "error"     # not found


# ── Input ──────────────────────────────────────────────────────────────────────

class VerifyInnRequest(BaseModel):
    """Body of POST /api/fns/verify-inn.

    ``inn`` is optional at the schema level so a missing value reaches the
    validator and produces the specific "not provided" message.  JSON numbers
    are coerced to strings.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    inn: Optional[str] = Field(None, description="10- or 12-digit INN")


# ── Registry (provider-native) ─────────────────────────────────────────────────

class PartySuggestion(BaseModel):
    """One candidate returned by the registry."""

    value: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class RegistryResponse(BaseModel):
    """Registry lookup payload: zero or more candidate organisations."""

    suggestions: list[PartySuggestion] = Field(default_factory=list)


# ── Canonical output ───────────────────────────────────────────────────────────

class CompanyRecord(BaseModel):
    """Organisation details shown next to a verified profile."""

    model_config = ConfigDict(frozen=True)

    name:    str = Field(..., min_length=1)
    ogrn:    str
    address: str
    okved:   Optional[str] = None
    state:   str

    @field_validator("state")
    @classmethod
    def lowercase_state(cls, v: str) -> str:
        return v.lower()


class VerificationResult(BaseModel):
    """Canonical outcome of an INN lookup.

    Invariant: status is SUCCESS iff a company is present and active;
    WARNING iff a company is present and not active; ERROR iff no company.
    """

    model_config = ConfigDict(frozen=True)

    status:  VerificationStatus
    message: str = Field(..., min_length=1)
    company: Optional[CompanyRecord] = None

    @model_validator(mode="after")
    def check_status_matches_company(self) -> "VerificationResult":
        if self.company is None:
            if self.status != VerificationStatus.ERROR:
                raise ValueError("status must be 'error' when no company is present")
        elif self.company.state == ACTIVE_STATE:
            if self.status != VerificationStatus.SUCCESS:
                raise ValueError("an active company must have status 'success'")
        elif self.status != VerificationStatus.WARNING:
            raise ValueError("an inactive company must have status 'warning'")
        return self

    @property
    def is_verified(self) -> bool:
        """True iff the profile layer should mark the business as verified."""
        return self.status == VerificationStatus.SUCCESS

    @property
    def found(self) -> bool:
        return self.company is not None

    def to_dict(self) -> dict:
        """Serialise to the wire shape (absent optional fields omitted)."""
        return self.model_dump(mode="json", exclude_none=True)
