"""
domain/validation.py
──────────────────────────────────────────────────────────────────────────────
Syntactic INN check, run before any cache or network work.

Only the shape is checked (10 digits for an organisation, 12 for an
individual entrepreneur).  Check digits are not verified: the registry is the
authority on whether a number exists.
"""
from __future__ import annotations

import re

from innverify.config import messages
from innverify.domain.exceptions import InvalidFormat

_INN_RE = re.compile(r"\d{10}|\d{12}", re.ASCII)


def validate_inn(raw: object) -> str:
    """Return the trimmed INN, or raise InvalidFormat.

    Args:
        raw: Untrusted input (usually the ``inn`` field of a request body).

    Returns:
        The INN with surrounding whitespace removed, used verbatim as the
        cache key.

    Raises:
        InvalidFormat: If ``raw`` is missing, not a string, or not exactly
            10 or 12 ASCII digits.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidFormat(messages.INN_MISSING, raw=raw)
    if not isinstance(raw, str):
        raise InvalidFormat(messages.INN_INVALID, raw=raw)

    inn = raw.strip()
    if not _INN_RE.fullmatch(inn):
        raise InvalidFormat(messages.INN_INVALID, raw=raw)
    return inn
