"""
ports/registry_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the company-registry lookup provider.

Current implementation: DaDataRegistryAdapter (suggestions.dadata.ru)
To swap to another registry: write an adapter implementing this Protocol
that returns a RegistryResponse, then change ONE branch in
services/container.py.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from innverify.domain.models import RegistryResponse


@runtime_checkable
class RegistryPort(Protocol):
    """Contract for a single-shot INN → organisation lookup."""

    @property
    def provider_name(self) -> str:
        """Short identifier of the upstream registry (for logs / health)."""
        ...

    def fetch(self, inn: str) -> RegistryResponse:
        """Query the registry for one validated INN.

        Exactly one outbound call per invocation; implementations must not
        retry internally.

        Args:
            inn: Validated 10- or 12-digit INN.

        Returns:
            RegistryResponse; an empty ``suggestions`` list means "not found".

        Raises:
            TransportError: Network failure, timeout, non-2xx status, or a
                body that cannot be parsed.
        """
        ...
