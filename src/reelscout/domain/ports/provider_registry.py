"""Port for provider discovery and access."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reelscout.domain.providers.base import ProviderProtocol


@runtime_checkable
class ProviderRegistryPort(Protocol):
    """Synchronous interface for provider discovery, listing, and retrieval."""

    def discover(self) -> None: ...
    def list_names(self) -> list[str]: ...
    def get(self, name: str) -> ProviderProtocol: ...
    def get_many(self, names: list[str]) -> list[ProviderProtocol]: ...
