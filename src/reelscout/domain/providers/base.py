"""Protocols for provider adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reelscout.domain.entities.catalog import Link, ProviderDescriptor, RawRecord


@runtime_checkable
class ProviderProtocol(Protocol):
    """
    Protocol for provider adapters.

    A provider module must export a module-level variable named `provider` that:
    - has a `name: str` attribute and a `descriptor`
    - implements: async def search(term, limit) -> list[RawRecord]

    search() never raises for network or parse failures; it returns [].
    """

    name: str
    descriptor: ProviderDescriptor

    async def search(self, term: str, limit: int) -> list[RawRecord]: ...


@runtime_checkable
class ResolvingProviderProtocol(ProviderProtocol, Protocol):
    """Provider whose search results need a second request for links."""

    async def resolve(self, record: RawRecord) -> list[Link]: ...
