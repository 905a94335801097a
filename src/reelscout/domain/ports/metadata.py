"""Port for canonical-title lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reelscout.domain.entities.catalog import MasterTitle


@runtime_checkable
class MasterTitleResolverPort(Protocol):
    """Async interface for resolving a free-text query to a canonical title."""

    async def master_title(self, query: str) -> MasterTitle | None:
        """Return the best canonical title for *query*, or None if unknown."""
        ...
