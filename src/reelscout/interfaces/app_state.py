"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from reelscout.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from reelscout.application.use_cases import (
        AggregateTitlesUseCase,
        ResolveLinksUseCase,
    )
    from reelscout.domain.ports import (
        CachePort,
        MasterTitleResolverPort,
        ProviderRegistryPort,
    )
    from reelscout.interfaces.api.catalog.sessions import SessionStore


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain Ports
    providers: ProviderRegistryPort
    master_titles: MasterTitleResolverPort | None

    # Use cases
    aggregate_uc: AggregateTitlesUseCase
    resolve_uc: ResolveLinksUseCase

    # Caller-owned result sets (keyed by session_id)
    sessions: SessionStore
