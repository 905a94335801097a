"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from reelscout.application.use_cases import (
    AggregateTitlesUseCase,
    ResolveLinksUseCase,
)
from reelscout.domain.providers import ProviderProtocol
from reelscout.infrastructure.cache.cache_factory import create_cache
from reelscout.infrastructure.catalog.title_matcher import filter_matching
from reelscout.infrastructure.catalog.title_merger import merge_records
from reelscout.infrastructure.catalog.title_sorter import TitleRanker
from reelscout.infrastructure.config.schema import AppConfig
from reelscout.infrastructure.providers import HttpxProviderBase, ProviderRegistry
from reelscout.infrastructure.tmdb.client import HttpxTmdbClient
from reelscout.interfaces.api.catalog.sessions import SessionStore
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _configure_providers(
    providers: list[ProviderProtocol], state: AppState, config: AppConfig
) -> None:
    """Push runtime settings into every httpx-based adapter (once per adapter)."""
    options = {
        "tmdb_api_key": config.tmdb_api_key,
        "telegram_channels": list(config.telegram_channels),
        "attach_search_links": config.aggregation.attach_search_links,
    }
    seen: set[int] = set()
    for provider in providers:
        if id(provider) in seen or not isinstance(provider, HttpxProviderBase):
            continue
        seen.add(id(provider))
        provider.configure(
            timeout=config.aggregation.provider_timeout_seconds,
            proxy=config.http_proxy,
            max_results=config.aggregation.max_results_per_provider,
            http_client=state.http_client,
            options=options,
        )


async def open_resources(state: AppState) -> None:
    """Create and wire every resource the use cases need.

    Order matters:
        1. Provider registry (fails fast before anything is opened)
        2. Cache (required by use cases and the TMDB client)
        3. HTTP client (shared by providers and the TMDB client)
        4. Provider configuration
        5. Canonical-title resolver (optional, needs an API key)
        6. Use cases
        7. Session store
    """
    config = state.config

    # 1) Provider registry. Every module is imported up front so duplicate
    # names and unknown configured names fail startup.
    registry = ProviderRegistry(config.provider_dir)
    registry.discover()
    registry.load_all()
    fanout = registry.get_many(config.aggregation.fanout_providers)
    fallback = registry.get_many(config.aggregation.fallback_providers)
    state.providers = registry

    # 2) Cache
    cache = create_cache(
        backend=config.cache.backend,
        directory=str(config.cache.directory),
        redis_url=config.cache.redis_url,
        ttl_seconds=config.cache.ttl_seconds,
        max_concurrent=config.cache.max_concurrent,
        reaper_interval=config.cache.reaper_interval_seconds,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", backend=config.cache.backend)

    # 3) Shared HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
        proxy=config.http_proxy,
    )
    log.info("http_client_initialized", proxy=bool(config.http_proxy))

    # 4) Push runtime settings into the configured providers
    _configure_providers(fanout + fallback, state, config)
    log.info(
        "providers_initialized",
        fanout=[p.name for p in fanout],
        fallback=[p.name for p in fallback],
    )

    # 5) Canonical-title resolver
    if config.tmdb_api_key:
        state.master_titles = HttpxTmdbClient(
            api_key=config.tmdb_api_key,
            http_client=state.http_client,
            cache=state.cache,
            search_ttl=config.cache.metadata_ttl_seconds,
        )
        log.info("tmdb_client_initialized")
    else:
        state.master_titles = None
        log.info("tmdb_client_disabled", reason="no_api_key")

    # 6) Use cases
    ranker = TitleRanker()
    state.aggregate_uc = AggregateTitlesUseCase(
        providers=fanout,
        config=config.aggregation,
        merge_fn=merge_records,
        ranker=ranker,
        cache=state.cache,
        search_ttl=config.cache.search_ttl_seconds,
        master_titles=state.master_titles,
    )
    state.resolve_uc = ResolveLinksUseCase(
        providers=fallback,
        config=config.aggregation,
        match_fn=filter_matching,
        ranker=ranker,
        cache=state.cache,
        links_ttl=config.cache.links_ttl_seconds,
    )
    log.info("use_cases_initialized")

    # 7) Session store
    state.sessions = SessionStore()


async def close_resources(state: AppState) -> None:
    """Release everything open_resources() created (reverse order)."""
    for provider in state.aggregate_uc.providers + state.resolve_uc.providers:
        if isinstance(provider, HttpxProviderBase):
            await provider.cleanup()
    log.info("providers_cleaned_up")

    await state.http_client.aclose()
    log.info("http_client_closed")

    await state.cache.aclose()
    log.info("cache_closed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root)."""
    state = cast(AppState, app.state)

    await open_resources(state)
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await close_resources(state)
        log.info("app_shutdown_complete")
