"""Fallback cascade use case: find real links for a link-less Title."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

import structlog

from reelscout.domain.entities.catalog import (
    CascadeState,
    Link,
    RawRecord,
    SearchSession,
    Title,
)
from reelscout.domain.ports.cache import CachePort
from reelscout.domain.providers import ProviderProtocol, ResolvingProviderProtocol

log = structlog.get_logger(__name__)


class _CascadeConfig(Protocol):
    """Configuration values consumed by ResolveLinksUseCase."""

    provider_timeout_seconds: float
    max_results_per_provider: int
    title_match_threshold: float
    title_year_tolerance: int
    max_resolve_records: int


class _LinkRanker(Protocol):
    def sort_links(self, links: list[Link]) -> list[Link]: ...


# Type alias for the injected pure title-match filter.
_MatchFn = Callable[..., list[RawRecord]]


def links_cache_key(provider_name: str, title: Title) -> str:
    """Deterministic per-provider cache key for a Title's links."""
    digest = hashlib.sha256(title.identity_key.encode()).hexdigest()[:16]
    return f"links:{provider_name}:{digest}"


@dataclass(frozen=True)
class CascadeAttempt:
    """One provider probe within a cascade run."""

    provider: str
    links: int
    cached: bool = False


@dataclass
class CascadeOutcome:
    """Result of a cascade run."""

    title: Title
    state: CascadeState
    provider: str | None = None
    attempts: list[CascadeAttempt] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.state == CascadeState.RESOLVED


class ResolveLinksUseCase:
    """Walks the fallback providers in order until one yields real links.

    State machine per Title: ``IDLE -> PROBING -> RESOLVED | EXHAUSTED``.
    Providers are probed strictly one at a time; the first provider with
    at least one non-placeholder link wins and the rest are never called.
    Re-running on a RESOLVED title is a no-op; an EXHAUSTED title starts
    over from the first provider.
    """

    def __init__(
        self,
        *,
        providers: list[ProviderProtocol],
        config: _CascadeConfig,
        match_fn: _MatchFn,
        ranker: _LinkRanker,
        cache: CachePort | None = None,
        links_ttl: int = 3600,
    ) -> None:
        self._providers = providers
        self._match_fn = match_fn
        self._ranker = ranker
        self._cache = cache
        self._links_ttl = links_ttl
        self._timeout = config.provider_timeout_seconds
        self._limit = config.max_results_per_provider
        self._threshold = config.title_match_threshold
        self._year_tolerance = config.title_year_tolerance
        self._max_resolve = config.max_resolve_records

    @property
    def providers(self) -> list[ProviderProtocol]:
        return list(self._providers)

    async def execute(
        self,
        title: Title,
        *,
        session: SearchSession | None = None,
        token: str | None = None,
        master_title: str | None = None,
    ) -> CascadeOutcome:
        """Resolve links for *title*. Never raises for provider failures.

        Args:
            title: The Title selected by the caller.
            session: Optional session; the enriched Title is written back
                only while *token* is the session's current token.
            token: Token of the run *title* came from (defaults to the
                session's current token).
            master_title: Canonical title for providers that prefer it
                (defaults to the master title of the session's run).
        """
        if title.cascade_state == CascadeState.RESOLVED:
            log.debug("cascade_already_resolved", title=title.title)
            return CascadeOutcome(title=title, state=CascadeState.RESOLVED)

        if not title.needs_fallback:
            done = replace(title, cascade_state=CascadeState.RESOLVED)
            self._write_back(done, session, token)
            return CascadeOutcome(title=done, state=CascadeState.RESOLVED)

        if master_title is None and session is not None:
            master_title = session.master_title_for(token)

        attempts: list[CascadeAttempt] = []
        log.info(
            "cascade_started",
            title=title.title,
            year=title.year,
            master_title=master_title,
            providers=[p.name for p in self._providers],
        )
        self._write_back(
            replace(title, cascade_state=CascadeState.PROBING), session, token
        )

        for index, provider in enumerate(self._providers):
            log.debug(
                "cascade_probing",
                title=title.title,
                provider=provider.name,
                index=index,
            )
            links, cached = await self._probe(provider, title, master_title)
            attempts.append(
                CascadeAttempt(provider=provider.name, links=len(links), cached=cached)
            )
            if not links:
                continue

            providers = list(title.providers)
            if provider.name not in providers:
                providers.append(provider.name)
            resolved = replace(
                title,
                links=self._ranker.sort_links(links),
                providers=providers,
                cascade_state=CascadeState.RESOLVED,
            )
            log.info(
                "cascade_resolved",
                title=title.title,
                provider=provider.name,
                links=len(links),
                attempts=len(attempts),
            )
            self._write_back(resolved, session, token)
            return CascadeOutcome(
                title=resolved,
                state=CascadeState.RESOLVED,
                provider=provider.name,
                attempts=attempts,
            )

        exhausted = replace(title, cascade_state=CascadeState.EXHAUSTED)
        log.info("cascade_exhausted", title=title.title, attempts=len(attempts))
        self._write_back(exhausted, session, token)
        return CascadeOutcome(
            title=exhausted, state=CascadeState.EXHAUSTED, attempts=attempts
        )

    def _write_back(
        self, title: Title, session: SearchSession | None, token: str | None
    ) -> None:
        if session is None:
            return
        run_token = token or session.token
        if run_token is None or not session.replace_title(run_token, title):
            log.info("cascade_result_stale", title=title.title, token=run_token)

    async def _probe(
        self, provider: ProviderProtocol, title: Title, master_title: str | None
    ) -> tuple[list[Link], bool]:
        """Links from one provider for *title* as ``(links, from_cache)``."""
        cache_key = links_cache_key(provider.name, title)
        cached = await self._cache_read(cache_key, provider.name)
        if cached is not None:
            return cached, True

        term = title.title
        if provider.descriptor.prefers_master_title and master_title:
            term = master_title

        records = await self._guarded(
            provider, "search", provider.search(term, self._limit)
        )
        matching = self._match_fn(
            records,
            title,
            self._threshold,
            year_tolerance=self._year_tolerance,
        )

        links = _real_links(matching)
        if not links and isinstance(provider, ResolvingProviderProtocol):
            links = await self._resolve_records(provider, matching)

        if links:
            await self._cache_write(cache_key, links, provider.name)
        return links, False

    async def _resolve_records(
        self, provider: ResolvingProviderProtocol, records: list[RawRecord]
    ) -> list[Link]:
        """Second-stage lookup for the best link-less matches, one at a time."""
        candidates = [r for r in records if not r.links and r.detail_url]
        found: list[RawRecord] = []
        for record in candidates[: self._max_resolve]:
            links = await self._guarded(provider, "resolve", provider.resolve(record))
            if links:
                found.append(replace(record, links=links))
        return _real_links(found)

    async def _guarded(
        self, provider: ProviderProtocol, op: str, coro: Awaitable[list[Any]]
    ) -> list[Any]:
        """Await *coro* under the provider timeout. Failures yield []."""
        try:
            result = await asyncio.wait_for(coro, timeout=self._timeout)
        except TimeoutError:
            log.warning(
                "cascade_provider_timeout",
                provider=provider.name,
                operation=op,
                timeout=self._timeout,
            )
            return []
        except Exception:
            log.warning(
                "cascade_provider_error",
                provider=provider.name,
                operation=op,
                exc_info=True,
            )
            return []
        except BaseException:
            log.warning("cascade_provider_cancelled", provider=provider.name)
            raise
        return list(result or [])

    async def _cache_read(self, cache_key: str, provider: str) -> list[Link] | None:
        if not self._cache or self._links_ttl <= 0:
            return None
        try:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                log.info("links_cache_hit", provider=provider, cache_key=cache_key)
                return cached
        except Exception:
            log.warning("links_cache_read_error", cache_key=cache_key, exc_info=True)
        return None

    async def _cache_write(self, cache_key: str, links: list[Link], provider: str) -> None:
        if not self._cache or self._links_ttl <= 0:
            return
        try:
            await self._cache.set(cache_key, links, ttl=self._links_ttl)
            log.debug(
                "links_cache_stored",
                provider=provider,
                cache_key=cache_key,
                ttl=self._links_ttl,
                result_count=len(links),
            )
        except Exception:
            log.warning("links_cache_store_error", cache_key=cache_key, exc_info=True)


def _real_links(records: list[RawRecord]) -> list[Link]:
    """Non-placeholder links of *records*, deduplicated by signature."""
    out: list[Link] = []
    seen: set[tuple[str, str, str]] = set()
    for record in records:
        for link in record.links:
            if link.is_placeholder or link.signature in seen:
                continue
            seen.add(link.signature)
            out.append(link)
    return out
