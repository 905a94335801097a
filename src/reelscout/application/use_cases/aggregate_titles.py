"""Multi-provider title aggregation use case (fan-out, merge, rank)."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

import structlog

from reelscout.domain.entities.catalog import (
    Query,
    RawRecord,
    SearchSession,
    Title,
    normalize_title,
)
from reelscout.domain.ports.cache import CachePort
from reelscout.domain.ports.metadata import MasterTitleResolverPort
from reelscout.domain.providers import ProviderProtocol

log = structlog.get_logger(__name__)


class _AggregationConfig(Protocol):
    """Configuration values consumed by AggregateTitlesUseCase."""

    provider_timeout_seconds: float
    max_results_per_provider: int
    resolve_master_title: bool


class _TitleRanker(Protocol):
    """Orders merged titles and their links."""

    def sort(self, titles: list[Title]) -> list[Title]: ...


# Type alias for the injected pure merge function.
_MergeFn = Callable[[list[RawRecord]], list[Title]]


def search_cache_key(provider_name: str, term: str) -> str:
    """Deterministic per-provider cache key for a search term."""
    digest = hashlib.sha256(normalize_title(term).encode()).hexdigest()[:16]
    return f"search:{provider_name}:{digest}"


@dataclass
class SearchRun:
    """One finished aggregation run: its final Query and ranked titles."""

    query: Query
    titles: list[Title]


class AggregateTitlesUseCase:
    """Queries every fan-out provider concurrently and merges the results.

    Flow:
        1. Claim the session with a fresh token, then resolve the master title
        2. Search all providers in parallel (cache first, timeout per call)
        3. Concatenate results in provider order, merge, rank
        4. Publish into the caller's session if the run is still current

    A provider that raises or times out contributes ``[]``; the run never
    fails because of a provider.
    """

    def __init__(
        self,
        *,
        providers: list[ProviderProtocol],
        config: _AggregationConfig,
        merge_fn: _MergeFn,
        ranker: _TitleRanker,
        cache: CachePort | None = None,
        search_ttl: int = 3600,
        master_titles: MasterTitleResolverPort | None = None,
    ) -> None:
        self._providers = providers
        self._merge_fn = merge_fn
        self._ranker = ranker
        self._cache = cache
        self._search_ttl = search_ttl
        self._master_titles = master_titles
        self._timeout = config.provider_timeout_seconds
        self._limit = config.max_results_per_provider
        self._resolve_master = config.resolve_master_title

    @property
    def providers(self) -> list[ProviderProtocol]:
        return list(self._providers)

    async def execute(
        self,
        text: str,
        *,
        master_title: str | None = None,
        master_year: int | None = None,
        session: SearchSession | None = None,
    ) -> list[Title]:
        """Aggregate ranked titles for *text*.

        An empty list means no provider returned anything.
        """
        result = await self.run(
            text, master_title=master_title, master_year=master_year, session=session
        )
        return result.titles

    async def run(
        self,
        text: str,
        *,
        master_title: str | None = None,
        master_year: int | None = None,
        session: SearchSession | None = None,
    ) -> SearchRun:
        """Like execute(), but also returns the run's Query (token, master title)."""
        text = " ".join(text.split())
        query = Query(text=text, master_title=master_title, master_year=master_year)
        if not text:
            log.info("aggregate_empty_query")
            return SearchRun(query=query, titles=[])

        # The session is claimed before the first await so a slower, older
        # run can never take the token back from a newer one.
        if session is not None:
            session.begin(query)

        query = await self._complete_query(query)
        if session is not None:
            session.update_query(query)

        log.info(
            "aggregate_started",
            query=query.text,
            master_title=query.master_title,
            providers=[p.name for p in self._providers],
            token=query.token,
        )

        records = await self._search_all(query)
        titles = self._ranker.sort(self._merge_fn(records))

        log.info(
            "aggregate_complete",
            query=query.text,
            records=len(records),
            titles=len(titles),
            token=query.token,
        )

        if session is not None and not session.publish(query.token, titles):
            log.info("aggregate_result_stale", query=query.text, token=query.token)
        return SearchRun(query=query, titles=titles)

    async def _complete_query(self, query: Query) -> Query:
        """Fill in the master title via the metadata resolver (same token)."""
        if (
            query.master_title
            or not self._resolve_master
            or self._master_titles is None
        ):
            return query

        try:
            master = await asyncio.wait_for(
                self._master_titles.master_title(query.text), timeout=self._timeout
            )
        except TimeoutError:
            log.warning("master_title_timeout", query=query.text, timeout=self._timeout)
            master = None
        except Exception:
            log.warning("master_title_error", query=query.text, exc_info=True)
            master = None

        if master is None:
            return query
        return replace(query, master_title=master.title, master_year=master.year)

    async def _search_all(self, query: Query) -> list[RawRecord]:
        tasks = [self._search_one(p, query) for p in self._providers]
        results_per_provider = await asyncio.gather(*tasks)

        all_records: list[RawRecord] = []
        for records in results_per_provider:
            all_records.extend(records)
        return all_records

    async def _search_one(
        self, provider: ProviderProtocol, query: Query
    ) -> list[RawRecord]:
        """Search one provider with cache, timeout and error isolation."""
        term = query.term_for(provider.descriptor)
        cache_key = search_cache_key(provider.name, term)

        cached = await self._cache_read(cache_key, provider.name)
        if cached is not None:
            return cached

        try:
            records = await asyncio.wait_for(
                provider.search(term, self._limit), timeout=self._timeout
            )
        except TimeoutError:
            log.warning(
                "provider_search_timeout",
                provider=provider.name,
                timeout=self._timeout,
            )
            return []
        except Exception:
            log.warning("provider_search_error", provider=provider.name, exc_info=True)
            return []
        except BaseException:
            log.warning("provider_search_cancelled", provider=provider.name)
            raise

        records = list(records or [])
        log.debug("provider_search_done", provider=provider.name, count=len(records))
        if records:
            await self._cache_write(cache_key, records, provider.name)
        return records

    async def _cache_read(self, cache_key: str, provider: str) -> list[RawRecord] | None:
        """Try to read cached search results. Returns None on miss or error."""
        if not self._cache or self._search_ttl <= 0:
            return None
        try:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                log.info(
                    "search_cache_hit",
                    provider=provider,
                    cache_key=cache_key,
                    result_count=len(cached),
                )
                return cached
        except Exception:
            log.warning("search_cache_read_error", cache_key=cache_key, exc_info=True)
        return None

    async def _cache_write(
        self, cache_key: str, records: list[RawRecord], provider: str
    ) -> None:
        """Store search results in cache. Silently ignores errors."""
        if not self._cache or self._search_ttl <= 0:
            return
        try:
            await self._cache.set(cache_key, records, ttl=self._search_ttl)
            log.debug(
                "search_cache_stored",
                provider=provider,
                cache_key=cache_key,
                ttl=self._search_ttl,
                result_count=len(records),
            )
        except Exception:
            log.warning("search_cache_store_error", cache_key=cache_key, exc_info=True)
