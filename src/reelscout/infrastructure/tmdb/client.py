"""TMDB API client: async httpx implementation with caching."""

from __future__ import annotations

import hashlib
from typing import Any

import httpx
import structlog

from reelscout.domain.entities.catalog import MasterTitle
from reelscout.domain.ports.cache import CachePort

from .auth import BASE_URL, auth_parts, release_year

log = structlog.get_logger(__name__)

# Cache TTLs (seconds)
_TTL_SEARCH = 3_600  # 1 hour
_TTL_DETAILS = 86_400  # 24 hours


class HttpxTmdbClient:
    """Async TMDB client using httpx + CachePort.

    Implements ``MasterTitleResolverPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        language: str = "en-US",
        search_ttl: int = _TTL_SEARCH,
    ) -> None:
        self._headers, self._auth_params = auth_parts(api_key)
        self._http = http_client
        self._cache = cache
        self._language = language
        self._search_ttl = search_ttl

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{BASE_URL}{path}"
        params = {**self._auth_params, "language": self._language, **extra}
        try:
            resp = await self._http.get(url, params=params, headers=self._headers)
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

    @staticmethod
    def _query_key(query: str) -> str:
        digest = hashlib.sha256(query.strip().lower().encode()).hexdigest()[:16]
        return f"tmdb:search:{digest}"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search_movies(self, query: str) -> list[dict[str, Any]]:
        """Search movies by free text. Results are cached per query."""
        cache_key = self._query_key(query)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self._get("/search/movie", query=query, include_adult="false")
        if data is None:
            return []

        results = [r for r in data.get("results", []) if isinstance(r, dict)]
        if results:
            await self._cache.set(cache_key, results, ttl=self._search_ttl)
        return results

    async def movie_details(self, tmdb_id: int) -> dict[str, Any] | None:
        """Full movie details (includes ``imdb_id``)."""
        cache_key = f"tmdb:movie:{tmdb_id}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(f"/movie/{tmdb_id}")
        if data is not None:
            await self._cache.set(cache_key, data, ttl=_TTL_DETAILS)
        return data

    async def master_title(self, query: str) -> MasterTitle | None:
        """Canonical English title and year for *query* (top search hit)."""
        query = query.strip()
        if not query:
            return None

        results = await self.search_movies(query)
        if not results:
            log.debug("tmdb_master_title_not_found", query=query)
            return None

        top = results[0]
        title = str(top.get("title") or top.get("original_title") or "").strip()
        if not title:
            return None

        master = MasterTitle(title=title, year=release_year(top.get("release_date")))
        log.info(
            "tmdb_master_title_resolved",
            query=query,
            title=master.title,
            year=master.year,
        )
        return master
