"""TMDB metadata provider.

Queries the TMDB v3 JSON API (``/search/movie``) for canonical titles,
ratings, posters and synopses. TMDB carries no download links, so each
record optionally gets placeholder "search on site X" links that the
fallback cascade later replaces with real ones.

- Requires an API key (v3 key or v4 read-access token)
- Single domain: api.themoviedb.org
"""

from __future__ import annotations

from typing import Any

from reelscout.domain.entities.catalog import RawRecord
from reelscout.domain.providers.exceptions import (
    ProviderParseFailure,
    ProviderUnavailable,
)
from reelscout.infrastructure.common.converters import to_rating
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase
from reelscout.infrastructure.providers.search_links import search_links
from reelscout.infrastructure.tmdb.auth import auth_parts, poster_url, release_year

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["api.themoviedb.org"]
_LANGUAGE = "en-US"

# TMDB movie genre ids (stable, documented in /genre/movie/list).
_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}


class TmdbProvider(HttpxProviderBase):
    """Metadata provider backed by the TMDB search API."""

    name = "tmdb"
    priority = 1
    capability = "metadata"
    _domains = _DOMAINS

    def _to_record(self, movie: dict[str, Any]) -> RawRecord | None:
        title = str(movie.get("title") or movie.get("original_title") or "").strip()
        if not title:
            return None

        year = release_year(movie.get("release_date"))
        genres = [_GENRES[g] for g in movie.get("genre_ids") or [] if g in _GENRES]
        original = movie.get("original_title")

        record = RawRecord(
            title=title,
            source=self.name,
            year=year,
            rating=to_rating(movie.get("vote_average")),
            original_title=original if original and original != title else None,
            poster=poster_url(movie.get("poster_path")),
            synopsis=movie.get("overview") or None,
            genres=genres,
            metadata={"tmdb_id": movie.get("id")},
        )
        if self._options.get("attach_search_links", True):
            record.links = search_links(title, year, source=self.name)
        return record

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        api_key = self._options.get("tmdb_api_key")
        if not api_key:
            raise ProviderUnavailable("tmdb: no API key configured")

        headers, params = auth_parts(api_key)
        resp = await self._fetch_mirrored(
            "/3/search/movie",
            params={**params, "query": term, "language": _LANGUAGE},
            headers=headers,
            context="search",
        )
        data = self._parse_json(resp, context="search")
        if not isinstance(data, dict):
            raise ProviderParseFailure("tmdb: unexpected payload shape")

        records: list[RawRecord] = []
        for movie in data.get("results") or []:
            if not isinstance(movie, dict):
                continue
            record = self._to_record(movie)
            if record is not None:
                records.append(record)
            if len(records) >= limit:
                break
        return records


provider = TmdbProvider()
