"""YTS provider.

Uses the public YTS JSON API (``/api/v2/list_movies.json``). Every movie
carries rating, genres and a torrent list; magnets are built from the
torrent hash plus a fixed tracker list.

- No authentication required
- Flaky upstream: requests are retried up to 3 times
"""

from __future__ import annotations

from typing import Any

from reelscout.domain.entities.catalog import Link, RawRecord
from reelscout.domain.providers.exceptions import ProviderParseFailure
from reelscout.infrastructure.common.converters import (
    normalize_size,
    to_rating,
    to_seeds,
    to_year,
)
from reelscout.infrastructure.common.release_parser import quality_rank
from reelscout.infrastructure.providers.constants import build_magnet
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["yts.mx", "yts.lt"]


class YtsProvider(HttpxProviderBase):
    """YTS JSON API provider (metadata and magnet links)."""

    name = "yts"
    priority = 1
    capability = "both"
    _domains = _DOMAINS
    _retries = 3
    _headers = {"Accept": "application/json"}  # noqa: RUF012

    def _to_links(self, movie: dict[str, Any]) -> list[Link]:
        display = str(movie.get("title_long") or movie.get("title") or "")
        links: list[Link] = []
        for torrent in movie.get("torrents") or []:
            info_hash = torrent.get("hash")
            if not info_hash:
                continue
            links.append(
                Link(
                    quality=str(torrent.get("quality") or "Unknown"),
                    address=build_magnet(info_hash, display),
                    size=normalize_size(torrent.get("size")),
                    seeds=to_seeds(torrent.get("seeds")),
                    source=self.name,
                    label=str(torrent.get("type") or ""),
                )
            )
        links.sort(key=lambda link: quality_rank(link.quality), reverse=True)
        return links

    def _to_record(self, movie: dict[str, Any]) -> RawRecord | None:
        title = str(movie.get("title") or "").strip()
        if not title:
            return None
        return RawRecord(
            title=title,
            source=self.name,
            year=to_year(movie.get("year")),
            rating=to_rating(movie.get("rating")),
            links=self._to_links(movie),
            poster=movie.get("medium_cover_image") or None,
            synopsis=movie.get("synopsis") or movie.get("description_full") or None,
            genres=[str(g) for g in movie.get("genres") or []],
            imdb_id=movie.get("imdb_code") or None,
            metadata={"yts_id": movie.get("id")},
        )

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            "/api/v2/list_movies.json",
            params={"query_term": term, "limit": limit, "sort_by": "seeds"},
            context="search",
        )
        data = self._parse_json(resp, context="search")
        if not isinstance(data, dict) or data.get("status") != "ok":
            raise ProviderParseFailure("yts: API status is not 'ok'")

        movies = (data.get("data") or {}).get("movies") or []
        records: list[RawRecord] = []
        for movie in movies:
            if not isinstance(movie, dict):
                continue
            record = self._to_record(movie)
            if record is not None:
                records.append(record)
        return records


provider = YtsProvider()
