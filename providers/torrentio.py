"""Torrentio provider.

Torrentio indexes streams by IMDb id, so a free-text query is first
resolved through TMDB (search, then movie details for ``imdb_id``).
Queries that already are IMDb ids (``tt1375666``) skip that step.

Stream titles look like ``"Inception.2010.1080p.BluRay\\n👤 120 💾 2.1 GB"``;
quality, size and seeders are parsed from that text.
"""

from __future__ import annotations

import re
from typing import Any

from reelscout.domain.entities.catalog import UNKNOWN_SIZE, Link, RawRecord
from reelscout.domain.providers.exceptions import (
    ProviderParseFailure,
    ProviderUnavailable,
)
from reelscout.infrastructure.common.release_parser import quality_from_text
from reelscout.infrastructure.providers.constants import build_magnet
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase
from reelscout.infrastructure.tmdb.auth import (
    BASE_URL as TMDB_BASE_URL,
    auth_parts,
    poster_url,
    release_year,
)

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["torrentio.strem.fun"]
_POSTER_BASE = "https://image.tmdb.org/t/p/w342"

_IMDB_ID_RE = re.compile(r"^tt\d{5,}$")
_SIZE_RE = re.compile(r"💾\s*([\d.]+\s*[GM]B)", re.IGNORECASE)
_SEEDS_RE = re.compile(r"👤\s*(\d+)")


def parse_stream(stream: dict[str, Any], display_name: str, source: str) -> Link | None:
    """Convert one Torrentio stream object into a Link (None = unusable)."""
    info_hash = stream.get("infoHash")
    address = stream.get("url")
    if not address and info_hash:
        address = build_magnet(info_hash, display_name, with_trackers=False)
    if not address:
        return None

    raw_title = str(stream.get("title") or "")
    full_title = raw_title.replace("\n", " ")
    name = str(stream.get("name") or "")

    quality = quality_from_text(full_title, default="")
    if not quality:
        quality = quality_from_text(name, default="Unknown")

    size_match = _SIZE_RE.search(full_title)
    seeds_match = _SEEDS_RE.search(full_title)

    return Link(
        quality=quality,
        address=address,
        size=size_match.group(1) if size_match else UNKNOWN_SIZE,
        seeds=int(seeds_match.group(1)) if seeds_match else 0,
        source=source,
        label=raw_title.split("\n", 1)[0],
    )


class TorrentioProvider(HttpxProviderBase):
    """Torrentio stream provider (IMDb id lookup via TMDB)."""

    name = "torrentio"
    priority = 1
    capability = "links"
    _domains = _DOMAINS

    async def _tmdb_get(self, path: str, **params: Any) -> dict[str, Any]:
        api_key = self._options.get("tmdb_api_key")
        if not api_key:
            raise ProviderUnavailable("torrentio: TMDB API key required for lookup")
        headers, auth_params = auth_parts(api_key)
        resp = await self._fetch(
            f"{TMDB_BASE_URL}{path}",
            params={**auth_params, **params},
            headers=headers,
            context="tmdb",
        )
        data = self._parse_json(resp, context="tmdb")
        if not isinstance(data, dict):
            raise ProviderParseFailure("torrentio: unexpected TMDB payload")
        return data

    async def _lookup(self, term: str) -> tuple[str, dict[str, Any]] | None:
        """Best TMDB match for *term* as ``(imdb_id, movie)``."""
        found = await self._tmdb_get("/search/movie", query=term)
        results = [r for r in found.get("results") or [] if isinstance(r, dict)]
        if not results:
            self._log.debug("torrentio_no_tmdb_match", term=term)
            return None

        best = results[0]
        details = await self._tmdb_get(f"/movie/{best.get('id')}")
        imdb_id = details.get("imdb_id")
        if not imdb_id:
            self._log.debug("torrentio_no_imdb_id", term=term, tmdb_id=best.get("id"))
            return None
        return imdb_id, best

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        if _IMDB_ID_RE.match(term):
            imdb_id, movie = term, {}
        else:
            match = await self._lookup(term)
            if match is None:
                return []
            imdb_id, movie = match

        resp = await self._fetch_mirrored(
            f"/stream/movie/{imdb_id}.json", context="streams"
        )
        data = self._parse_json(resp, context="streams")
        if not isinstance(data, dict):
            raise ProviderParseFailure("torrentio: unexpected stream payload")

        title = str(movie.get("title") or imdb_id)
        links: list[Link] = []
        for stream in data.get("streams") or []:
            if not isinstance(stream, dict):
                continue
            link = parse_stream(stream, title, self.name)
            if link is not None:
                links.append(link)

        if not links:
            return []

        return [
            RawRecord(
                title=title,
                source=self.name,
                year=release_year(movie.get("release_date")),
                poster=poster_url(movie.get("poster_path"), base=_POSTER_BASE),
                imdb_id=imdb_id,
                links=links[:limit],
            )
        ]


provider = TorrentioProvider()
