"""ZardFilm provider (Persian dubbed/subtitled movies, direct links).

The site indexes titles under their English name, so this provider
searches with the master title when one is known. Search returns
link-less records; ``resolve()`` scrapes the detail page.
"""

from __future__ import annotations

from urllib.parse import urlparse

from reelscout.domain.entities.catalog import Link, RawRecord
from reelscout.infrastructure.providers.ddl_site import (
    parse_download_links,
    parse_listing,
)
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["zardfilm.in"]

_ITEM_SELECTORS = ("article", ".post-item", ".item", ".movie-item")
_LINK_SELECTORS = ('a[href*="/movie/"]',)
_TITLE_SELECTORS = ("h2", ".title", ".post-title")
_DOWNLOAD_SELECTORS = (
    'a[href*="download"]',
    'a[href*=".mkv"]',
    'a[href*=".mp4"]',
    ".download-box a",
    ".dlbox a",
    ".btn-download",
)


class ZardFilmProvider(HttpxProviderBase):
    """ZardFilm HTML provider (listing search + detail-page resolve)."""

    name = "zardfilm"
    priority = 2
    capability = "both"
    prefers_master_title = True
    _domains = _DOMAINS
    _headers = {"Accept-Language": "fa-IR,fa;q=0.9,en;q=0.8"}  # noqa: RUF012

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            "/page/1/", params={"s": term}, context="search"
        )
        return parse_listing(
            resp.text,
            source=self.name,
            item_selectors=_ITEM_SELECTORS,
            link_selectors=_LINK_SELECTORS,
            title_selectors=_TITLE_SELECTORS,
            limit=limit,
        )

    async def _resolve(self, record: RawRecord) -> list[Link]:
        url = record.detail_url or ""
        if not urlparse(url).netloc:
            url = f"{self.base_url}{url}"
        resp = await self._fetch(url, context="detail")
        links = parse_download_links(
            resp.text,
            source=self.name,
            selectors=_DOWNLOAD_SELECTORS,
            include_tables=True,
        )
        self._log.debug("zardfilm_links_found", url=url, count=len(links))
        return links


provider = ZardFilmProvider()
