"""1337x provider.

Search pages list release names, sizes and seeders but no magnets; the
magnet lives on each torrent's detail page. ``search()`` therefore
returns link-less records carrying ``detail_url`` and the fallback
cascade calls ``resolve()`` for the best matches.
"""

from __future__ import annotations

from urllib.parse import quote, urlparse

from reelscout.domain.entities.catalog import Link, RawRecord
from reelscout.domain.providers.exceptions import ProviderParseFailure
from reelscout.infrastructure.common.converters import normalize_size, to_seeds
from reelscout.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from reelscout.infrastructure.common.release_parser import parse_release
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["1337x.to", "1337x.st", "1337x.ws", "1337x.is", "1337x.gd"]


def parse_search_page(html: str, source: str) -> list[RawRecord]:
    """Link-less records (one per row) with detail paths and row metadata."""
    soup = parse_html(html)
    records: list[RawRecord] = []
    for tr in select_items(soup, "tbody tr"):
        anchor = tr.select_one("td.name a:nth-child(2)")
        if anchor is None:
            continue
        name = anchor.get_text(strip=True)
        href = str(anchor.get("href") or "")
        if not name or not href:
            continue

        size_cell = tr.select_one("td.size")
        size = next(size_cell.stripped_strings, "") if size_cell else ""
        info = parse_release(name)

        records.append(
            RawRecord(
                title=info.title,
                source=source,
                year=info.year,
                detail_url=href,
                metadata={
                    "release": name,
                    "quality": info.quality,
                    "size": normalize_size(size),
                    "seeds": to_seeds(extract_text(tr, "td.seeds")),
                },
            )
        )
    return records


class X1337Provider(HttpxProviderBase):
    """1337x HTML provider (search + detail-page magnet resolve)."""

    name = "1337x"
    priority = 2
    capability = "both"
    _domains = _DOMAINS

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            f"/category-search/{quote(term, safe='')}/Movies/1/", context="search"
        )
        return parse_search_page(resp.text, self.name)[:limit]

    async def _resolve(self, record: RawRecord) -> list[Link]:
        path = urlparse(record.detail_url or "").path
        resp = await self._fetch_mirrored(path, context="detail")
        magnet = extract_attr(parse_html(resp.text), 'a[href^="magnet:"]', "href")
        if not magnet:
            raise ProviderParseFailure(f"1337x: no magnet on {path}")

        meta = record.metadata
        return [
            Link(
                quality=str(meta.get("quality") or "720p"),
                address=magnet,
                size=str(meta.get("size") or "N/A"),
                seeds=int(meta.get("seeds") or 0),
                source=self.name,
                label=str(meta.get("release") or ""),
            )
        ]


provider = X1337Provider()
