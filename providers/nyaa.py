"""Nyaa provider (anime, English-translated category 1_2)."""

from __future__ import annotations

from reelscout.domain.entities.catalog import RawRecord
from reelscout.infrastructure.common.converters import normalize_size, to_seeds
from reelscout.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase
from reelscout.infrastructure.providers.torrent_rows import TorrentRow, group_rows

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["nyaa.si", "nyaa.land"]
_CATEGORY = "1_2"


def parse_rows(html: str) -> list[TorrentRow]:
    soup = parse_html(html)
    rows: list[TorrentRow] = []
    for tr in select_items(soup, "table.torrent-list tbody tr"):
        # The name cell may start with a comment-count link.
        anchors = tr.select("td:nth-child(2) a:not(.comments)")
        name = anchors[-1].get_text(strip=True) if anchors else ""
        magnet = extract_attr(tr, 'a[href^="magnet:"]', "href")
        if not name or not magnet:
            continue
        rows.append(
            TorrentRow(
                name=name,
                magnet=magnet,
                size=normalize_size(extract_text(tr, "td:nth-child(4)")),
                seeds=to_seeds(extract_text(tr, "td:nth-child(6)")),
            )
        )
    return rows


class NyaaProvider(HttpxProviderBase):
    """Nyaa HTML provider."""

    name = "nyaa"
    priority = 3
    capability = "links"
    _domains = _DOMAINS

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            "/",
            params={"f": 0, "c": _CATEGORY, "q": term, "s": "seeders", "o": "desc"},
            context="search",
        )
        rows = parse_rows(resp.text)[: limit * 2]
        return group_rows(rows, self.name, default_quality="Unknown")[:limit]


provider = NyaaProvider()
