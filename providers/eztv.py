"""EZTV provider (TV series releases).

Scrapes the EZTV search table. Mirrors rotate on failure; magnet links
sit directly in the result rows.
"""

from __future__ import annotations

from urllib.parse import quote

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
_DOMAINS = ["eztv.re", "eztv.wf", "eztv.tf", "eztv.ch"]


def parse_rows(html: str) -> list[TorrentRow]:
    soup = parse_html(html)
    rows: list[TorrentRow] = []
    for tr in select_items(soup, "table.forum_header_border tr.forum_header_border"):
        name = extract_text(tr, "td:nth-child(2) a")
        magnet = extract_attr(tr, "a.magnet", "href", 'a[href^="magnet:"]')
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


class EztvProvider(HttpxProviderBase):
    """EZTV HTML provider."""

    name = "eztv"
    priority = 3
    capability = "links"
    _domains = _DOMAINS

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            f"/search/{quote(term, safe='')}", context="search"
        )
        rows = parse_rows(resp.text)[: limit * 2]
        return group_rows(rows, self.name, default_quality="Unknown")[:limit]


provider = EztvProvider()
