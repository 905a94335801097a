"""The Pirate Bay provider.

Scrapes the classic TPB search table (``#searchResult``). The main site
is frequently blocked, so the provider rotates through a mirror list and
sticks to the last mirror that answered.

- Category 200 (Video)
- Magnet links are embedded in the result rows (no detail fetch)
"""

from __future__ import annotations

import re
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
_DOMAINS = [
    "thepiratebay.org",
    "thepiratebay10.org",
    "tpb.party",
    "piratebay.live",
    "thepiratebay.zone",
]
_CATEGORY = 200

_SIZE_RE = re.compile(r"Size\s*([\d.,]+\s*[KMGT]i?B)", re.IGNORECASE)


def parse_rows(html: str) -> list[TorrentRow]:
    """Extract result rows from a TPB search page."""
    soup = parse_html(html)
    rows: list[TorrentRow] = []
    for tr in select_items(soup, "#searchResult tbody tr", "table#searchResult tr"):
        if tr.find("th") is not None:
            continue
        name = extract_text(tr, "a.detLink", "td:nth-child(2) a")
        magnet = extract_attr(tr, 'a[href^="magnet:"]', "href")
        if not name or not magnet:
            continue
        desc = extract_text(tr, "font.detDesc", "td:nth-child(2)")
        size_match = _SIZE_RE.search(desc.replace("\xa0", " "))
        rows.append(
            TorrentRow(
                name=name,
                magnet=magnet,
                size=normalize_size(size_match.group(1) if size_match else None),
                seeds=to_seeds(extract_text(tr, "td:nth-child(3)", "td.seeders")),
                detail_url=extract_attr(tr, "a.detLink", "href") or None,
            )
        )
    return rows


class TpbProvider(HttpxProviderBase):
    """The Pirate Bay HTML provider with mirror rotation."""

    name = "tpb"
    priority = 2
    capability = "links"
    _domains = _DOMAINS

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        resp = await self._fetch_mirrored(
            f"/search/{quote(term, safe='')}/1/99/{_CATEGORY}", context="search"
        )
        rows = parse_rows(resp.text)[: limit * 2]
        return group_rows(rows, self.name, default_quality="720p")[:limit]


provider = TpbProvider()
