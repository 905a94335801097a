"""StreamWide provider.

Tries the StreamWide Telegram channel first (bot deep links). When the
channel has nothing, falls back to the site's WordPress RSS search feed,
whose items link straight to stream/download pages.
"""

from __future__ import annotations

import re

from bs4 import Tag

from reelscout.domain.entities.catalog import Link, RawRecord
from reelscout.infrastructure.common.converters import extract_year
from reelscout.infrastructure.common.html_selectors import parse_xml, select_items
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase
from reelscout.infrastructure.providers.telegram_preview import (
    PREVIEW_BASE,
    parse_channel_page,
)

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["streamwide.tv"]
_CHANNEL = "StreamWide"
_DIRECT_QUALITY = "Direct Stream/Download"

_IMG_SRC_RE = re.compile(r'src="([^"]+)"')
_TRAILING_YEAR_RE = re.compile(r"\s*\(?(?:19|20)\d{2}\)?\s*$")


def _item_text(item: Tag, name: str) -> str:
    tag = item.find(name)
    return tag.get_text(strip=True) if tag else ""


def parse_feed(xml: str, source: str) -> list[RawRecord]:
    """RSS ``<item>`` elements → records with one direct link each."""
    soup = parse_xml(xml)
    records: list[RawRecord] = []
    for item in select_items(soup, "item"):
        title = _item_text(item, "title")
        link = _item_text(item, "link")
        if not title or not link:
            continue

        content = item.find("content:encoded") or item.find("encoded")
        img = _IMG_SRC_RE.search(content.get_text()) if content else None

        records.append(
            RawRecord(
                title=_TRAILING_YEAR_RE.sub("", title) or title,
                source=source,
                year=extract_year(title),
                poster=img.group(1) if img else None,
                synopsis=_item_text(item, "description") or None,
                links=[
                    Link(
                        quality=_DIRECT_QUALITY,
                        address=link,
                        source=source,
                        is_direct=True,
                    )
                ],
            )
        )
    return records


class StreamWideProvider(HttpxProviderBase):
    """StreamWide: Telegram channel first, RSS feed as fallback."""

    name = "streamwide"
    priority = 1
    capability = "links"
    _domains = _DOMAINS
    _headers = {  # noqa: RUF012
        "Accept": "application/rss+xml, application/xml, text/xml, text/html",
    }

    async def _search_channel(self, term: str) -> list[RawRecord]:
        resp = await self._safe_fetch(
            f"{PREVIEW_BASE}/{_CHANNEL}", params={"q": term}, context="telegram"
        )
        if resp is None:
            return []
        return parse_channel_page(resp.text, channel=_CHANNEL, source=self.name)

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        records = await self._search_channel(term)
        if records:
            self._log.debug("streamwide_telegram_hit", term=term, count=len(records))
            return records[:limit]

        resp = await self._fetch_mirrored("/feed/", params={"s": term}, context="rss")
        return parse_feed(resp.text, self.name)[:limit]


provider = StreamWideProvider()
