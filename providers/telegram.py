"""Telegram channel provider.

Searches public channel previews (``https://t.me/s/<channel>?q=...``)
and keeps posts that advertise bot deep links. Channels are searched
concurrently; a failing channel only loses its own results. Results are
ordered by channel priority (configuration order).

The channel list comes from ``providers.telegram_channels`` in the
configuration (option ``telegram_channels``) or the built-in default.
"""

from __future__ import annotations

import asyncio

from reelscout.domain.entities.catalog import RawRecord
from reelscout.infrastructure.providers.httpx_base import HttpxProviderBase
from reelscout.infrastructure.providers.telegram_preview import parse_channel_page

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["t.me"]
_DEFAULT_CHANNELS = [
    "StreamWide",
    "StreamWideBot",
    "filmehbot",
    "Filmeeh1",
    "Filmeh_Archive",
    "WhenMoviez",
]
_MAX_CONCURRENT = 8


class TelegramProvider(HttpxProviderBase):
    """Public Telegram channel preview scraper (bot deep links)."""

    name = "telegram"
    priority = 1
    capability = "links"
    _domains = _DOMAINS
    _headers = {"Accept-Language": "fa-IR,fa;q=0.9,en;q=0.8"}  # noqa: RUF012

    @property
    def channels(self) -> list[str]:
        configured = self._options.get("telegram_channels")
        return list(configured) if configured else list(_DEFAULT_CHANNELS)

    async def search_channel(self, channel: str, term: str) -> list[RawRecord]:
        """Search one channel. Failures are logged and yield []."""
        resp = await self._safe_fetch(
            f"{self.base_url}/s/{channel}",
            params={"q": term},
            context=channel,
        )
        if resp is None:
            return []
        records = parse_channel_page(resp.text, channel=channel, source=self.name)
        self._log.debug("telegram_channel_searched", channel=channel, count=len(records))
        return records

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        semaphore = asyncio.Semaphore(_MAX_CONCURRENT)

        async def _one(channel: str) -> list[RawRecord]:
            async with semaphore:
                return await self.search_channel(channel, term)

        per_channel = await asyncio.gather(*[_one(ch) for ch in self.channels])
        records = [record for batch in per_channel for record in batch]
        return records[:limit]


provider = TelegramProvider()
