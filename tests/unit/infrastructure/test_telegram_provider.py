"""Tests for the Telegram channel and StreamWide providers."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import httpx
import pytest
import respx

_PROVIDERS_DIR = Path(__file__).resolve().parents[3] / "providers"


def _load_module(filename: str) -> ModuleType:
    """Load a provider module via importlib."""
    spec = importlib.util.spec_from_file_location(
        f"{filename[:-3]}_provider", str(_PROVIDERS_DIR / filename)
    )
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


_telegram = _load_module("telegram.py")
_streamwide = _load_module("streamwide.py")


def _channel_page(title: str, bot: str) -> str:
    return f"""
<html><body>
<div class="tgme_widget_message">
  <div class="tgme_widget_message_text">🎬 {title} (2010)<br>دوبله فارسی</div>
  <a href="https://t.me/{bot}?start=tt1375666">دانلود</a>
  <a class="tgme_widget_message_date" href="https://t.me/chan/1">date</a>
</div>
</body></html>
"""


_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
<channel>
  <item>
    <title>Inception (2010)</title>
    <link>https://streamwide.tv/inception/</link>
    <description>A thief who steals secrets.</description>
    <content:encoded><![CDATA[<p><img src="https://streamwide.tv/inception.jpg"></p>]]></content:encoded>
  </item>
  <item>
    <title></title>
    <link>https://streamwide.tv/empty/</link>
  </item>
</channel>
</rss>
"""

# ---------------------------------------------------------------------------
# Telegram
# ---------------------------------------------------------------------------


class TestTelegramChannels:
    def test_default_channels(self) -> None:
        assert _telegram.TelegramProvider().channels[0] == "StreamWide"

    def test_configured_channels(self) -> None:
        provider = _telegram.TelegramProvider()
        provider.configure(options={"telegram_channels": ["ChanA"]})
        assert provider.channels == ["ChanA"]


class TestTelegramSearch:
    @respx.mock
    @pytest.mark.asyncio
    async def test_results_in_channel_order(self) -> None:
        respx.get("https://t.me/s/ChanA").respond(text=_channel_page("Inception", "BotA"))
        respx.get("https://t.me/s/ChanB").respond(text=_channel_page("Interstellar", "BotB"))
        provider = _telegram.TelegramProvider()
        provider.configure(options={"telegram_channels": ["ChanA", "ChanB"]})

        records = await provider.search("in")

        assert [r.title for r in records] == ["Inception", "Interstellar"]
        assert [r.metadata["channel"] for r in records] == ["ChanA", "ChanB"]
        assert all(r.links[0].is_bot_link for r in records)

    @respx.mock
    @pytest.mark.asyncio
    async def test_query_param(self) -> None:
        route = respx.get("https://t.me/s/ChanA").respond(text="<html></html>")
        provider = _telegram.TelegramProvider()
        provider.configure(options={"telegram_channels": ["ChanA"]})

        assert await provider.search("inception") == []
        assert route.calls[0].request.url.params["q"] == "inception"

    @respx.mock
    @pytest.mark.asyncio
    async def test_failing_channel_is_isolated(self) -> None:
        respx.get("https://t.me/s/ChanA").mock(side_effect=httpx.ConnectError("down"))
        respx.get("https://t.me/s/ChanB").respond(text=_channel_page("Interstellar", "BotB"))
        provider = _telegram.TelegramProvider()
        provider.configure(options={"telegram_channels": ["ChanA", "ChanB"]})

        records = await provider.search("interstellar")

        assert [r.title for r in records] == ["Interstellar"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_limit(self) -> None:
        respx.get("https://t.me/s/ChanA").respond(text=_channel_page("Inception", "BotA"))
        respx.get("https://t.me/s/ChanB").respond(text=_channel_page("Interstellar", "BotB"))
        provider = _telegram.TelegramProvider()
        provider.configure(options={"telegram_channels": ["ChanA", "ChanB"]})

        records = await provider.search("in", limit=1)

        assert [r.title for r in records] == ["Inception"]


# ---------------------------------------------------------------------------
# StreamWide
# ---------------------------------------------------------------------------


class TestParseFeed:
    def test_items(self) -> None:
        records = _streamwide.parse_feed(_RSS, "streamwide")

        assert len(records) == 1
        record = records[0]
        assert record.title == "Inception"
        assert record.year == 2010
        assert record.poster == "https://streamwide.tv/inception.jpg"
        assert record.synopsis == "A thief who steals secrets."
        link = record.links[0]
        assert link.address == "https://streamwide.tv/inception/"
        assert link.is_direct
        assert link.quality == "Direct Stream/Download"


class TestStreamWideSearch:
    @respx.mock
    @pytest.mark.asyncio
    async def test_channel_hit_skips_feed(self) -> None:
        respx.get("https://t.me/s/StreamWide").respond(
            text=_channel_page("Inception", "StreamWideBot")
        )
        feed = respx.get("https://streamwide.tv/feed/").respond(text=_RSS)

        records = await _streamwide.StreamWideProvider().search("inception")

        assert not feed.called
        assert records[0].links[0].is_bot_link

    @respx.mock
    @pytest.mark.asyncio
    async def test_feed_fallback(self) -> None:
        respx.get("https://t.me/s/StreamWide").respond(text="<html></html>")
        feed = respx.get("https://streamwide.tv/feed/").respond(text=_RSS)

        records = await _streamwide.StreamWideProvider().search("inception")

        assert feed.calls[0].request.url.params["s"] == "inception"
        assert records[0].links[0].is_direct

    @respx.mock
    @pytest.mark.asyncio
    async def test_both_sources_down(self) -> None:
        respx.get("https://t.me/s/StreamWide").respond(500)
        respx.get("https://streamwide.tv/feed/").respond(500)

        provider = _streamwide.StreamWideProvider()
        provider._retry_delay = 0.0

        assert await provider.search("inception") == []
