"""Tests for the Torrentio provider (TMDB lookup + stream list)."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest
import respx

_PROVIDER_PATH = Path(__file__).resolve().parents[3] / "providers" / "torrentio.py"


def _load_module() -> ModuleType:
    """Load torrentio.py provider via importlib."""
    spec = importlib.util.spec_from_file_location("torrentio_provider", str(_PROVIDER_PATH))
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


_mod = _load_module()
_TorrentioProvider = _mod.TorrentioProvider
_parse_stream = _mod.parse_stream

_TMDB = "https://api.themoviedb.org/3"
_STREAMS = "https://torrentio.strem.fun/stream/movie/tt1375666.json"

_STREAMS_RESPONSE = {
    "streams": [
        {
            "name": "Torrentio\n1080p",
            "title": "Inception.2010.1080p.BluRay.x264\n👤 120 💾 2.1 GB ⚙️ YTS",
            "infoHash": "abc123",
        },
        {
            "name": "Torrentio\n4k",
            "title": "Inception 2010 UHD\n👤 15 💾 18.4 GB",
            "infoHash": "def456",
        },
        {"name": "broken"},
    ]
}


def _make_provider() -> object:
    provider = _TorrentioProvider()
    provider.configure(options={"tmdb_api_key": "v3-key"})
    provider._retry_delay = 0.0
    return provider


class TestParseStream:
    def test_fields(self) -> None:
        link = _parse_stream(_STREAMS_RESPONSE["streams"][0], "Inception", "torrentio")
        assert link is not None
        assert link.quality == "1080p"
        assert link.size == "2.1 GB"
        assert link.seeds == 120
        assert link.label == "Inception.2010.1080p.BluRay.x264"
        assert link.address.startswith("magnet:?xt=urn:btih:abc123")

    def test_quality_from_name_fallback(self) -> None:
        link = _parse_stream(
            {"name": "Torrentio\n720p", "title": "Inception", "infoHash": "x"}, "I", "t"
        )
        assert link is not None
        assert link.quality == "720p"

    def test_direct_url(self) -> None:
        link = _parse_stream({"url": "https://debrid.test/f.mkv", "title": ""}, "I", "t")
        assert link is not None
        assert link.address == "https://debrid.test/f.mkv"
        assert link.size == "N/A"

    def test_unusable(self) -> None:
        assert _parse_stream({"name": "x"}, "I", "t") is None


class TestSearch:
    @respx.mock
    @pytest.mark.asyncio
    async def test_title_lookup_then_streams(self) -> None:
        respx.get(f"{_TMDB}/search/movie").respond(
            json={
                "results": [
                    {
                        "id": 27205,
                        "title": "Inception",
                        "release_date": "2010-07-15",
                        "poster_path": "/p.jpg",
                    }
                ]
            }
        )
        respx.get(f"{_TMDB}/movie/27205").respond(json={"id": 27205, "imdb_id": "tt1375666"})
        respx.get(_STREAMS).respond(json=_STREAMS_RESPONSE)

        records = await _make_provider().search("inception")

        assert len(records) == 1
        record = records[0]
        assert record.title == "Inception"
        assert record.year == 2010
        assert record.imdb_id == "tt1375666"
        assert record.poster == "https://image.tmdb.org/t/p/w342/p.jpg"
        assert [link.quality for link in record.links] == ["1080p", "2160p"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_imdb_id_skips_lookup(self) -> None:
        tmdb = respx.get(f"{_TMDB}/search/movie").respond(json={"results": []})
        respx.get(_STREAMS).respond(json=_STREAMS_RESPONSE)

        records = await _make_provider().search("tt1375666")

        assert not tmdb.called
        assert records[0].title == "tt1375666"

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_tmdb_match(self) -> None:
        respx.get(f"{_TMDB}/search/movie").respond(json={"results": []})
        assert await _make_provider().search("zzzz") == []

    @pytest.mark.asyncio
    async def test_without_api_key_yields_empty(self) -> None:
        assert await _TorrentioProvider().search("inception") == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_streams(self) -> None:
        respx.get(_STREAMS).respond(json={"streams": []})
        assert await _make_provider().search("tt1375666") == []
