"""Tests for the direct-download providers (ZardFilm, Film2Movie)."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

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


_zardfilm = _load_module("zardfilm.py")
_film2movie = _load_module("film2movie.py")

_ZARD_LISTING = """
<html><body>
<article>
  <a href="https://zardfilm.in/movie/inception-2010/" title="دانلود فیلم Inception 2010">
    <img src="https://zardfilm.in/p/inception.jpg">
  </a>
  <h2>Inception 2010</h2>
</article>
<article>
  <h2>No link card</h2>
</article>
</body></html>
"""

_ZARD_DETAIL = """
<html><body>
<div class="download-box">
  <a href="https://dl.zardfilm.in/Inception.2010.1080p.mkv">دانلود 1080p</a>
  <a href="javascript:void(0)">bad</a>
</div>
<table>
  <tr><td>BluRay</td><td><a href="https://dl.zardfilm.in/Inception.2010.720p.mp4">720p</a></td></tr>
  <tr><td>Trailer</td><td><a href="https://youtube.test/watch">watch</a></td></tr>
</table>
</body></html>
"""

_F2M_LISTING = """
<html><body>
<article class="post">
  <h2><a class="post-title" href="https://film2movie.asia/12345/inception/">دانلود فیلم Inception 2010 دوبله فارسی</a></h2>
</article>
</body></html>
"""

_F2M_DETAIL = """
<html><body>
<div class="box-download">
  <a href="https://dl.film2movie.asia/Inception.480p.mkv">480p</a>
</div>
</body></html>
"""


class TestZardFilm:
    def test_prefers_master_title(self) -> None:
        assert _zardfilm.ZardFilmProvider().descriptor.prefers_master_title is True

    @respx.mock
    @pytest.mark.asyncio
    async def test_search_returns_linkless_records(self) -> None:
        route = respx.get("https://zardfilm.in/page/1/").respond(text=_ZARD_LISTING)

        records = await _zardfilm.ZardFilmProvider().search("Inception")

        assert route.calls[0].request.url.params["s"] == "Inception"
        assert len(records) == 1
        record = records[0]
        assert record.title == "Inception"
        assert record.year == 2010
        assert record.links == []
        assert record.detail_url == "https://zardfilm.in/movie/inception-2010/"
        assert record.poster == "https://zardfilm.in/p/inception.jpg"

    @respx.mock
    @pytest.mark.asyncio
    async def test_resolve_scrapes_detail_and_tables(self) -> None:
        respx.get("https://zardfilm.in/page/1/").respond(text=_ZARD_LISTING)
        respx.get("https://zardfilm.in/movie/inception-2010/").respond(text=_ZARD_DETAIL)
        provider = _zardfilm.ZardFilmProvider()
        record = (await provider.search("Inception"))[0]

        links = await provider.resolve(record)

        assert [link.address for link in links] == [
            "https://dl.zardfilm.in/Inception.2010.1080p.mkv",
            "https://dl.zardfilm.in/Inception.2010.720p.mp4",
        ]
        assert [link.quality for link in links] == ["1080p", "720p"]
        assert all(link.is_direct for link in links)

    @respx.mock
    @pytest.mark.asyncio
    async def test_resolve_failure_yields_empty(self) -> None:
        respx.get("https://zardfilm.in/page/1/").respond(text=_ZARD_LISTING)
        respx.get("https://zardfilm.in/movie/inception-2010/").respond(404)
        provider = _zardfilm.ZardFilmProvider()
        record = (await provider.search("Inception"))[0]

        assert await provider.resolve(record) == []


class TestFilm2Movie:
    @respx.mock
    @pytest.mark.asyncio
    async def test_search_and_resolve(self) -> None:
        respx.get("https://film2movie.asia/page/1/").respond(text=_F2M_LISTING)
        respx.get("https://film2movie.asia/12345/inception/").respond(text=_F2M_DETAIL)
        provider = _film2movie.Film2MovieProvider()

        records = await provider.search("Inception")
        assert [r.title for r in records] == ["Inception"]
        assert records[0].year == 2010

        links = await provider.resolve(records[0])
        assert [link.quality for link in links] == ["480p"]
        assert links[0].source == "film2movie"

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_results(self) -> None:
        respx.get("https://film2movie.asia/page/1/").respond(text="<html><body></body></html>")
        assert await _film2movie.Film2MovieProvider().search("zzzz") == []
