"""Tests for the 1337x provider (link-less search + detail-page resolve)."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest
import respx

_PROVIDER_PATH = Path(__file__).resolve().parents[3] / "providers" / "x1337.py"


def _load_module() -> ModuleType:
    """Load x1337.py provider via importlib."""
    spec = importlib.util.spec_from_file_location("x1337_provider", str(_PROVIDER_PATH))
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


_mod = _load_module()
_X1337Provider = _mod.X1337Provider
_parse_search_page = _mod.parse_search_page

_SEARCH_HTML = """
<html><body>
<table class="table-list">
<thead><tr><th>name</th><th>se</th></tr></thead>
<tbody>
<tr>
  <td class="coll-1 name">
    <a href="/sub/42/0/" class="icon"><i class="flaticon-hd"></i></a>
    <a href="/torrent/1001/Inception-2010-1080p-BluRay/">Inception.2010.1080p.BluRay.x264</a>
  </td>
  <td class="coll-2 seeds">1,532</td>
  <td class="coll-3 leeches">120</td>
  <td class="coll-date">Jan. 1st '20</td>
  <td class="coll-4 size mob-uploader">2.1 GB<span class="seeds">1532</span></td>
</tr>
<tr>
  <td class="coll-1 name"><a href="/sub/1/0/" class="icon"></a></td>
  <td class="coll-2 seeds">3</td>
</tr>
</tbody>
</table>
</body></html>
"""

_DETAIL_HTML = """
<html><body>
<ul class="download-links">
  <li><a href="magnet:?xt=urn:btih:FEED&dn=Inception">Magnet Download</a></li>
</ul>
</body></html>
"""


def _make_provider() -> object:
    provider = _X1337Provider()
    provider._retry_delay = 0.0
    return provider


class TestParseSearchPage:
    def test_linkless_records_with_metadata(self) -> None:
        records = _parse_search_page(_SEARCH_HTML, "1337x")

        assert len(records) == 1
        record = records[0]
        assert record.title == "Inception"
        assert record.year == 2010
        assert record.links == []
        assert record.detail_url == "/torrent/1001/Inception-2010-1080p-BluRay/"
        assert record.metadata["quality"] == "1080p"
        assert record.metadata["size"] == "2.1 GB"
        assert record.metadata["seeds"] == 1532

    def test_empty_page(self) -> None:
        assert _parse_search_page("<html></html>", "1337x") == []


class TestSearch:
    @respx.mock
    @pytest.mark.asyncio
    async def test_search(self) -> None:
        route = respx.get("https://1337x.to/category-search/inception/Movies/1/").respond(
            text=_SEARCH_HTML
        )

        records = await _make_provider().search("inception")

        assert route.called
        assert [r.title for r in records] == ["Inception"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_all_mirrors_down(self) -> None:
        respx.get(url__regex=r"https://1337x\.\w+/.*").respond(503)
        assert await _make_provider().search("inception") == []


class TestResolve:
    @respx.mock
    @pytest.mark.asyncio
    async def test_magnet_from_detail_page(self) -> None:
        respx.get("https://1337x.to/torrent/1001/Inception-2010-1080p-BluRay/").respond(
            text=_DETAIL_HTML
        )
        provider = _make_provider()
        record = _parse_search_page(_SEARCH_HTML, "1337x")[0]

        links = await provider.resolve(record)

        assert len(links) == 1
        link = links[0]
        assert link.address == "magnet:?xt=urn:btih:FEED&dn=Inception"
        assert link.quality == "1080p"
        assert link.size == "2.1 GB"
        assert link.seeds == 1532
        assert link.source == "1337x"

    @respx.mock
    @pytest.mark.asyncio
    async def test_page_without_magnet(self) -> None:
        respx.get("https://1337x.to/torrent/1001/Inception-2010-1080p-BluRay/").respond(
            text="<html><body>removed</body></html>"
        )
        record = _parse_search_page(_SEARCH_HTML, "1337x")[0]
        assert await _make_provider().resolve(record) == []

    @pytest.mark.asyncio
    async def test_record_without_detail_url(self) -> None:
        from reelscout.domain.entities.catalog import RawRecord

        record = RawRecord(title="Inception", source="1337x")
        assert await _make_provider().resolve(record) == []
