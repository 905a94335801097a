"""Shared test fixtures for the reelscout test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from reelscout.domain.entities.catalog import Link, RawRecord, Title
from reelscout.infrastructure.cache.memory_adapter import MemoryCacheAdapter

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def magnet_link() -> Link:
    """Minimal torrent link."""
    return Link(
        quality="1080p",
        address="magnet:?xt=urn:btih:ABC123",
        size="1.9 GB",
        seeds=800,
        source="yts",
    )


@pytest.fixture()
def raw_record(magnet_link: Link) -> RawRecord:
    """Minimal provider record with one link."""
    return RawRecord(
        title="Inception",
        source="yts",
        year=2010,
        rating=8.8,
        links=[magnet_link],
    )


@pytest.fixture()
def linkless_title() -> Title:
    """Title that still needs the fallback cascade."""
    return Title(title="Inception", year=2010, providers=["tmdb"])


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def memory_cache() -> AsyncIterator[MemoryCacheAdapter]:
    """In-process cache without the background reaper."""
    adapter = MemoryCacheAdapter(ttl_seconds=3600, reaper_interval=0)
    async with adapter:
        yield adapter
