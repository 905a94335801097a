"""Shared fixtures for integration tests.

These tests use real infrastructure components (ProviderRegistry, the
bundled providers, MemoryCacheAdapter) with mocked HTTP via respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest

from reelscout.infrastructure.providers.registry import ProviderRegistry


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def provider_dir() -> Path:
    """Bundled providers directory."""
    return Path(__file__).resolve().parents[2] / "providers"


@pytest.fixture()
def registry(provider_dir: Path) -> ProviderRegistry:
    return ProviderRegistry(provider_dir)
