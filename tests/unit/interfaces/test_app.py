"""Tests for the FastAPI application factory and its lifespan wiring."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Any

import pytest
from fastapi.testclient import TestClient

from reelscout.domain.providers import DuplicateProviderError, ProviderNotFoundError
from reelscout.infrastructure.config import AppConfig
from reelscout.interfaces.app import create_app

_PROVIDER_DIR = Path(__file__).resolve().parents[3] / "providers"


def _config(**overrides: Any) -> AppConfig:
    return AppConfig.model_validate({"provider_dir": str(_PROVIDER_DIR), **overrides})


class TestCreateApp:
    def test_healthz(self) -> None:
        client = TestClient(create_app(_config()))

        resp = client.get("/healthz")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_title_from_config(self) -> None:
        assert create_app(_config()).title == "reelscout"


class TestLifespan:
    def test_resources_wired_from_config(self) -> None:
        app = create_app(_config())

        with TestClient(app) as client:
            data = client.get("/api/v1/providers").json()
            assert app.state.http_client is not None

        assert [p["name"] for p in data["fanout"]] == ["yts", "tmdb", "telegram"]
        assert data["fallback"][0]["name"] == "telegram"
        assert "1337x" in data["available"]
        assert len(data["available"]) == 11

    def test_blank_search_rejected(self) -> None:
        with TestClient(create_app(_config())) as client:
            resp = client.get("/api/v1/search", params={"q": ""})
        assert resp.status_code == 400


class TestProviderWiring:
    def test_unknown_configured_provider_fails_startup(self) -> None:
        config = _config(
            aggregation={"fanout_providers": ["yts"], "fallback_providers": ["tpb", "nope"]}
        )

        with pytest.raises(ProviderNotFoundError, match="nope"):
            with TestClient(create_app(config)):
                pass

    def test_duplicate_provider_names_fail_startup(self, tmp_path: Path) -> None:
        source = dedent(
            """
            from reelscout.domain.entities.catalog import ProviderDescriptor


            class _Provider:
                name = "yts"
                descriptor = ProviderDescriptor(name="yts")

                async def search(self, term, limit):
                    return []


            provider = _Provider()
            """
        )
        (tmp_path / "first.py").write_text(source, encoding="utf-8")
        (tmp_path / "second.py").write_text(source, encoding="utf-8")
        config = _config(
            provider_dir=str(tmp_path),
            aggregation={"fanout_providers": ["yts"], "fallback_providers": []},
        )

        with pytest.raises(DuplicateProviderError):
            with TestClient(create_app(config)):
                pass
