"""Tests for provider module loading and the lazy registry."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from reelscout.domain.providers import (
    DuplicateProviderError,
    ProviderLoadError,
    ProviderNotFoundError,
)
from reelscout.infrastructure.providers.loader import load_provider
from reelscout.infrastructure.providers.registry import ProviderRegistry

_PROVIDER_TEMPLATE = """
from reelscout.domain.entities.catalog import ProviderDescriptor


class _Provider:
    name = {name!r}
    descriptor = ProviderDescriptor(name={name!r})

    async def search(self, term, limit):
        return []


provider = _Provider()
"""


def _write_provider(directory: Path, filename: str, name: str) -> Path:
    path = directory / filename
    path.write_text(dedent(_PROVIDER_TEMPLATE.format(name=name)), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestLoadProvider:
    def test_valid_module(self, tmp_path: Path) -> None:
        provider = load_provider(_write_provider(tmp_path, "yts.py", "yts"))
        assert provider.name == "yts"
        assert provider.descriptor.name == "yts"

    def test_missing_provider_variable(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.py"
        path.write_text("x = 1\n", encoding="utf-8")
        with pytest.raises(ProviderLoadError, match="provider"):
            load_provider(path)

    def test_missing_search(self, tmp_path: Path) -> None:
        path = tmp_path / "nosearch.py"
        path.write_text("class P:\n    name = 'p'\n\nprovider = P()\n", encoding="utf-8")
        with pytest.raises(ProviderLoadError, match="search"):
            load_provider(path)

    def test_empty_name(self, tmp_path: Path) -> None:
        with pytest.raises(ProviderLoadError, match="name"):
            load_provider(_write_provider(tmp_path, "blank.py", ""))

    def test_syntax_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.py"
        path.write_text("def (:\n", encoding="utf-8")
        with pytest.raises(ProviderLoadError, match="SyntaxError"):
            load_provider(path)

    def test_import_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad_import.py"
        path.write_text("import does_not_exist_anywhere\n", encoding="utf-8")
        with pytest.raises(ProviderLoadError):
            load_provider(path)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestProviderRegistry:
    def test_list_names_sorted(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "yts.py", "yts")
        _write_provider(tmp_path, "x1337.py", "1337x")
        _write_provider(tmp_path, "tpb.py", "tpb")

        assert ProviderRegistry(tmp_path).list_names() == ["1337x", "tpb", "yts"]

    def test_private_and_non_python_files_skipped(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "yts.py", "yts")
        _write_provider(tmp_path, "_helper.py", "helper")
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        (tmp_path / "sub").mkdir()

        assert ProviderRegistry(tmp_path).list_names() == ["yts"]

    def test_broken_module_skipped_in_listing(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "yts.py", "yts")
        (tmp_path / "broken.py").write_text("raise RuntimeError('x')\n", encoding="utf-8")

        assert ProviderRegistry(tmp_path).list_names() == ["yts"]

    def test_get_by_provider_name(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "x1337.py", "1337x")
        registry = ProviderRegistry(tmp_path)
        assert registry.get("1337x") is registry.get("1337x")

    def test_get_unknown_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ProviderNotFoundError):
            ProviderRegistry(tmp_path).get("nope")

    def test_get_many_keeps_order(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "a.py", "a")
        _write_provider(tmp_path, "b.py", "b")
        registry = ProviderRegistry(tmp_path)

        providers = registry.get_many(["b", "a"])

        assert [p.name for p in providers] == ["b", "a"]

    def test_get_many_raises_for_unknown_names(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "a.py", "a")
        registry = ProviderRegistry(tmp_path)

        with pytest.raises(ProviderNotFoundError, match="missing, other"):
            registry.get_many(["a", "missing", "other"])

    def test_load_all_detects_duplicates(self, tmp_path: Path) -> None:
        _write_provider(tmp_path, "one.py", "dup")
        _write_provider(tmp_path, "two.py", "dup")
        with pytest.raises(DuplicateProviderError):
            ProviderRegistry(tmp_path).load_all()

    def test_missing_directory(self, tmp_path: Path) -> None:
        registry = ProviderRegistry(tmp_path / "nope")
        assert registry.list_names() == []


class TestBundledProviders:
    def test_every_bundled_module_loads(self) -> None:
        provider_dir = Path(__file__).resolve().parents[3] / "providers"
        names = ProviderRegistry(provider_dir).list_names()
        assert names == sorted(
            [
                "1337x",
                "eztv",
                "film2movie",
                "nyaa",
                "streamwide",
                "telegram",
                "tmdb",
                "torrentio",
                "tpb",
                "yts",
                "zardfilm",
            ]
        )
