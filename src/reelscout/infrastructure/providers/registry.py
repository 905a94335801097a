"""Provider registry with lazy loading and in-memory caching."""

from __future__ import annotations

from pathlib import Path

import structlog

from reelscout.domain.providers import (
    DuplicateProviderError,
    ProviderLoadError,
    ProviderNotFoundError,
    ProviderProtocol,
)

from .loader import load_provider

log = structlog.get_logger(__name__)


class ProviderRegistry:
    """
    Lazy-loading provider registry.

    discover():
      - indexes ``*.py`` files only (no Python execution)

    get()/get_many()/load_all()/list_names():
      - import on demand and cache results (each file is imported once)
    """

    def __init__(self, provider_dir: Path) -> None:
        self._provider_dir = provider_dir
        self._discovered: bool = False
        self._paths: list[Path] = []

        self._by_path: dict[Path, ProviderProtocol | None] = {}
        self._by_name: dict[str, ProviderProtocol] = {}

    @property
    def provider_dir(self) -> Path:
        return self._provider_dir

    def discover(self) -> None:
        if self._discovered:
            return

        self._discovered = True
        self._paths = []

        if not self._provider_dir.is_dir():
            log.warning(
                "provider_directory_not_found", directory=str(self._provider_dir)
            )
            return

        for path in sorted(self._provider_dir.iterdir(), key=lambda p: p.name):
            if path.is_dir() or path.suffix.lower() != ".py":
                continue
            if path.name.startswith("_"):
                continue
            self._paths.append(path)

        log.info(
            "providers_discovered",
            count=len(self._paths),
            directory=str(self._provider_dir),
        )

        if not self._paths:
            log.warning("no_providers_found", directory=str(self._provider_dir))

    def list_names(self) -> list[str]:
        """Names of every provider that imports cleanly, sorted."""
        self.discover()

        out: list[str] = []
        for path in self._paths:
            provider = self._peek(path)
            if provider is None or provider.name in out:
                # duplicates are surfaced on load_all()
                continue
            out.append(provider.name)

        return sorted(out)

    def get(self, name: str) -> ProviderProtocol:
        self.discover()

        cached = self._by_name.get(name)
        if cached is not None:
            return cached

        for path in self._paths:
            provider = self._peek(path)
            if provider is not None and provider.name == name:
                self._by_name[name] = provider
                return provider

        raise ProviderNotFoundError(f"Provider '{name}' not found")

    def get_many(self, names: list[str]) -> list[ProviderProtocol]:
        """Resolve *names* in the given order.

        Raises ProviderNotFoundError naming every unknown provider.
        """
        out: list[ProviderProtocol] = []
        missing: list[str] = []
        for name in names:
            try:
                out.append(self.get(name))
            except ProviderNotFoundError:
                missing.append(name)
        if missing:
            log.error("provider_not_registered", providers=missing)
            raise ProviderNotFoundError(
                f"Provider(s) not found: {', '.join(missing)}"
            )
        return out

    def load_all(self) -> list[ProviderProtocol]:
        """
        Force-load all discovered providers.

        Raises ProviderLoadError or DuplicateProviderError.
        """
        self.discover()

        loaded: dict[str, ProviderProtocol] = {}
        for path in self._paths:
            provider = self._load(path)
            if provider.name in loaded:
                raise DuplicateProviderError(
                    f"Provider name '{provider.name}' already exists"
                )
            loaded[provider.name] = provider

        self._by_name.update(loaded)
        return list(loaded.values())

    def _load(self, path: Path) -> ProviderProtocol:
        cached = self._by_path.get(path)
        if cached is not None:
            return cached
        provider = load_provider(path)
        self._by_path[path] = provider
        log.info("provider_loaded", provider_name=provider.name)
        return provider

    def _peek(self, path: Path) -> ProviderProtocol | None:
        if path in self._by_path:
            return self._by_path[path]
        try:
            return self._load(path)
        except ProviderLoadError:
            self._by_path[path] = None
            return None
