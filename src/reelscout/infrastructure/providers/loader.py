from __future__ import annotations

import importlib.util
import traceback
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from reelscout.domain.providers import ProviderLoadError, ProviderProtocol

log = structlog.get_logger(__name__)


def _import_module_from_path(path: Path) -> ModuleType:
    module_name = f"reelscout_dynamic_provider_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, str(path))
    if spec is None or spec.loader is None:
        raise ProviderLoadError(f"Could not create import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)  # type: ignore[union-attr]
    except SyntaxError as e:
        tb = traceback.format_exc()
        raise ProviderLoadError(f"SyntaxError while importing {path}:\n{tb}") from e
    except Exception as e:
        tb = traceback.format_exc()
        raise ProviderLoadError(f"Error while importing {path}:\n{tb}") from e

    return module


def load_provider(path: Path) -> ProviderProtocol:
    """Import *path* and return its module-level ``provider`` object."""
    try:
        module = _import_module_from_path(path)
        if not hasattr(module, "provider"):
            raise ProviderLoadError("Provider module must export 'provider' variable")

        provider: Any = getattr(module, "provider")
        if not hasattr(provider, "search"):
            raise ProviderLoadError("Provider must have 'search' method")
        if (
            not hasattr(provider, "name")
            or not isinstance(provider.name, str)
            or not provider.name
        ):
            raise ProviderLoadError("Provider must have non-empty 'name' attribute")
        if not hasattr(provider, "descriptor"):
            raise ProviderLoadError("Provider must have 'descriptor' attribute")

        return provider
    except ProviderLoadError as e:
        log.error(
            "provider_load_failed",
            provider_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise
