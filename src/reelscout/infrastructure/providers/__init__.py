from __future__ import annotations

from .constants import (
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_MAX_RESULTS,
    DEFAULT_USER_AGENT,
    MAGNET_TRACKERS,
    build_magnet,
)
from .httpx_base import HttpxProviderBase
from .loader import load_provider
from .registry import ProviderRegistry

__all__ = [
    "DEFAULT_CLIENT_TIMEOUT",
    "DEFAULT_MAX_RESULTS",
    "DEFAULT_USER_AGENT",
    "MAGNET_TRACKERS",
    "HttpxProviderBase",
    "ProviderRegistry",
    "build_magnet",
    "load_provider",
]
