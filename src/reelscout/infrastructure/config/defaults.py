"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "reelscout",
    "environment": "dev",
    "providers": {
        "provider_dir": "./providers",
        "telegram_channels": [
            "StreamWide",
            "StreamWideBot",
            "filmehbot",
            "Filmeeh1",
            "Filmeh_Archive",
            "WhenMoviez",
            "Film_Bazzanz",
            "MovieDL_ir",
            "FilmHD1080",
        ],
    },
    "http": {
        "timeout_seconds": 15.0,
        "user_agent": "ReelScout/0.1.0",
        "proxy": None,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/reelscout",
        "ttl_seconds": 3600,
        "search_ttl_seconds": 3600,
        "links_ttl_seconds": 3600,
        "metadata_ttl_seconds": 86400,
        "reaper_interval_seconds": 300.0,
    },
    "aggregation": {
        "fanout_providers": ["yts", "tmdb", "telegram"],
        "fallback_providers": [
            "telegram",
            "streamwide",
            "zardfilm",
            "film2movie",
            "yts",
            "torrentio",
            "tpb",
            "1337x",
            "eztv",
            "nyaa",
        ],
        "provider_timeout_seconds": 15.0,
        "max_results_per_provider": 10,
    },
}
