from __future__ import annotations

from .load import load_config
from .schema import AggregationConfig, AppConfig, CacheConfig, EnvOverrides

__all__ = [
    "AggregationConfig",
    "AppConfig",
    "CacheConfig",
    "EnvOverrides",
    "load_config",
]
