"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["memory", "diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheConfig(BaseModel):
    """Cache configuration (backend-agnostic)."""

    backend: CacheBackendName = Field(
        default="memory",
        description="Cache backend: 'memory', 'diskcache' (SQLite) or 'redis'",
    )

    # Diskcache settings
    directory: Path = Field(
        default=Path("./.cache/reelscout"),
        validation_alias=AliasChoices("directory", "dir"),
        description="Diskcache SQLite DB path",
    )

    # Redis settings
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis)",
    )

    # Shared settings
    ttl_seconds: int = Field(
        default=3600,
        description="Default TTL for cache entries (seconds)",
    )
    search_ttl_seconds: int = Field(
        default=3600,
        description="TTL for cached provider search results (seconds). 0 = disabled.",
    )
    links_ttl_seconds: int = Field(
        default=3600,
        description="TTL for cached fallback link resolutions (seconds). 0 = disabled.",
    )
    metadata_ttl_seconds: int = Field(
        default=86400,
        description="TTL for cached canonical-title lookups (seconds).",
    )
    reaper_interval_seconds: float = Field(
        default=300.0,
        description="Sweep interval of the memory backend reaper. 0 = lazy expiry only.",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel cache ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator(
        "ttl_seconds", "search_ttl_seconds", "links_ttl_seconds", "metadata_ttl_seconds"
    )
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache TTLs must be >= 0")
        return v


class AggregationConfig(BaseModel):
    """Fan-out and fallback cascade settings.

    All values configurable via YAML (aggregation section) or ENV vars.
    """

    fanout_providers: list[str] = Field(
        default=["yts", "tmdb", "telegram"],
        description="Providers queried in parallel for every search (in order).",
    )
    fallback_providers: list[str] = Field(
        default=[
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
        description="Priority-ordered providers probed one at a time for linkless titles.",
    )
    provider_timeout_seconds: float = Field(
        default=15.0,
        description="Per-provider timeout in seconds (fan-out and cascade).",
    )
    max_results_per_provider: int = Field(
        default=10,
        description="Limit passed to each provider search call.",
    )
    resolve_master_title: bool = Field(
        default=True,
        description="Look up the canonical title before fan-out.",
    )
    title_match_threshold: float = Field(
        default=0.7,
        description="Minimum title similarity for a fallback record to count as a match.",
    )
    title_year_tolerance: int = Field(
        default=1,
        description="Allowed year difference for fallback matches (±N years).",
    )
    max_resolve_records: int = Field(
        default=3,
        description="Max matching records per fallback provider that get a detail lookup.",
    )
    attach_search_links: bool = Field(
        default=True,
        description="Attach search-page placeholder links to metadata-only titles.",
    )

    @field_validator("provider_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("provider_timeout_seconds must be > 0")
        return v

    @field_validator("max_results_per_provider")
    @classmethod
    def _validate_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_results_per_provider must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (providers/http/logging/cache/aggregation).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="reelscout", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Providers (YAML section: providers.*)
    provider_dir: Path = Field(
        default=Path("./providers"),
        validation_alias=AliasChoices(
            "provider_dir",
            AliasPath("providers", "provider_dir"),
        ),
        description="Directory containing Python provider modules.",
    )
    telegram_channels: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "telegram_channels",
            AliasPath("providers", "telegram_channels"),
        ),
        description="Public Telegram channels scraped for bot links (priority order).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for provider requests.",
    )
    http_user_agent: str = Field(
        default="ReelScout/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing API requests.",
    )
    http_proxy: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "http_proxy",
            AliasPath("http", "proxy"),
        ),
        description="Optional proxy URL for all provider traffic.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # TMDB API key (metadata provider + canonical title lookup)
    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key (v3 key or v4 bearer token starting with 'eyJ').",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)

    @field_validator("provider_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "providers": {
                "provider_dir": str(self.provider_dir),
                "telegram_channels": list(self.telegram_channels),
            },
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
                "proxy": self.http_proxy,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": self.cache.model_dump(mode="json"),
            "aggregation": self.aggregation.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read REELSCOUT_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - REELSCOUT_PROVIDER_DIR
    - REELSCOUT_HTTP_PROXY
    - REELSCOUT_CACHE_BACKEND
    - REELSCOUT_PROVIDER_TIMEOUT_SECONDS
    - REELSCOUT_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="REELSCOUT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    provider_dir: Optional[Path] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_proxy: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_redis_url: Optional[str] = None
    cache_search_ttl_seconds: Optional[int] = None

    provider_timeout_seconds: Optional[float] = None
    max_results_per_provider: Optional[int] = None

    tmdb_api_key: Optional[str] = None

    @field_validator("provider_dir", "cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
