"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ECOROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "EcoRoute Optimization API"
    api_prefix: str = "/api"
    map_provider: Literal["openrouteservice", "osrm"] = Field(
        default="openrouteservice",
        description="Live distance/time provider queried before falling back.",
    )
    ors_base_url: str = Field(
        default="https://api.openrouteservice.org",
        description="Base URL for the OpenRouteService API.",
    )
    ors_api_key: Optional[str] = Field(
        default=None,
        description="OpenRouteService API key. Without it the provider is treated as unavailable.",
    )
    ors_profile: str = Field(default="driving-car")
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for an OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(default="driving")
    provider_timeout_seconds: float = Field(default=10.0, gt=0.0)
    provider_max_retries: int = Field(default=1, ge=0)
    provider_backoff_seconds: float = Field(default=0.5, ge=0.0)
    route_cache_ttl_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Lifetime of cached optimization results.",
    )
    cache_cleanup_interval_seconds: float = Field(default=60.0, gt=0.0)
    preload_common_routes: bool = Field(
        default=True,
        description="Warm the route cache with common corridors on startup.",
    )
    corridor_match_tolerance_deg: float = Field(
        default=0.1,
        ge=0.0,
        description="Degrees added around known city bounds when matching corridors.",
    )
    batch_max_parallel: int = Field(default=4, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
