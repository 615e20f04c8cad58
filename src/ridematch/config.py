"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RIDEMATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "RideMatch API"
    api_prefix: str = "/api"

    osrm_base_url: Optional[str] = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "car", "bike", "foot"] = Field(
        default="driving",
        description="OSRM profile to use when computing routes.",
    )
    osrm_timeout_seconds: float = Field(default=10.0, gt=0.0)
    osrm_max_retries: int = Field(default=1, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    fallback_average_speed_kmh: float = Field(
        default=40.0,
        gt=0.0,
        description="Average speed used to estimate durations when routing falls back to local search.",
    )

    pathfinder_step_degrees: float = Field(default=0.01, gt=0.0)
    pathfinder_node_tolerance_degrees: float = Field(default=0.0001, gt=0.0)
    pathfinder_goal_tolerance_km: float = Field(default=0.1, gt=0.0)
    pathfinder_max_expansions: int = Field(
        default=5000,
        ge=1,
        description="Upper bound on node expansions per segment before the straight-line fallback is used.",
    )

    pricing_base_fare: float = Field(default=2.5, ge=0.0)
    pricing_default_rate: float = Field(default=1.2, ge=0.0)

    nearby_radius_km: float = Field(default=5.0, ge=0.0)
    match_score_threshold: float = Field(default=30.0, ge=0.0, le=100.0)

    peer_profile_limit: int = Field(default=20, ge=0)
    peer_fetch_timeout_seconds: float = Field(default=5.0, gt=0.0)
    history_limit: int = Field(default=50, ge=1)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
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

    @field_validator("osrm_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        return value or None


settings = Settings()
