"""Application configuration and settings management."""

from typing import Annotated, Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="EVAC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Evacuation Map API"
    api_prefix: str = "/api"
    environment: str = Field(default="development", description="Deployment environment name.")
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"
    osrm_base_url: Optional[str] = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "walking", "cycling"] = Field(
        default="driving",
        description="OSRM profile to use when requesting evacuation routes.",
    )
    osrm_timeout_seconds: float = Field(default=10.0, gt=0.0)
    # Route failures are reported to the user, never retried silently.
    osrm_max_retries: int = Field(default=0, ge=0)
    osrm_backoff_seconds: float = Field(default=1.0, ge=0.0)
    osrm_geometries: Literal["geojson", "polyline"] = Field(
        default="geojson",
        description="Geometry encoding requested from the OSRM route endpoint.",
    )
    blockage_threshold_m: float = Field(
        default=60.0,
        ge=0.0,
        description="Routes passing within this distance of a blocked point are rejected.",
    )
    default_blockage_radius_m: float = Field(default=70.0, gt=0.0)
    map_center: Annotated[tuple[float, float], NoDecode] = Field(
        default=(26.8467, 80.9462),
        description="Initial map centre as (latitude, longitude).",
    )
    heat_half_box_degrees: float = Field(default=0.25, gt=0.0)
    heat_step_degrees: float = Field(default=0.02, gt=0.0)
    nearest_services_count: int = Field(default=5, ge=1)
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
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

    @field_validator("map_center", mode="before")
    @classmethod
    def _parse_coordinate_from_env(cls, value: Any) -> tuple[float, float]:
        """Parse a (lat, lon) pair from environment variable (comma-separated or JSON array)."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = [item.strip() for item in value.split(",") if item.strip()]
            value = parsed
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        raise ValueError("map_center must be a (latitude, longitude) pair")


settings = Settings()
