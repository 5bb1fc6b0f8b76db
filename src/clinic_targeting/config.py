"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CTG_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Clinic Territory Targeting API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for local data and exports.")
    territories_file: Path = Field(
        default=Path("data/clinic_territories.json"),
        description="Local territory snapshot used when Supabase is not configured.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
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
        description="Supabase key used for read access to territory tables.",
    )
    territories_table: str = Field(default="clinic_territories")
    locations_table: str = Field(default="TJC Locations GeoCoded")

    # Targeting generation
    competitor_drive_time_minutes: float = Field(default=40.0, gt=0.0)
    sample_max_attempts: int = Field(default=1000, ge=1)
    sample_target_count: int = Field(default=10, ge=1)
    inclusion_spacing_factor: float = Field(default=0.15, ge=0.0)
    exclusion_band_fraction: float = Field(default=0.3, gt=0.0)
    geocode_delay_seconds: float = Field(
        default=0.1,
        ge=0.0,
        description="Minimum spacing between address resolution calls.",
    )
    simplify_default_target: int = Field(default=50, ge=3)

    @field_validator("data_root", "territories_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

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
