"""Application configuration and settings management."""

from datetime import time
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CLOZER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Clozer Tour Planner API"
    api_prefix: str = "/api"

    depot_latitude: float = Field(default=45.6486, ge=-90.0, le=90.0)
    depot_longitude: float = Field(default=0.1556, ge=-180.0, le=180.0)
    depot_label: str = Field(default="Angoulême", description="Name used for the proximity tour suggestion.")

    work_start_time: time = Field(default=time(8, 30))
    work_end_time: time = Field(default=time(18, 0))
    lunch_break_start: Optional[time] = Field(default=time(12, 0))
    lunch_break_end: Optional[time] = Field(default=time(13, 30))
    default_visit_duration_minutes: int = Field(default=30, ge=1)
    late_profile_threshold: time = Field(
        default=time(17, 30),
        description="Contacts only available outside working hours are best visited after this time.",
    )

    travel_overhead_per_stop_minutes: int = Field(default=15, ge=0)
    average_speed_kmh: float = Field(default=50.0, gt=0.0)
    max_suggestions: int = Field(default=5, ge=1)
    medium_priority_min_stops: int = Field(default=5, ge=1)
    max_stops_per_tour: int = Field(default=60, ge=1)

    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for the OSRM routing service (e.g., https://router.project-osrm.org).",
    )
    osrm_profile: Literal["driving", "car", "bike", "foot"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    osrm_max_retries: int = Field(default=2, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    osrm_timeout_seconds: float = Field(default=15.0, gt=0.0)

    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "Clozer-TourApp/1.0"
    geocode_country_codes: str = "fr"
    geocode_region_hint: str = Field(default="Charente", description="Region appended to the last-resort city query.")
    geocode_min_interval_seconds: float = Field(default=1.1, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator(
        "work_start_time",
        "work_end_time",
        "lunch_break_start",
        "lunch_break_end",
        "late_profile_threshold",
        mode="before",
    )
    @classmethod
    def _parse_clock(cls, value: Any) -> Any:
        """Accept ``HH:MM`` strings; an empty string disables optional times."""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            hours, _, minutes = value.partition(":")
            return time(int(hours), int(minutes or 0))
        return value

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
