"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from datetime import time
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gbg_feeds.adapters.gbgcamera_api.constants import GBGCAMERA_BASE_URL
from gbg_feeds.adapters.schoolmeal_api.constants import SCHOOLMEAL_BASE_URL
from gbg_feeds.adapters.throttling import THROTTLE_STRATEGIES
from gbg_feeds.adapters.vasttrafik_api.constants import VASTTRAFIK_BASE_URL, VASTTRAFIK_TOKEN_URL

# TOML section name -> prefix of the settings it may override
TOML_SECTIONS = {
    "vasttrafik": "vasttrafik_",
    "schoolmeal": "schoolmeal_",
    "gbgcamera": "gbgcamera_",
    "sink": "sink_",
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Västtrafik departures
    vasttrafik_base_url: str = Field(default=VASTTRAFIK_BASE_URL, description="Base URL of the departure board API")
    vasttrafik_access_token_url: str = Field(default=VASTTRAFIK_TOKEN_URL, description="OAuth2 token endpoint")
    vasttrafik_consumer_key: str = Field(default="", description="OAuth2 client id")
    vasttrafik_consumer_secret: str = Field(default="", description="OAuth2 client secret")
    vasttrafik_bucket_capacity: int = Field(default=40, ge=1, description="Requests per refill window")
    vasttrafik_refill_interval_ms: int = Field(default=60_000, ge=1, description="Refill window in milliseconds")
    vasttrafik_poll_interval_seconds: int = Field(default=10, ge=1, description="Seconds between departure polls")

    # Skolmaten menus
    schoolmeal_base_url: str = Field(default=SCHOOLMEAL_BASE_URL, description="Base URL of the menu API")
    schoolmeal_client: str = Field(default="", description="Static client id sent with every menu request")
    schoolmeal_version_token: str | None = Field(default=None, description="Optional API version token")
    schoolmeal_school_id: str = Field(default="it-gymnasiet-goteborg", description="School whose menu is polled")
    schoolmeal_bucket_capacity: int = Field(default=2, ge=1, description="Requests per refill window")
    schoolmeal_refill_interval_ms: int = Field(default=12_000, ge=1, description="Refill window in milliseconds")
    schoolmeal_poll_interval_minutes: int = Field(default=30, ge=1, description="Minutes between menu polls")
    schoolmeal_force_refresh_at: time = Field(
        default=time(0, 0), description="Local time of the daily refresh that ignores If-Modified-Since"
    )

    # Göteborg traffic cameras
    gbgcamera_base_url: str = Field(default=GBGCAMERA_BASE_URL, description="Base URL of the camera API")
    gbgcamera_apikey: str = Field(default="", description="API key placed in the request path")
    gbgcamera_cameras: list[int] = Field(default_factory=lambda: [17], description="Camera ids to snapshot")
    gbgcamera_bucket_capacity: int = Field(default=2, ge=1, description="Requests per refill window")
    gbgcamera_refill_interval_ms: int = Field(default=60_000, ge=1, description="Refill window in milliseconds")
    gbgcamera_poll_interval_seconds: int = Field(default=30, ge=1, description="Seconds between camera polls")

    throttle_strategy: str = Field(
        default="token_bucket", description="Throttle implementation: 'token_bucket' or 'fixed_window'"
    )

    # Sink
    sink_backend: str = Field(default="memory", description="Sink backend: 'memory' or 'rest'")
    sink_url: str | None = Field(default=None, description="Base URL of the REST key-value store")
    sink_auth_token: str | None = Field(default=None, description="Token sent as the 'auth' query parameter")
    sink_poll_interval_seconds: float = Field(
        default=5.0, gt=0, description="Seconds between reads of a subscribed REST path"
    )

    image_directory: str = Field(default="images", description="Directory camera snapshots are written to")
    timezone: str = Field(
        default="Europe/Stockholm",
        description="Timezone schedules and departure times are evaluated in (IANA name)",
    )
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Total timeout per HTTP request")

    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file with per-source overrides and [[stops]]",
    )

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores the process .env file."""
        return cls(_env_file=None, **overrides)

    @field_validator("throttle_strategy")
    @classmethod
    def validate_throttle_strategy(cls, v: str) -> str:
        """Validate the throttle strategy is a known one."""
        v = v.lower()
        if v not in THROTTLE_STRATEGIES:
            raise ValueError(f"throttle_strategy must be one of {sorted(THROTTLE_STRATEGIES)}")
        return v

    @field_validator("sink_backend")
    @classmethod
    def validate_sink_backend(cls, v: str) -> str:
        """Validate sink backend is either 'memory' or 'rest'."""
        if v.lower() not in ("memory", "rest"):
            raise ValueError("sink_backend must be either 'memory' or 'rest'")
        return v.lower()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tz(self) -> ZoneInfo:
        """Configured timezone as a tzinfo."""
        return ZoneInfo(self.timezone)

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, applying per-source section overrides.

        A key ``bucket_capacity`` in ``[vasttrafik]`` overrides
        ``vasttrafik_bucket_capacity``. Unknown keys are ignored. Returns an
        empty dict when no config file is set.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        for section, prefix in TOML_SECTIONS.items():
            values = toml_data.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(f"TOML config '{section}' must be a table")
            for key, value in values.items():
                field_name = f"{prefix}{key}"
                if field_name in type(self).model_fields:
                    setattr(self, field_name, value)

        general = toml_data.get("general", {})
        if isinstance(general, dict):
            for key in ("throttle_strategy", "image_directory", "timezone", "request_timeout_seconds"):
                if key in general:
                    setattr(self, key, general[key])

        return toml_data

    def load_file(self) -> None:
        """Apply overrides from the TOML file, if one is configured."""
        self._load_toml_data()

    def get_stops_config(self) -> list[dict[str, Any]]:
        """Parse and return the ``[[stops]]`` entries from the TOML file."""
        toml_data = self._load_toml_data()

        stops = toml_data.get("stops", [])
        if not isinstance(stops, list):
            raise ValueError("TOML config 'stops' must be a list")
        return [s for s in stops if isinstance(s, dict)]
