"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_BACKENDS = ("otp", "fptf")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_prefix="TJ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    backend: str = Field(default="otp", description="Trip backend: 'otp' or 'fptf'")
    network: str | None = Field(
        default=None, description="Network name attached to parsed lines (e.g. 'MVV')"
    )

    # OpenTripPlanner
    otp_base_url: str = Field(
        default="http://localhost:8080/otp", description="Base URL of the OpenTripPlanner API"
    )
    otp_router: str = Field(default="default", description="OpenTripPlanner router id")
    locale: str = Field(default="de", description="Locale sent with trip requests")
    timezone: str = Field(
        default="Europe/Berlin",
        description="Timezone of the backend, used to format request times (IANA name)",
    )
    num_itineraries: int = Field(default=6, description="Itineraries requested per page")

    # transport.rest (FPTF)
    fptf_base_url: str = Field(
        default="https://v6.db.transport.rest", description="Base URL of a transport.rest API"
    )

    # HTTP
    http_timeout_seconds: int = Field(default=10, description="Timeout for backend requests")
    min_delay_between_requests: float = Field(
        default=1.0, description="Minimum delay in seconds between requests to one API"
    )

    # Live departures (MVG)
    live_departures_enabled: bool = Field(
        default=False, description="Merge MVG real-time departures into departure queries"
    )
    reconciliation_tolerance_seconds: int = Field(
        default=120,
        description="How far a live departure may precede the scheduled one and still match",
    )

    # TOML lookup tables
    config_file: str | None = Field(
        default=None,
        description="Path to TOML file with the network lookup tables (optional)",
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate backend is one of the supported kinds."""
        if v.lower() not in SUPPORTED_BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(SUPPORTED_BACKENDS)}")
        return v.lower()

    @field_validator("num_itineraries")
    @classmethod
    def validate_num_itineraries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("num_itineraries must be at least 1")
        return v

    @field_validator("reconciliation_tolerance_seconds")
    @classmethod
    def validate_tolerance(cls, v: int) -> int:
        if v < 0:
            raise ValueError("reconciliation_tolerance_seconds must not be negative")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}") from None
        return v

    @field_validator("otp_base_url", "fptf_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML lookup tables file.

        Returns an empty dict when no file is configured.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            return tomllib.load(f)
