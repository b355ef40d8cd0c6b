"""
Configuration Management for Mind the Gap

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Backend API client configuration (remote persistence mode)."""

    model_config = SettingsConfigDict(
        env_prefix="MINDTHEGAP_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the household/donations API"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Per-request timeout"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for idempotent reads before giving up"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration (backend system of record)."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    households_sheet_name: str = Field(
        default="Households",
        description="Name of the sheet for households"
    )
    donations_sheet_name: str = Field(
        default="Donations",
        description="Name of the sheet for donations"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the API server."
            )
        return v


class ServerSettings(BaseSettings):
    """Backend API server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MINDTHEGAP_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage_backend: Literal["memory", "google_sheets"] = Field(
        default="memory",
        description="Where households and donations are stored"
    )
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Persistence strategy
    persistence_mode: Literal["remote", "local"] = Field(
        default="remote",
        description="remote = backend API + cookie, local = client storage + link"
    )
    public_url: str = Field(
        default="http://localhost:8501/",
        description="Public URL of the dashboard (base for share links)"
    )
    share_param: str = Field(
        default="d",
        min_length=1,
        description="Query parameter carrying shared state"
    )
    cookie_name: str = Field(
        default="mindthegap_household",
        description="Cookie holding the active household identifier"
    )
    cookie_max_age_days: int = Field(
        default=30,
        ge=1,
        le=400,
        description="Session cookie lifetime in days"
    )
    storage_key: str = Field(
        default="mindthegap_snapshot",
        description="Durable storage key of the local snapshot"
    )
    local_storage_dir: str = Field(
        default=".mindthegap/browsers",
        description="Directory holding one storage file per browser (local mode)"
    )
    browser_cookie_name: str = Field(
        default="mindthegap_browser",
        description="Cookie holding the token that selects this browser's storage file"
    )
    browser_cookie_max_age_days: int = Field(
        default=400,
        ge=1,
        le=400,
        description="Browser token cookie lifetime in days"
    )

    # Presentation
    message_timeout_seconds: float = Field(
        default=3.2,
        gt=0,
        le=60,
        description="How long transient messages stay visible"
    )
    grouping_separator: str = Field(
        default=".",
        max_length=1,
        description="Digit grouping separator (nl-NL uses '.')"
    )
    currency_symbol: str = Field(
        default="€",
        description="Currency symbol for display"
    )
    show_self_in_comparison: bool = Field(
        default=True,
        description="Add the household's own total to the billionaire chart"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def server(self) -> ServerSettings:
        return ServerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failing ones.
    """
    results = {}
    settings = get_settings()

    for name in ("api", "google_sheets", "server", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
