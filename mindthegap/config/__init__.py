"""Configuration package."""

from mindthegap.config.settings import (
    ApiSettings,
    AppSettings,
    GoogleSheetsSettings,
    ServerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "GoogleSheetsSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
