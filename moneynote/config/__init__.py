"""Configuration package."""

from moneynote.config.settings import (
    AnalyticsSettings,
    RuntimeSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AnalyticsSettings",
    "RuntimeSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
