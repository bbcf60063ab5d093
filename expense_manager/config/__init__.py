"""Configuration package."""

from expense_manager.config.settings import (
    AppSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
