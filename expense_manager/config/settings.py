"""
Configuration Management for Expense Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a default, so the console application runs
with no environment at all. Variables only tune logging and storage.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_LOG_",
        extra="ignore"
    )
    
    level: str = Field(
        default="WARNING",
        description="Minimum level for log output"
    )
    json_format: bool = Field(
        default=False,
        description="Render log lines as JSON instead of key=value text"
    )
    file: Optional[Path] = Field(
        default=None,
        description="Write logs to this file instead of stderr"
    )
    
    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown ones."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level {v!r}. Expected one of: {', '.join(LOG_LEVELS)}"
            )
        return level


class StorageSettings(BaseSettings):
    """Snapshot file storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_STORAGE_",
        extra="ignore"
    )
    
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of snapshot files"
    )
    fsync: bool = Field(
        default=True,
        description="fsync snapshot files before replacing the target"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (forces DEBUG logging)"
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
    
    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
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
    {setting_name}_error entries for sections that failed.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("logging", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
