"""
Configuration Management for MoneyNote

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, analytics thresholds and logging are the only knobs;
everything else about the records lives in the store itself.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYNOTE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Which document store backend to use"
    )
    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory holding one JSON file per storage key"
    )
    key_prefix: str = Field(
        default="@moneyNote_",
        min_length=1,
        description="Prefix for every storage key"
    )

    @field_validator("key_prefix")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key prefix cannot contain path separators: {v!r}")
        return v


class AnalyticsSettings(BaseSettings):
    """Thresholds and display fallbacks for the analytics engine."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYNOTE_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    budget_warning_ratio: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Share of a budget limit at which a warning is raised"
    )
    fallback_color: str = Field(
        default="#666",
        description="Color used when a transaction's category has no match"
    )


class RuntimeSettings(BaseSettings):
    """
    Process-level settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONEYNOTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False renders for the console)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def analytics(self) -> AnalyticsSettings:
        return AnalyticsSettings()

    @property
    def runtime(self) -> RuntimeSettings:
        return RuntimeSettings()


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

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry holding the message for each failure.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "analytics", "runtime"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
