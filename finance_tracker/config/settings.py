"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable the application reads at runtime is declared in one of
the settings classes below and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """SQLite storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default="finance_tracker.db",
        description="Path to the SQLite database file (':memory:' for a throwaway database)"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="How long a connection waits on a locked database"
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject an empty path; ':memory:' is passed through untouched."""
        if not v.strip():
            raise ValueError("Database path cannot be empty")
        return v.strip()

    @property
    def is_memory(self) -> bool:
        return self.path == ":memory:"

    @property
    def resolved_path(self) -> Path:
        """Database path with the user's home expanded."""
        return Path(self.path).expanduser()


class TaxSettings(BaseSettings):
    """Tax calculator configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    strict_jurisdictions: bool = Field(
        default=False,
        description=(
            "Raise UnsupportedJurisdictionError for state codes without a bracket "
            "table instead of reporting zero state tax"
        )
    )


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
    app_environment: str = Field(
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

    # API
    api_title: str = Field(
        default="Finance Tracker API",
        description="Title shown in the OpenAPI document"
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="Interface the API server binds to"
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port the API server listens on"
    )

    # Reports
    upcoming_payment_window_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="How many days ahead a subscription payment counts as upcoming"
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

    # Sub-settings are loaded lazily so a broken section only fails
    # the code path that needs it.

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def tax(self) -> TaxSettings:
        return TaxSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<setting_name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results: dict[str, bool | str] = {}

    settings = get_settings()

    for name in ("database", "tax", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
