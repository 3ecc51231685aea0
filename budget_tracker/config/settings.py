"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, but components
never look it up themselves. The application factory reads the settings
once and passes explicit directory paths into each component.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Day-partitioned JSON storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one YYYY-MM-DD.json file per day"
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when writing partition files"
    )


class AuditSettings(BaseSettings):
    """Audit log configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_AUDIT_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Write an audit line for every added entry"
    )
    log_dir: Path = Field(
        default=Path("logs"),
        description="Directory for the audit log"
    )
    log_filename: str = Field(
        default="transactions.log",
        min_length=1,
        description="Audit log file name inside log_dir"
    )

    @field_validator('log_filename')
    @classmethod
    def validate_log_filename(cls, v: str) -> str:
        """The audit log must be a plain file name, not a path."""
        if Path(v).name != v:
            raise ValueError(f"log_filename must not contain directories: {v}")
        return v

    @property
    def log_path(self) -> Path:
        """Full path of the audit log file."""
        return self.log_dir / self.log_filename


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
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for structured logs"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown in front of amounts in reports"
    )

    @field_validator('log_level')
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
    def audit(self) -> AuditSettings:
        return AuditSettings()

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "audit", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
