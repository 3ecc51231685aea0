"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    AuditSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuditSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
