"""Core: settings, per-app configuration, and shared constants."""

from firetables.core.config import (
    AppConfig,
    ServiceAccountCredentials,
    Settings,
    get_settings,
)

__all__ = ["AppConfig", "ServiceAccountCredentials", "Settings", "get_settings"]
