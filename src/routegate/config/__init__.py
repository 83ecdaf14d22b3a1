"""Configuration layer"""

from .settings import (
    CORS_ALLOWED_LIST_KEY,
    ConfigLookup,
    Settings,
    SettingsConfigLookup,
    StaticConfigLookup,
    get_settings,
)

__all__ = [
    "CORS_ALLOWED_LIST_KEY",
    "ConfigLookup",
    "Settings",
    "SettingsConfigLookup",
    "StaticConfigLookup",
    "get_settings",
]
