"""Configuration package - Settings and protocol constants."""

from .settings import (
    AppSettings,
    TokenizerSettings,
    StorageSettings,
    get_settings,
    AUTHORIZATION_HEADER,
    SESSION_HASH_HEADER,
    CONFIG_DEFAULTS,
)

__all__ = [
    "AppSettings",
    "TokenizerSettings",
    "StorageSettings",
    "get_settings",
    "AUTHORIZATION_HEADER",
    "SESSION_HASH_HEADER",
    "CONFIG_DEFAULTS",
]
