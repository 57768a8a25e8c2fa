"""Configuration management using pydantic-settings."""

from .settings import (
    EffectcaseSettings,
    LoggingSettings,
    RetrySettings,
    WelcomeSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "EffectcaseSettings",
    "LoggingSettings",
    "RetrySettings",
    "WelcomeSettings",
    "clear_settings_cache",
    "get_settings",
]
