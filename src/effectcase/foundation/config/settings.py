"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for logging, retry budgets and the
bundled welcome program. Supports .env files and nested configuration.

Example:
    >>> from effectcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_attempts
    3
    >>> settings.welcome.accepted_name
    'Joe'

    # Or with environment variables:
    # EFFECTCASE_RETRY_MAX_ATTEMPTS=5
    # EFFECTCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveFloat, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EFFECTCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrySettings(BaseSettings):
    """Defaults used by ``Program.retry()`` when no count is given."""

    model_config = SettingsConfigDict(
        env_prefix="EFFECTCASE_RETRY_",
        extra="ignore",
    )

    max_attempts: PositiveInt = Field(default=3, description="Total attempts, first one included")
    backoff: Literal["none", "constant", "exponential"] = "none"
    base_delay: PositiveFloat = Field(default=0.1, description="Base delay in seconds")
    max_delay: PositiveFloat = Field(default=5.0, description="Maximum delay in seconds")


class WelcomeSettings(BaseSettings):
    """Texts and budget of the bundled welcome program."""

    model_config = SettingsConfigDict(
        env_prefix="EFFECTCASE_WELCOME_",
        extra="ignore",
    )

    accepted_name: str = Field(default="Joe", min_length=1)
    attempts: PositiveInt = 1000
    prompt: str = "Hi, what is your name?"
    rejection: str = "No soup for you!!!"
    greeting: str = Field(default="Welcome {name}!", description="Formatted with name=<accepted name>")

    @field_validator("greeting")
    @classmethod
    def _check_greeting(cls, v: str) -> str:
        try:
            v.format(name="")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"greeting may only use the {{name}} placeholder: {e}") from e
        return v


class EffectcaseSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with EFFECTCASE_ prefix.

    Example environment variables:
        EFFECTCASE_DEBUG=true
        EFFECTCASE_LOG_FORMAT=json
        EFFECTCASE_RETRY_BACKOFF=exponential
        EFFECTCASE_WELCOME_ACCEPTED_NAME=Ann
    """

    model_config = SettingsConfigDict(
        env_prefix="EFFECTCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Log at DEBUG regardless of EFFECTCASE_LOG_LEVEL")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    welcome: WelcomeSettings = Field(default_factory=WelcomeSettings)

    @computed_field
    @property
    def log_level(self) -> str:
        """Effective log level after applying ``debug``."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> EffectcaseSettings:
    """Get the global settings instance (cached)."""
    return EffectcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
