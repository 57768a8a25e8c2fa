"""Foundation - building blocks shared by the core and runtime.

Contains: error handling, configuration, testing utilities.
"""

from __future__ import annotations

from .config import EffectcaseSettings, clear_settings_cache, get_settings
from .errors import (
    Err,
    ErrorCode,
    ErrorContext,
    ErrorTrace,
    InvalidCount,
    Ok,
    ProgramFailure,
    Result,
    RetryExhausted,
)

__all__ = [
    # Errors
    "ErrorCode", "ProgramFailure", "RetryExhausted", "InvalidCount",
    "Result", "Ok", "Err", "ErrorContext", "ErrorTrace",
    # Config
    "EffectcaseSettings", "get_settings", "clear_settings_cache",
]
