"""Retry policies and backoff strategies for ``Program.retry``.

Example:
    >>> from effectcase import effect
    >>> from effectcase.runtime.retry import RetryPolicy, ExponentialBackoff
    >>> from effectcase.foundation.errors import ErrorCode
    >>>
    >>> fetch = effect(read_sensor).retry_with(RetryPolicy(
    ...     max_attempts=4,
    ...     backoff=ExponentialBackoff(base=0.2, max_delay=2.0),
    ...     retryable_codes=frozenset({ErrorCode.IO_ERROR, ErrorCode.TIMEOUT}),
    ... ))
"""

from .backoff import (
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    NoBackoff,
)
from .policy import RetryPolicy, backoff_from_settings, default_policy, validate_count

__all__ = [
    # Backoff strategies
    "Backoff",
    "NoBackoff",
    "ConstantBackoff",
    "LinearBackoff",
    "ExponentialBackoff",
    # Policy
    "RetryPolicy",
    "backoff_from_settings",
    "default_policy",
    "validate_count",
]
