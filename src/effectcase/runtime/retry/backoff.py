"""Pauses between retry attempts.

A backoff maps the 0-indexed number of failures so far to a delay in
seconds. ``RetryPolicy.pause`` sleeps for it; zero means retry at once.

    >>> [ExponentialBackoff(base=0.5, max_delay=3.0, jitter=False).delay(n) for n in range(4)]
    [0.5, 1.0, 2.0, 3.0]
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """``delay(0)`` is the pause after the first failed attempt."""

    def delay(self, attempt: int) -> float: ...


@dataclass(frozen=True, slots=True)
class NoBackoff:
    """Retry immediately. The default."""

    def delay(self, attempt: int) -> float:
        return 0.0


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    delay_seconds: float = 1.0

    def delay(self, attempt: int) -> float:
        return max(self.delay_seconds, 0.0)


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """``base``, then ``increment`` more per failure, never above ``max_delay``."""

    base: float = 1.0
    increment: float = 1.0
    max_delay: float = 30.0

    def delay(self, attempt: int) -> float:
        grown = self.base + attempt * self.increment
        return grown if grown < self.max_delay else self.max_delay


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """``base * multiplier ** attempt`` capped at ``max_delay``.

    With ``jitter`` the capped value is scaled by a random factor in [0.5, 1.5].
    Turn it off in tests.
    """

    base: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        capped = min(self.max_delay, self.base * self.multiplier**attempt)
        if not self.jitter:
            return capped
        return capped * random.uniform(0.5, 1.5)
