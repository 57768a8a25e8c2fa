"""Retry policy configuration for ``Program.retry_with``.

A policy bundles the attempt budget, the pause between attempts, and which
failure codes are worth retrying. It is a frozen pydantic model so a policy
can be shared between programs and logged.
"""

from __future__ import annotations

import time
from typing import Annotated, Callable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
)

from effectcase.foundation.config import RetrySettings, get_settings
from effectcase.foundation.errors import ErrorCode, InvalidCount

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff, NoBackoff

_COUNT: TypeAdapter[int] = TypeAdapter(Annotated[int, Field(strict=True)])


class RetryPolicy(BaseModel):
    """How a failing program is re-attempted.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        backoff: Pause strategy between attempts
        retryable_codes: Codes that trigger another attempt (None = every code)
        sleep: Called with each non-zero pause; swap out in tests

    Example:
        >>> policy = RetryPolicy(max_attempts=5, backoff=ConstantBackoff(0.5))
        >>> flaky.retry_with(policy).run()
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_attempts: PositiveInt = 3
    backoff: Backoff = Field(default_factory=NoBackoff, repr=False)
    retryable_codes: frozenset[ErrorCode] | None = None
    sleep: Callable[[float], None] = Field(default=time.sleep, exclude=True, repr=False)

    @field_validator("retryable_codes", mode="before")
    @classmethod
    def _normalize_codes(cls, v: object) -> object:
        """Accept any iterable of strings or ErrorCode members."""
        if v is None or isinstance(v, frozenset) and all(isinstance(c, ErrorCode) for c in v):
            return v
        return frozenset(ErrorCode(c) for c in v)  # type: ignore[attr-defined]

    @field_serializer("retryable_codes")
    def _serialize_codes(self, v: frozenset[ErrorCode] | None) -> list[str] | None:
        return None if v is None else sorted(c.value for c in v)

    def is_retryable(self, code: str | None) -> bool:
        """Whether a failure with ``code`` may be attempted again at all."""
        return self.retryable_codes is None or code in self.retryable_codes

    def has_attempts_after(self, attempt: int) -> bool:
        """Whether the budget allows another attempt after 1-indexed ``attempt``."""
        return attempt < self.max_attempts

    def pause(self, attempt: int) -> float:
        """Sleep before the attempt following 1-indexed ``attempt``. Returns the delay used."""
        delay = self.backoff.delay(attempt - 1)
        if delay > 0:
            self.sleep(delay)
        return delay


def validate_count(combinator: str, n: object, *, minimum: int | None = None) -> int:
    """Check a retry/repeat count, raising InvalidCount for non-ints or values below ``minimum``."""
    try:
        count = _COUNT.validate_python(n)
    except ValidationError as e:
        raise InvalidCount(combinator, n, "not an integer") from e
    if minimum is not None and count < minimum:
        raise InvalidCount(combinator, n, f"must be >= {minimum}")
    return count


def backoff_from_settings(settings: RetrySettings | None = None) -> Backoff:
    """Build the backoff named by EFFECTCASE_RETRY_BACKOFF."""
    s = settings or get_settings().retry
    if s.backoff == "constant":
        return ConstantBackoff(s.base_delay)
    if s.backoff == "exponential":
        return ExponentialBackoff(base=s.base_delay, max_delay=s.max_delay)
    return NoBackoff()


def default_policy(max_attempts: int | None = None) -> RetryPolicy:
    """Policy built from settings, with an optional explicit attempt budget."""
    s = get_settings().retry
    attempts = s.max_attempts if max_attempts is None else validate_count("retry", max_attempts, minimum=1)
    return RetryPolicy(max_attempts=attempts, backoff=backoff_from_settings(s))
