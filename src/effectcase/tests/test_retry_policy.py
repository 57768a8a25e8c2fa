"""Tests for retry policies, backoff strategies and count validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from effectcase.foundation.config import RetrySettings
from effectcase.foundation.errors import ErrorCode, InvalidCount
from effectcase.runtime.retry import (
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    NoBackoff,
    RetryPolicy,
    backoff_from_settings,
    default_policy,
    validate_count,
)


# ═════════════════════════════════════════════════════════════════════════════
# Backoff
# ═════════════════════════════════════════════════════════════════════════════


def test_backoff_delays() -> None:
    assert [NoBackoff().delay(i) for i in range(3)] == [0.0, 0.0, 0.0]
    assert [ConstantBackoff(0.5).delay(i) for i in range(3)] == [0.5, 0.5, 0.5]
    assert [LinearBackoff(base=1, increment=2, max_delay=4).delay(i) for i in range(4)] == [1, 3, 4, 4]
    exp = ExponentialBackoff(base=0.5, max_delay=3.0, jitter=False)
    assert [exp.delay(i) for i in range(4)] == [0.5, 1.0, 2.0, 3.0]


def test_exponential_jitter_bounds() -> None:
    exp = ExponentialBackoff(base=2.0, max_delay=100.0)
    for _ in range(50):
        assert 1.0 <= exp.delay(0) <= 3.0


def test_backoffs_satisfy_protocol() -> None:
    for b in (NoBackoff(), ConstantBackoff(), LinearBackoff(), ExponentialBackoff()):
        assert isinstance(b, Backoff)


# ═════════════════════════════════════════════════════════════════════════════
# RetryPolicy
# ═════════════════════════════════════════════════════════════════════════════


def test_policy_budget() -> None:
    policy = RetryPolicy(max_attempts=3)
    assert [policy.has_attempts_after(a) for a in (1, 2, 3)] == [True, True, False]


def test_policy_rejects_zero_attempts() -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(max_attempts=0)


def test_policy_is_frozen() -> None:
    policy = RetryPolicy()
    with pytest.raises(ValidationError):
        policy.max_attempts = 10  # type: ignore[misc]


def test_retryable_codes_normalized() -> None:
    policy = RetryPolicy(retryable_codes=["IO_ERROR", ErrorCode.TIMEOUT])
    assert policy.retryable_codes == frozenset({ErrorCode.IO_ERROR, ErrorCode.TIMEOUT})
    assert policy.is_retryable("IO_ERROR")
    assert not policy.is_retryable(ErrorCode.FAILED)
    assert RetryPolicy().is_retryable(None)


def test_unknown_retryable_code_rejected() -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(retryable_codes=["NOT_A_CODE"])


def test_policy_dump() -> None:
    data = RetryPolicy(max_attempts=2, retryable_codes=[ErrorCode.TIMEOUT, ErrorCode.IO_ERROR]).model_dump()
    assert data["max_attempts"] == 2
    assert data["retryable_codes"] == ["IO_ERROR", "TIMEOUT"]
    assert "sleep" not in data


def test_pause_skips_sleep_for_zero_delay() -> None:
    sleeps: list[float] = []
    assert RetryPolicy(sleep=sleeps.append).pause(1) == 0.0
    assert sleeps == []
    assert RetryPolicy(backoff=LinearBackoff(base=1, increment=1), sleep=sleeps.append).pause(2) == 2.0
    assert sleeps == [2.0]


# ═════════════════════════════════════════════════════════════════════════════
# Settings integration
# ═════════════════════════════════════════════════════════════════════════════


def test_backoff_from_settings() -> None:
    assert backoff_from_settings(RetrySettings()) == NoBackoff()
    assert backoff_from_settings(RetrySettings(backoff="constant", base_delay=0.2)) == ConstantBackoff(0.2)
    assert backoff_from_settings(RetrySettings(backoff="exponential", base_delay=0.5, max_delay=2.0)) == (
        ExponentialBackoff(base=0.5, max_delay=2.0)
    )


def test_default_policy() -> None:
    assert default_policy().max_attempts == 3
    assert default_policy(7).max_attempts == 7
    with pytest.raises(InvalidCount):
        default_policy(0)


def test_validate_count() -> None:
    assert validate_count("repeat", -3) == -3
    assert validate_count("retry", 5, minimum=1) == 5
    with pytest.raises(InvalidCount, match="must be >= 1"):
        validate_count("retry", 0, minimum=1)
    with pytest.raises(InvalidCount, match="not an integer"):
        validate_count("repeat", 1.0)
