"""Error codes and the exceptions raised at the ``run()`` boundary.

Inside a program failures are ErrorTrace values. They become exceptions only
when ``Program.run`` hands an unrecovered failure back to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Self

from .types import ErrorTrace, trace, trace_from_exc


class ErrorCode(StrEnum):
    """Machine-readable failure classification.

    Used by retry filters (``retryable=``) and by callers inspecting a trace.
    """
    FAILED = "FAILED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    END_OF_INPUT = "END_OF_INPUT"
    IO_ERROR = "IO_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_INPUT = "INVALID_INPUT"
    EXCEPTION = "EXCEPTION"
    UNKNOWN = "UNKNOWN"


# Checked in order; TimeoutError must precede its OSError base
_EXCEPTION_CODES: tuple[tuple[type[BaseException], ErrorCode], ...] = (
    (EOFError, ErrorCode.END_OF_INPUT),
    (TimeoutError, ErrorCode.TIMEOUT),
    (OSError, ErrorCode.IO_ERROR),
    (ValueError, ErrorCode.INVALID_INPUT),
    (TypeError, ErrorCode.INVALID_INPUT),
)


@lru_cache(maxsize=256)
def _classify_type(exc_type: type[BaseException]) -> ErrorCode:
    for base, code in _EXCEPTION_CODES:
        if issubclass(exc_type, base):
            return code
    return ErrorCode.EXCEPTION


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map a host exception to an error code by its type."""
    return _classify_type(type(exc))


def failure_from_exc(exc: Exception, operation: str = "") -> ErrorTrace:
    """Turn an exception caught inside a running program into a failure trace.

    A ProgramFailure raised by a nested ``run()`` keeps its original trace.
    """
    if isinstance(exc, ProgramFailure):
        return exc.trace.with_operation(operation) if operation else exc.trace
    return trace_from_exc(exc, operation=operation, code=classify_exception(exc).value)


class ProgramFailure(Exception):
    """Raised by ``Program.run()`` when a program ends in failure.

    Wraps the ErrorTrace so callers keep the code and provenance:

        >>> try:
        ...     fail("boom").run()
        ... except ProgramFailure as e:
        ...     e.code, str(e)
        ('FAILED', 'boom')
    """

    __slots__ = ("trace",)

    def __init__(self, trace: ErrorTrace) -> None:
        self.trace = trace
        super().__init__(trace.message)

    @property
    def code(self) -> str | None:
        return self.trace.error_code

    @classmethod
    def create(cls, message: str = "", code: ErrorCode = ErrorCode.FAILED, *, recoverable: bool = True) -> Self:
        return cls(trace(message, code=code.value, recoverable=recoverable))

    @staticmethod
    def from_trace(t: ErrorTrace) -> ProgramFailure:
        """Pick the most specific exception type for a terminal trace."""
        if t.error_code == ErrorCode.RETRY_EXHAUSTED:
            return RetryExhausted(t)
        return ProgramFailure(t)


class RetryExhausted(ProgramFailure):
    """Terminal failure after a retry budget ran out.

    The message is the last underlying failure's message.
    """


class InvalidCount(ValueError):
    """A retry/repeat count was rejected when the combinator was built."""

    def __init__(self, combinator: str, count: object, reason: str) -> None:
        self.combinator = combinator
        self.count = count
        super().__init__(f"{combinator}: invalid count {count!r} ({reason})")
