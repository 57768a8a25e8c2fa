"""Unified error handling for effectcase.

- ErrorCode: Failure classification
- ProgramFailure/RetryExhausted: Exceptions raised at the run() boundary
- Result/Ok/Err: Explicit success-or-failure returned by program steps
- ErrorTrace/ErrorContext: Failure payload with provenance tracking
"""

from .errors import ErrorCode, InvalidCount, ProgramFailure, RetryExhausted, classify_exception, failure_from_exc
from .result import Err, Ok, Result
from .types import (
    ErrorContext,
    ErrorTrace,
    JsonDict,
    JsonValue,
    context,
    trace,
    trace_from_exc,
    validate_trace,
)

__all__ = [
    # Codes and exceptions
    "ErrorCode", "ProgramFailure", "RetryExhausted", "InvalidCount", "classify_exception", "failure_from_exc",
    # Result
    "Result", "Ok", "Err",
    # Trace
    "ErrorContext", "ErrorTrace", "context", "trace", "trace_from_exc", "validate_trace",
    # JSON aliases
    "JsonDict", "JsonValue",
]
