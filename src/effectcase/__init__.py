"""effectcase: describe side-effecting programs as values, run them later.

A Program is an inert description. Building one does nothing; ``run()``
performs the described steps, in order, every time it is called.

Example:
    >>> from effectcase import fail, get_line, if_else, put_line
    >>>
    >>> welcome = (put_line("Hi, what is your name?") >> get_line()).and_then(
    ...     lambda name: if_else(
    ...         name == "Joe",
    ...         put_line("Welcome Joe!"),
    ...         put_line("No soup for you!!!") >> fail(),
    ...     )
    ... ).retry(1000)
    >>> welcome.run()

Failures are ErrorTrace values inside a program and surface as
ProgramFailure (or RetryExhausted) only at ``run()``. ``run_result()``
returns the outcome as a Result instead.
"""

from .core import (
    Program,
    effect,
    fail,
    from_result,
    if_else,
    sequence,
    succeed,
    succeed_lazy,
    traverse,
    unit,
)
from .foundation.config import EffectcaseSettings, get_settings
from .foundation.errors import (
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
from .io import Console, StdConsole, get_line, put_line
from .runtime.observability import configure_logging, get_logger
from .runtime.retry import (
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    NoBackoff,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    # Program
    "Program", "succeed", "succeed_lazy", "fail", "effect", "from_result", "if_else", "unit",
    "sequence", "traverse",
    # Console
    "Console", "StdConsole", "put_line", "get_line",
    # Errors
    "ErrorCode", "ErrorContext", "ErrorTrace", "ProgramFailure", "RetryExhausted", "InvalidCount",
    "Result", "Ok", "Err",
    # Retry
    "RetryPolicy", "Backoff", "NoBackoff", "ConstantBackoff", "LinearBackoff", "ExponentialBackoff",
    # Config / logging
    "EffectcaseSettings", "get_settings", "configure_logging", "get_logger",
]
