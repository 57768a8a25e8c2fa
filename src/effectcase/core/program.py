"""Program: an inert, composable description of a side-effecting computation.

Building a Program never does any work. Only ``run()`` (or ``run_result()``)
executes the described steps, and every call executes them again from the
start. Nothing is cached between runs.

Each Program wraps one deferred step: a zero-argument callable returning
``Ok(value)`` or ``Err(ErrorTrace)``. Combinators build new steps around
existing ones:

- Construction: succeed, succeed_lazy, fail, effect, from_result
- Sequencing: and_then / flat_map, map, then (``>>``), tap, as_
- Recovery: recover, or_else, map_error, with_context, attempt
- Retry & repeat: retry, retry_with, repeat (loops, not recursion)
- Selection: if_else

Example:
    >>> from effectcase import effect, fail, if_else, put_line, get_line
    >>>
    >>> greet = (put_line("Hi, what is your name?") >> get_line()).and_then(
    ...     lambda name: if_else(
    ...         name == "Joe",
    ...         put_line("Welcome Joe!"),
    ...         put_line("No soup for you!!!") >> fail(),
    ...     )
    ... ).retry(3)
    >>> greet.run()  # nothing happened until this line
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, NoReturn, TypeVar

from effectcase.foundation.errors import (
    Err,
    ErrorCode,
    ErrorTrace,
    Ok,
    ProgramFailure,
    Result,
    failure_from_exc,
    trace,
)
from effectcase.runtime.observability import get_logger
from effectcase.runtime.retry import Backoff, RetryPolicy, default_policy, validate_count

if TYPE_CHECKING:
    from collections.abc import Iterable

A = TypeVar("A", covariant=True)
B = TypeVar("B")
T = TypeVar("T")

Step = Callable[[], Result[T, ErrorTrace]]

_log = get_logger("effectcase.program")


class Program(Generic[A]):
    """A deferred computation producing ``A`` or failing with an ErrorTrace.

    Covariant in ``A``: ``fail()`` returns ``Program[NoReturn]``, which fits
    anywhere a ``Program[A]`` is expected.

    Programs are immutable. Combinators return new programs and never touch
    the receiver.
    """

    __slots__ = ("_step", "_label")

    def __init__(self, step: Step[A], label: str = "program") -> None:
        """Private constructor. Use succeed(), fail() or effect() instead."""
        self._step = step
        self._label = label

    # ─── Running ──────────────────────────────────────────────────────

    def run(self) -> A:
        """Execute every step once, in order.

        Raises:
            RetryExhausted: If a retry budget ran out
            ProgramFailure: For any other unrecovered failure
        """
        result = self._step()
        if result.is_ok():
            return result.unwrap()
        raise ProgramFailure.from_trace(result.unwrap_err())

    def run_result(self) -> Result[A, ErrorTrace]:
        """Execute every step once, returning the outcome instead of raising."""
        return self._step()

    # ─── Sequencing ───────────────────────────────────────────────────

    def and_then(self, f: Callable[[A], Program[B]]) -> Program[B]:
        """Run this program, feed its value to ``f``, run the program ``f`` returns.

        A failure here skips ``f`` entirely. An exception raised by ``f`` is a
        failure at this point of the chain.
        """
        step = self._step

        def bound() -> Result[B, ErrorTrace]:
            first = step()
            if first.is_err():
                return first  # type: ignore[return-value]
            try:
                nxt = f(first.unwrap())
            except Exception as exc:
                return Err(failure_from_exc(exc, "and_then"))
            return _run_next(nxt, "and_then")

        return Program(bound, "and_then")

    flat_map = and_then

    def map(self, g: Callable[[A], B]) -> Program[B]:
        """Transform the produced value without adding a side-effecting step."""
        return self.flat_map(lambda a: succeed(g(a)))

    def then(self, that: Program[B]) -> Program[B]:
        """Run this program, discard its value, then run ``that``. Also ``self >> that``."""
        _require_program(that, "then")
        return self.and_then(lambda _: that)

    def __rshift__(self, that: Program[B]) -> Program[B]:
        return self.then(that)

    def tap(self, f: Callable[[A], object]) -> Program[A]:
        """Call ``f`` with the produced value when run, keep the value."""
        step = self._step

        def tapped() -> Result[A, ErrorTrace]:
            result = step()
            if result.is_ok():
                try:
                    f(result.unwrap())
                except Exception as exc:
                    return Err(failure_from_exc(exc, "tap"))
            return result

        return Program(tapped, "tap")

    def as_(self, value: B) -> Program[B]:
        """Replace the produced value with ``value``."""
        return self.map(lambda _: value)

    # ─── Recovery ─────────────────────────────────────────────────────

    def recover(self, handler: Callable[[ErrorTrace], Program[B]]) -> Program[A | B]:
        """On failure, run the program ``handler`` builds from the failure.

        The handler is never called on success. A failure of the substitute,
        or an exception raised by the handler, propagates from here.
        """
        step = self._step

        def recovered() -> Result[A | B, ErrorTrace]:
            result = step()
            if result.is_ok():
                return result  # type: ignore[return-value]
            try:
                substitute = handler(result.unwrap_err())
            except Exception as exc:
                return Err(failure_from_exc(exc, "recover"))
            return _run_next(substitute, "recover")

        return Program(recovered, "recover")

    def or_else(self, that: Program[B]) -> Program[A | B]:
        """On failure, run ``that`` instead."""
        _require_program(that, "or_else")
        return self.recover(lambda _: that)

    def map_error(self, f: Callable[[ErrorTrace], ErrorTrace]) -> Program[A]:
        """Rewrite the failure trace, leaving success untouched."""
        step = self._step

        def mapped() -> Result[A, ErrorTrace]:
            result = step()
            if result.is_ok():
                return result
            try:
                return Err(f(result.unwrap_err()))
            except Exception as exc:
                return Err(failure_from_exc(exc, "map_error"))

        return Program(mapped, "map_error")

    def with_context(self, operation: str, **metadata: object) -> Program[A]:
        """Record ``operation`` on the trace of any failure passing through."""
        return self.map_error(lambda t: t.with_operation(operation, **metadata))  # type: ignore[arg-type]

    def attempt(self) -> Program[Result[A, ErrorTrace]]:
        """Never fails: the outcome becomes the produced value."""
        step = self._step
        return Program(lambda: Ok(step()), "attempt")

    # ─── Retry & Repeat ───────────────────────────────────────────────

    def retry(
        self,
        n: int | None = None,
        *,
        backoff: Backoff | None = None,
        retryable: Iterable[ErrorCode | str] | None = None,
    ) -> Program[A]:
        """Attempt this program up to ``n`` times in total.

        Args:
            n: Total attempts (>= 1). None uses EFFECTCASE_RETRY_MAX_ATTEMPTS.
            backoff: Pause between attempts. None uses EFFECTCASE_RETRY_BACKOFF.
            retryable: Only failures with these codes are attempted again.

        Raises:
            InvalidCount: If ``n`` is not an integer >= 1 (raised here, not at run)

        When the budget runs out the failure becomes terminal: code
        RETRY_EXHAUSTED, not recoverable, message of the last failure.
        """
        base = default_policy(n)
        return self.retry_with(RetryPolicy(
            max_attempts=base.max_attempts,
            backoff=base.backoff if backoff is None else backoff,
            retryable_codes=None if retryable is None else frozenset(retryable),
        ))

    def retry_with(self, policy: RetryPolicy) -> Program[A]:
        """Retry according to a full RetryPolicy."""
        step = self._step

        def retrying() -> Result[A, ErrorTrace]:
            attempt = 1
            while True:
                result = step()
                if result.is_ok():
                    return result
                failure = result.unwrap_err()
                if not policy.is_retryable(failure.error_code):
                    return result
                if not policy.has_attempts_after(attempt):
                    _log.info("retry budget exhausted", attempts=attempt, error=failure.message)
                    return Err(_exhausted(failure, attempt))
                delay = policy.pause(attempt)
                _log.debug(
                    "attempt failed",
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    error=failure.message,
                    code=failure.error_code,
                    delay=delay,
                )
                attempt += 1

        return Program(retrying, f"retry({policy.max_attempts})")

    def repeat(self, n: int) -> Program[A]:
        """Run this program ``n`` times in sequence, producing the last value.

        Every repetition re-runs the whole description. Counts below 1 run it
        once. The first failure stops the repetition and propagates.

        Raises:
            InvalidCount: If ``n`` is not an integer
        """
        times = max(validate_count("repeat", n), 1)
        step = self._step

        def repeating() -> Result[A, ErrorTrace]:
            result = step()
            for iteration in range(2, times + 1):
                if result.is_err():
                    break
                _log.debug("repeat", iteration=iteration, times=times)
                result = step()
            return result

        return Program(repeating, f"repeat({times})")

    def __repr__(self) -> str:
        return f"Program({self._label})"


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def succeed(value: T) -> Program[T]:
    """A program that produces ``value``."""
    return Program(lambda: Ok(value), "succeed")


def succeed_lazy(thunk: Callable[[], T]) -> Program[T]:
    """A program that evaluates ``thunk()`` on every run, never before."""
    return effect(thunk, label="succeed_lazy")


def fail(message: str = "") -> Program[NoReturn]:
    """A program that always fails with ``message`` (code FAILED)."""
    return Program(lambda: Err(trace(message, code=ErrorCode.FAILED.value)), f"fail({message!r})")


def effect(thunk: Callable[[], T], *, name: str | None = None, label: str | None = None) -> Program[T]:
    """Lift a zero-argument side-effecting callable into a Program.

    Exceptions raised by ``thunk`` become failures with a classified code and
    the formatted traceback in ``details``. When ``name`` is given the trace
    records an ``effect:<name>`` context.
    """
    operation = f"effect:{name}" if name else ""

    def suspended() -> Result[T, ErrorTrace]:
        try:
            return Ok(thunk())
        except Exception as exc:
            return Err(failure_from_exc(exc, operation))

    return Program(suspended, label or operation or "effect")


def from_result(result: Result[T, ErrorTrace]) -> Program[T]:
    """Lift an existing outcome."""
    return Program(lambda: result, "from_result")


def if_else(predicate: bool, if_true: Program[T], if_false: Program[T]) -> Program[T]:
    """Select one of two programs by an ordinary boolean. Neither is run here."""
    return if_true if predicate else if_false


unit: Program[None] = succeed(None)


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _require_program(candidate: object, operation: str) -> None:
    if not isinstance(candidate, Program):
        raise TypeError(f"{operation}() expects a Program, got {type(candidate).__name__}")


def _run_next(candidate: object, operation: str) -> Result[T, ErrorTrace]:
    """Run a program produced by a user callback, rejecting anything else as a failure."""
    if not isinstance(candidate, Program):
        return Err(trace(
            f"{operation} callback returned {type(candidate).__name__}, expected Program",
            code=ErrorCode.INVALID_INPUT.value,
            recoverable=False,
        ).with_operation(operation))
    return candidate._step()


def _exhausted(last: ErrorTrace, attempts: int) -> ErrorTrace:
    """Terminal trace once a retry budget is spent: keeps message, contexts and details."""
    return last.model_copy(update={
        "error_code": ErrorCode.RETRY_EXHAUSTED.value,
        "recoverable": False,
    }).with_operation("retry", attempts=attempts, last_code=last.error_code)
