"""Collection operations over programs.

Both run their programs strictly in order and stop at the first failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

from effectcase.foundation.errors import Err, ErrorTrace, Ok, Result, failure_from_exc

from .program import Program, _run_next

if TYPE_CHECKING:
    from collections.abc import Iterable

T = TypeVar("T")
U = TypeVar("U")


def sequence(programs: Iterable[Program[T]]) -> Program[list[T]]:
    """[Program[T]] → Program[[T]]. Fail-fast on the first failure.

    Example:
        >>> sequence([succeed(1), succeed(2)]).run()
        [1, 2]
    """
    items = tuple(programs)

    def sequenced() -> Result[list[T], ErrorTrace]:
        values: list[T] = []
        for index, program in enumerate(items):
            r: Result[T, ErrorTrace] = _run_next(program, "sequence")
            if r.is_err():
                return Err(r.unwrap_err().with_operation("sequence", index=index))
            values.append(r.unwrap())
        return Ok(values)

    return Program(sequenced, f"sequence({len(items)})")


def traverse(items: Iterable[T], f: Callable[[T], Program[U]]) -> Program[list[U]]:
    """Build a program per item with ``f`` at run time and sequence them."""
    captured = tuple(items)

    def traversed() -> Result[list[U], ErrorTrace]:
        values: list[U] = []
        for index, item in enumerate(captured):
            try:
                program = f(item)
            except Exception as exc:
                return Err(failure_from_exc(exc, "traverse"))
            r: Result[U, ErrorTrace] = _run_next(program, "traverse")
            if r.is_err():
                return Err(r.unwrap_err().with_operation("traverse", index=index))
            values.append(r.unwrap())
        return Ok(values)

    return Program(traversed, f"traverse({len(captured)})")
