"""Success-or-failure value returned by a program's deferred step.

A step never raises to report failure. It returns ``Ok(value)`` or
``Err(trace)``, and the combinators branch on which one came back.

    >>> Ok(21).map(lambda x: x * 2)
    Ok(42)
    >>> match Err("boom"):
    ...     case Ok(v): print("got", v)
    ...     case Err(e): print("failed:", e)
    failed: boom
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class Result(Generic[T, E]):
    """Base of the two variants. Only ``Ok`` and ``Err`` are instantiated."""

    __slots__ = ()

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """The Ok value. RuntimeError on Err."""
        if isinstance(self, Ok):
            return self.value
        raise RuntimeError(f"unwrap() on Err: {self.unwrap_err()!r}")

    def unwrap_err(self) -> E:
        """The Err payload. RuntimeError on Ok."""
        if isinstance(self, Err):
            return self.error
        raise RuntimeError(f"unwrap_err() on Ok: {self.unwrap()!r}")

    def unwrap_or(self, default: T) -> T:
        return self.unwrap() if self.is_ok() else default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return self.unwrap() if self.is_ok() else f(self.unwrap_err())

    def ok(self) -> T | None:
        return self.unwrap() if self.is_ok() else None

    def err(self) -> E | None:
        return self.unwrap_err() if self.is_err() else None

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return Ok(f(self.unwrap())) if self.is_ok() else self  # type: ignore[return-value]

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return Err(f(self.unwrap_err())) if self.is_err() else self  # type: ignore[return-value]

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain another fallible step; an Err skips ``f``."""
        return f(self.unwrap()) if self.is_ok() else self  # type: ignore[return-value]

    and_then = flat_map

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Give an Err a second chance through ``f``; an Ok passes through."""
        return f(self.unwrap_err()) if self.is_err() else self  # type: ignore[return-value]

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return ok(self.unwrap()) if self.is_ok() else err(self.unwrap_err())

    def __bool__(self) -> bool:
        return self.is_ok()

    def __iter__(self) -> Iterator[T]:
        """One item for Ok, none for Err."""
        if self.is_ok():
            yield self.unwrap()


class Ok(Result[T, E]):
    __slots__ = ("value",)
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("ok", self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


class Err(Result[T, E]):
    __slots__ = ("error",)
    __match_args__ = ("error",)

    def __init__(self, error: E) -> None:
        self.error = error

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Err) and self.error == other.error

    def __hash__(self) -> int:
        return hash(("err", self.error))

    def __repr__(self) -> str:
        return f"Err({self.error!r})"
