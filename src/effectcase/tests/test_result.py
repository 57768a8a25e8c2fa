"""Tests for the Result type returned by program steps.

Validates:
- Functor and monad laws
- Err short-circuiting
- Extraction and case analysis
"""

from __future__ import annotations

from typing import Callable

import pytest

from effectcase.foundation.errors import Err, ErrorTrace, Ok, Result, trace


# ═════════════════════════════════════════════════════════════════════════════
# Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_functor_identity() -> None:
    """fmap id = id, for both variants"""
    for r in (Ok(7), Err(trace("bad"))):
        assert r.map(lambda x: x) == r


def test_functor_composition() -> None:
    """fmap (f . g) = fmap f . fmap g"""
    f: Callable[[int], int] = lambda x: x - 3
    g: Callable[[int], int] = lambda x: x * 10
    r: Result[int, ErrorTrace] = Ok(4)
    assert r.map(lambda x: f(g(x))) == r.map(g).map(f)


def test_monad_left_identity() -> None:
    """return a >>= f = f a"""
    f: Callable[[str], Result[int, ErrorTrace]] = lambda s: Ok(len(s))
    assert Ok("Joe").flat_map(f) == f("Joe")


def test_monad_right_identity() -> None:
    """m >>= return = m"""
    m: Result[str, ErrorTrace] = Ok("Joe")
    assert m.flat_map(Ok) == m


def test_monad_associativity() -> None:
    """(m >>= f) >>= g = m >>= (x -> f x >>= g)"""
    m: Result[int, ErrorTrace] = Ok(2)
    f: Callable[[int], Result[int, ErrorTrace]] = lambda x: Ok(x + 1)
    g: Callable[[int], Result[int, ErrorTrace]] = lambda x: Err(trace(f"stop at {x}")) if x > 2 else Ok(x)
    assert m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))


# ═════════════════════════════════════════════════════════════════════════════
# Operations
# ═════════════════════════════════════════════════════════════════════════════


def test_err_short_circuits() -> None:
    calls: list[int] = []
    r: Result[int, str] = Err("gone")
    assert r.map(lambda x: calls.append(x) or x).flat_map(lambda x: Ok(x)) == Err("gone")
    assert calls == []


def test_map_err() -> None:
    assert Err("boom").map_err(str.upper) == Err("BOOM")
    assert Ok(1).map_err(str.upper) == Ok(1)


def test_and_then_alias() -> None:
    assert Result.and_then is Result.flat_map


def test_or_else() -> None:
    assert Err("boom").or_else(lambda e: Ok(len(e))) == Ok(4)
    assert Ok(1).or_else(lambda e: Ok(0)) == Ok(1)


def test_extraction() -> None:
    assert Ok(3).unwrap() == 3
    assert Err("e").unwrap_err() == "e"
    assert Err("e").unwrap_or(9) == 9
    assert Err("abc").unwrap_or_else(len) == 3
    assert Ok(3).ok() == 3 and Ok(3).err() is None
    assert Err("e").ok() is None and Err("e").err() == "e"


def test_unwrap_wrong_variant_raises() -> None:
    with pytest.raises(RuntimeError, match="unwrap\\(\\) on Err"):
        Err("e").unwrap()
    with pytest.raises(RuntimeError):
        Ok(1).unwrap_err()


def test_match() -> None:
    describe = lambda r: r.match(ok=lambda v: f"got {v}", err=lambda e: f"failed: {e}")
    assert describe(Ok(1)) == "got 1"
    assert describe(Err("x")) == "failed: x"


def test_structural_pattern_matching() -> None:
    def describe(r: Result[int, str]) -> str:
        match r:
            case Ok(v):
                return f"value {v}"
            case Err(e):
                return f"error {e}"
        return "unreachable"

    assert describe(Ok(3)) == "value 3"
    assert describe(Err("gone")) == "error gone"


def test_truthiness_and_iteration() -> None:
    assert Ok(0)
    assert not Err("x")
    assert list(Ok(5)) == [5]
    assert list(Err("x")) == []


def test_equality_and_repr() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert repr(Ok("a")) == "Ok('a')"
    assert repr(Err("a")) == "Err('a')"
