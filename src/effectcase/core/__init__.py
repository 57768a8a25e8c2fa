"""Core abstractions: Program, its constructors and collection operations."""

from .collections import sequence, traverse
from .program import (
    Program,
    effect,
    fail,
    from_result,
    if_else,
    succeed,
    succeed_lazy,
    unit,
)

__all__ = [
    "Program",
    "succeed",
    "succeed_lazy",
    "fail",
    "effect",
    "from_result",
    "if_else",
    "unit",
    "sequence",
    "traverse",
]
