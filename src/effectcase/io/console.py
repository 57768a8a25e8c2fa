"""Console primitives lifted into programs.

The host supplies a Console (two blocking operations). ``put_line`` and
``get_line`` describe using it; the console itself is looked up when the
program runs, so a program built once can run against stdin/stdout in
production and against a ScriptedConsole in tests.

Example:
    >>> from effectcase.io import get_line, put_line
    >>> echo = get_line().and_then(lambda line: put_line(line.upper()))
    >>> echo.run()
"""

from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Protocol, TextIO, runtime_checkable

from effectcase.core import Program, effect


@runtime_checkable
class Console(Protocol):
    """Host-supplied line-oriented console.

    ``read_line`` raises EOFError at end of input; either method may raise
    OSError on I/O failure.
    """

    def write_line(self, text: str) -> None: ...
    def read_line(self) -> str: ...


@dataclass(slots=True)
class StdConsole:
    """Console over text streams, stdin/stdout by default."""

    input: TextIO = field(default_factory=lambda: sys.stdin)
    output: TextIO = field(default_factory=lambda: sys.stdout)

    def write_line(self, text: str) -> None:
        print(text, file=self.output, flush=True)

    def read_line(self) -> str:
        line = self.input.readline()
        if not line:
            raise EOFError("end of input")
        return line.rstrip("\r\n")


# ─────────────────────────────────────────────────────────────────────────────
# Process default
# ─────────────────────────────────────────────────────────────────────────────

_console: ContextVar[Console | None] = ContextVar("console", default=None)


def get_console() -> Console:
    """Get the default console, creating a StdConsole on first use."""
    console = _console.get()
    if console is None:
        console = StdConsole()
        _console.set(console)
    return console


def set_console(console: Console) -> None:
    """Replace the default console used by put_line/get_line without an explicit one."""
    _console.set(console)


def reset_console() -> None:
    """Drop the default console; the next get_console() makes a fresh StdConsole."""
    _console.set(None)


# ─────────────────────────────────────────────────────────────────────────────
# Programs
# ─────────────────────────────────────────────────────────────────────────────


def put_line(text: str, console: Console | None = None) -> Program[None]:
    """Describe writing ``text`` as one line."""
    return effect(lambda: _resolve(console).write_line(text), name="put_line")


def get_line(console: Console | None = None) -> Program[str]:
    """Describe reading one line (without its line terminator)."""
    return effect(lambda: _resolve(console).read_line(), name="get_line")


def _resolve(console: Console | None) -> Console:
    return console if console is not None else get_console()
