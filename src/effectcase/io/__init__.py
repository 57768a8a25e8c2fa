"""I/O primitives: console reads and writes as programs."""

from .console import (
    Console,
    StdConsole,
    get_console,
    get_line,
    put_line,
    reset_console,
    set_console,
)

__all__ = [
    "Console",
    "StdConsole",
    "get_console",
    "set_console",
    "reset_console",
    "put_line",
    "get_line",
]
