"""Structured logging for program runs.

Entries are an event name plus key/value fields. A logger carries bound
fields; ``log_context`` adds fields to everything logged inside a block.
Output goes to one process-wide renderer: human-readable lines, JSON lines,
or nothing.

Quick Start:
    >>> from effectcase.runtime.observability import configure_logging, get_logger, log_context
    >>>
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("my-app")
    >>> log.info("starting", version="1.0.0")
    >>>
    >>> with log_context(run_id="abc123"):
    ...     program.run()  # retry/repeat entries carry run_id
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, NamedTuple, Protocol, TextIO, runtime_checkable

import orjson

from effectcase.foundation.errors import JsonDict, JsonValue

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from effectcase.foundation.config import EffectcaseSettings


class LogEntry(NamedTuple):
    timestamp: float
    level: str
    event: str
    context: JsonDict

    def iso_time(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    def clock_time(self) -> str:
        """HH:MM:SS.mmm in UTC."""
        stamp = datetime.fromtimestamp(self.timestamp, tz=UTC)
        return f"{stamp:%H:%M:%S}.{stamp.microsecond // 1000:03d}"


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide state
# ─────────────────────────────────────────────────────────────────────────────

_active_renderer: ContextVar[LogRenderer | None] = ContextVar("effectcase_log_renderer", default=None)
_min_level: ContextVar[int] = ContextVar("effectcase_log_level", default=logging.WARNING)
_scoped_fields: ContextVar[JsonDict] = ContextVar("effectcase_log_fields", default={})


def _renderer() -> LogRenderer:
    current = _active_renderer.get()
    if current is None:
        current = ConsoleRenderer()
        _active_renderer.set(current)
    return current


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


class BoundLogger:
    """Logger with bound fields. ``bind`` returns a new logger; this one is unchanged.

    Without an explicit ``level`` the threshold is read from the global
    configuration on each call, so module-level loggers follow later
    ``configure_logging`` calls.

    Example:
        >>> log = get_logger("effectcase.program")
        >>> log.bind(operation="retry").debug("attempt failed", attempt=1)
        # => 10:30:45.123 [debug] attempt failed attempt=1 logger="effectcase.program" operation="retry"
    """

    __slots__ = ("fields", "level", "renderer")

    def __init__(
        self,
        fields: JsonDict | None = None,
        *,
        level: int | None = None,
        renderer: LogRenderer | None = None,
    ) -> None:
        self.fields: JsonDict = dict(fields or {})
        self.level = level
        self.renderer = renderer

    def bind(self, **fields: JsonValue) -> BoundLogger:
        return BoundLogger({**self.fields, **fields}, level=self.level, renderer=self.renderer)

    def is_enabled_for(self, level: int) -> bool:
        threshold = _min_level.get() if self.level is None else self.level
        return level >= threshold

    def log(self, level: int, event: str, **fields: JsonValue) -> None:
        if not self.is_enabled_for(level):
            return
        # call-site fields win over bound ones, bound over scoped
        merged = {**_scoped_fields.get(), **self.fields, **fields}
        entry = LogEntry(time.time(), logging.getLevelName(level).lower(), event, merged)
        (self.renderer or _renderer()).render(entry)

    def debug(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.ERROR, event, **fields)

    def __repr__(self) -> str:
        return f"BoundLogger({self.fields!r})"


def get_logger(name: str | None = None, **fields: JsonValue) -> BoundLogger:
    """Logger with ``name`` bound as the ``logger`` field."""
    return BoundLogger({**fields, "logger": name} if name else fields)


@contextmanager
def log_context(**fields: JsonValue) -> Iterator[JsonDict]:
    """Add ``fields`` to every entry logged inside the block.

    Example:
        >>> with log_context(run_id="abc123"):
        ...     log.info("processing")  # includes run_id
    """
    merged = {**_scoped_fields.get(), **fields}
    token = _scoped_fields.set(merged)
    try:
        yield merged
    finally:
        _scoped_fields.reset(token)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────

_ANSI = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "key": "\033[36m"}
_ANSI_LEVEL = {"debug": "\033[2m", "info": "\033[32m", "warning": "\033[33m", "error": "\033[31m"}


def _console_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


class ConsoleRenderer:
    """One line per entry: ``[time] [level] event key=value ...`` with keys sorted.

    ANSI colors are used when ``output`` is a TTY, unless ``colors`` forces them.
    """

    __slots__ = ("output", "colors", "show_timestamp")

    def __init__(self, output: TextIO | None = None, colors: bool | None = None, show_timestamp: bool = True) -> None:
        self.output = output if output is not None else sys.stderr
        self.colors = bool(self.output.isatty()) if colors is None and hasattr(self.output, "isatty") else bool(colors)
        self.show_timestamp = show_timestamp

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{_ANSI['reset']}" if self.colors else text

    def render(self, entry: LogEntry) -> None:
        pieces = [self._paint(entry.clock_time(), _ANSI["dim"])] if self.show_timestamp else []
        pieces.append(self._paint(f"[{entry.level}]", _ANSI_LEVEL.get(entry.level, _ANSI["dim"])))
        pieces.append(self._paint(entry.event, _ANSI["bold"]))
        for key in sorted(entry.context):
            pieces.append(f"{self._paint(key, _ANSI['key'])}={_console_value(entry.context[key])}")
        self.output.write(" ".join(pieces) + "\n")


class JsonRenderer:
    """JSON Lines: ``timestamp``, ``level``, ``event`` then the entry's fields."""

    __slots__ = ("output",)

    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output if output is not None else sys.stdout

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.iso_time(), "level": entry.level, "event": entry.event, **entry.context}
        line = orjson.dumps(record, default=str, option=orjson.OPT_NON_STR_KEYS | orjson.OPT_APPEND_NEWLINE)
        self.output.write(line.decode())


class NoOpRenderer:
    """Drops every entry."""

    __slots__ = ()

    def render(self, entry: LogEntry) -> None:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────

_FACTORIES: dict[str, Callable[[TextIO | None, bool | None], LogRenderer]] = {
    "console": lambda output, colors: ConsoleRenderer(output, colors),
    "json": lambda output, colors: JsonRenderer(output),
    "none": lambda output, colors: NoOpRenderer(),
}


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "WARNING",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install the process-wide renderer and minimum level.

    Args:
        format: "console", "json" or "none"
        level: DEBUG, INFO, WARNING or ERROR (case-insensitive)
        output: Stream to write to (console: stderr, json: stdout by default)
        colors: Force ANSI colors on or off for the console format
    """
    factory = _FACTORIES.get(format)
    if factory is None:
        raise ValueError(f"Unknown format: {format}. Use one of {', '.join(_FACTORIES)}")
    renderer = factory(output, colors)
    _min_level.set(logging.getLevelNamesMapping().get(level.upper(), logging.WARNING))
    _active_renderer.set(renderer)
    return renderer


def configure_from_settings(settings: EffectcaseSettings, *, output: TextIO | None = None) -> LogRenderer:
    """Apply EFFECTCASE_LOG_* and EFFECTCASE_DEBUG."""
    return configure_logging(settings.logging.format, settings.log_level, output=output)
