"""Failure payloads carried by programs: ErrorContext and ErrorTrace.

Uses Pydantic models for validation/serialization. Hot paths (every captured
failure) build traces with model_construct to skip validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, computed_field, field_serializer

# JSON type aliases - Any for recursive slots to avoid Pydantic resolution issues
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

_EMPTY_META: JsonDict = {}


class ErrorContext(BaseModel):
    """One frame of provenance: the operation a failure passed through."""

    model_config = ConfigDict(
        frozen=True, str_strip_whitespace=True, extra="forbid",
        revalidate_instances="never",
        json_schema_extra={"title": "Error Context", "examples": [{"operation": "retry", "metadata": {"attempts": 3}}]},
    )

    operation: Annotated[str, Field(min_length=1)]
    location: str = Field(default="", repr=False)
    metadata: JsonDict = Field(default_factory=dict, repr=False)

    def __str__(self) -> str:
        loc = f" at {self.location}" if self.location else ""
        meta = f" ({', '.join(f'{k}={v}' for k, v in self.metadata.items())})" if self.metadata else ""
        return f"{self.operation}{loc}{meta}"

    def __hash__(self) -> int:
        return hash((self.operation, self.location, tuple(sorted(self.metadata.items()))))


_EMPTY_CONTEXTS: tuple[ErrorContext, ...] = ()


class ErrorTrace(BaseModel):
    """Failure carried through a program run.

    The message may be empty: ``fail()`` with no argument produces one.
    All ``with_*`` methods return a new trace.
    """

    model_config = ConfigDict(
        frozen=True, validate_default=True, extra="forbid",
        revalidate_instances="never",
        json_schema_extra={"title": "Error Trace", "description": "Program failure with provenance"},
    )

    message: str = ""
    contexts: tuple[ErrorContext, ...] = _EMPTY_CONTEXTS
    error_code: str | None = Field(default=None, repr=True)
    recoverable: bool = True
    details: str | None = Field(default=None, repr=False)

    @field_serializer("contexts")
    def _serialize_contexts(self, v: tuple[ErrorContext, ...]) -> list[JsonDict]:
        return [ctx.model_dump() for ctx in v]

    @computed_field
    @property
    def depth(self) -> int:
        """Number of contexts in the trace."""
        return len(self.contexts)

    def __hash__(self) -> int:
        return hash((self.message, self.error_code, self.recoverable))

    def with_context(self, ctx: ErrorContext) -> ErrorTrace:
        return self.model_copy(update={"contexts": (*self.contexts, ctx)})

    def with_operation(self, operation: str, location: str = "", **metadata: JsonValue) -> ErrorTrace:
        """Append a context frame for ``operation``."""
        return self.with_context(context(operation, location, **metadata))

    def with_code(self, code: str) -> ErrorTrace:
        return self.model_copy(update={"error_code": code})

    def as_unrecoverable(self) -> ErrorTrace:
        return self.model_copy(update={"recoverable": False})

    def format(self, *, include_details: bool = False) -> str:
        """Human-readable rendering: message, code, then the context stack."""
        parts = [self.message or "<no message>"]
        if self.error_code:
            parts.append(f" [{self.error_code}]")
        if self.contexts:
            parts.append("\nContext trace:\n" + "\n".join(f"  - {ctx}" for ctx in self.contexts))
        if include_details and self.details:
            parts.append(f"\nDetails:\n{self.details}")
        return "".join(parts)


_ErrorTraceAdapter: TypeAdapter[ErrorTrace] = TypeAdapter(ErrorTrace)


def context(operation: str, location: str = "", **metadata: JsonValue) -> ErrorContext:
    """Create ErrorContext concisely (bypasses validation)."""
    return ErrorContext.model_construct(
        operation=operation,
        location=location,
        metadata=metadata or _EMPTY_META,
    )


def trace(message: str = "", *, code: str | None = None, recoverable: bool = True, details: str | None = None) -> ErrorTrace:
    """Create ErrorTrace concisely (bypasses validation)."""
    return ErrorTrace.model_construct(
        message=message,
        contexts=_EMPTY_CONTEXTS,
        error_code=code,
        recoverable=recoverable,
        details=details,
    )


def trace_from_exc(exc: BaseException, *, operation: str = "", code: str | None = None) -> ErrorTrace:
    """Create ErrorTrace from a captured exception, keeping its traceback as details."""
    import traceback
    t = trace(
        str(exc),
        code=code,
        details="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )
    return t.with_operation(operation) if operation else t


def validate_trace(data: JsonDict) -> ErrorTrace:
    """Validate a dict (e.g. a deserialized log record) as ErrorTrace."""
    return _ErrorTraceAdapter.validate_python(data)
