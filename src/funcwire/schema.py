"""Schema adapter seam.

The dispatch engine only needs one capability from a schema: validate an
unknown input and report either the typed value or structured issues. Any
object with a ``safe_parse`` method satisfying ``Schema`` plugs in directly;
everything else is handed to pydantic's ``TypeAdapter``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from funcwire.errors import ArgsValidationError
from funcwire.result import Failure, Result, Success

ROOT_PATH = "<root>"


@dataclass(frozen=True, slots=True)
class Issue:
    """One structured validation problem."""

    path: tuple[str | int, ...]
    message: str
    code: str = "invalid"

    @property
    def dotted_path(self) -> str:
        return ".".join(str(p) for p in self.path) if self.path else ROOT_PATH

    def __str__(self) -> str:
        return f"{self.dotted_path}: {self.message}"


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of ``Schema.safe_parse``; ``data`` is meaningful only on success."""

    success: bool
    data: Any = None
    issues: tuple[Issue, ...] = ()

    @classmethod
    def ok(cls, data: Any) -> ParseResult:
        return cls(success=True, data=data)

    @classmethod
    def error(cls, issues: tuple[Issue, ...]) -> ParseResult:
        return cls(success=False, issues=issues)


@runtime_checkable
class Schema(Protocol):
    """Duck-typed protocol for argument schemas."""

    def safe_parse(self, value: Any) -> ParseResult: ...  # noqa: D102


class PydanticSchema:
    """Schema backed by a pydantic ``TypeAdapter``.

    Accepts a ``BaseModel`` subclass, any annotation pydantic understands
    (``int``, ``dict[str, int]``, a ``TypedDict``...) or a ready ``TypeAdapter``.
    """

    __slots__ = ("_adapter", "source")

    def __init__(self, source: Any) -> None:
        self.source = source
        self._adapter: TypeAdapter[Any] = (
            source if isinstance(source, TypeAdapter) else TypeAdapter(source)
        )

    def safe_parse(self, value: Any) -> ParseResult:
        try:
            data = self._adapter.validate_python(value)
        except PydanticValidationError as exc:
            return ParseResult.error(
                tuple(
                    Issue(
                        path=tuple(err.get("loc", ())),
                        message=err.get("msg", "invalid value"),
                        code=err.get("type", "invalid"),
                    )
                    for err in exc.errors()
                )
            )
        return ParseResult.ok(data)

    def __repr__(self) -> str:
        return f"PydanticSchema({self.source!r})"


def as_schema(obj: Any) -> Schema:
    """Coerce ``obj`` into a ``Schema``.

    Objects that already expose a callable ``safe_parse`` pass through
    unchanged (classes are not treated as instances here).
    """
    if not isinstance(obj, type) and callable(getattr(obj, "safe_parse", None)):
        return obj
    return PydanticSchema(obj)


def summarize_issues(issues: tuple[Issue, ...]) -> str:
    if not issues:
        return "Invalid arguments"
    return "; ".join(str(issue) for issue in issues)


def parse_args(schema: Schema, value: Any) -> Result[Any, ArgsValidationError]:
    """Validate ``value`` and map the schema outcome onto a ``Result``."""
    parsed = schema.safe_parse(value)
    if parsed.success:
        return Success(parsed.data)
    return Failure(
        ArgsValidationError(summarize_issues(parsed.issues), issues=parsed.issues)
    )


__all__ = [
    "Issue",
    "ParseResult",
    "PydanticSchema",
    "Schema",
    "as_schema",
    "parse_args",
    "summarize_issues",
]
