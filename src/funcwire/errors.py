"""Exception hierarchy for funcwire."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from funcwire.schema import Issue


class FuncwireError(Exception):
    """Base exception for all funcwire errors.

    ``name`` is a stable, string-typed error kind that survives serialization
    and is what callers should branch on when inspecting a ``Failure``.
    """

    default_name: str | None = None

    def __init__(
        self, message: str, *, hint: str | None = None, name: str | None = None
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.name = name or self.default_name or type(self).__name__

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class DomainError(FuncwireError):
    """Handler-reported failure with an explicit kind.

    Example:
        return failure(DomainError("UserNotFound", f"User {args.id} not found"))
    """

    def __init__(self, name: str, message: str, *, hint: str | None = None) -> None:
        super().__init__(message, hint=hint, name=name)


class ArgsValidationError(FuncwireError):
    """Raw endpoint input failed schema validation.

    Never raised by the dispatch path; always delivered inside a ``Failure``.
    """

    default_name = "ValidationError"

    def __init__(self, message: str, *, issues: tuple[Issue, ...] = ()) -> None:
        super().__init__(message)
        self.issues = issues


class ConfigurationError(FuncwireError):
    """Composition or configuration is invalid."""


class ExtensionError(FuncwireError):
    """An extension returned something the engine cannot use."""

    def __init__(
        self, message: str, *, extension: str, hint: str | None = None
    ) -> None:
        super().__init__(f"[{extension}] {message}", hint=hint)
        self.extension = extension


class DisposedError(FuncwireError):
    """An activated API (or its extension state) was used after dispose()."""


class UnhandledError(FuncwireError):
    """A handler or extension raised while exceptions are being captured.

    Only produced when ``Config.catch_exceptions`` is enabled.
    """

    def __init__(self, message: str, *, original: BaseException) -> None:
        super().__init__(message)
        self.original = original


class InvariantViolationError(FuncwireError):
    """An internal dispatch invariant was violated (dev-time checks)."""

    def __init__(
        self, message: str, *, stage: str | None = None, hint: str | None = None
    ) -> None:
        msg = message if stage is None else f"[{stage}] {message}"
        super().__init__(msg, hint=hint)
        self.stage = stage


class UnwrapError(FuncwireError):
    """``unwrap()`` was called on a ``Failure``."""

    def __init__(self, error: Any) -> None:
        super().__init__(f"Called unwrap() on a Failure: {error!r}")
        self.error = error
