"""Result type for explicit, non-throwing error handling.

Every fallible operation in funcwire returns ``Success`` or ``Failure`` rather
than raising. Both variants are frozen so they are safe to cache, compare and
pass across task boundaries.

Example:
    def divide(a: float, b: float) -> Result[float, str]:
        if b == 0:
            return failure("division by zero")
        return success(a / b)

    divide(10, 2).match(
        on_success=lambda v: f"got {v}",
        on_failure=lambda e: f"error: {e}",
    )
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Literal, Never

from funcwire.errors import UnwrapError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """A successful outcome holding ``value``."""

    value: T

    @property
    def tag(self) -> Literal["success"]:
        return "success"

    def is_success(self) -> Literal[True]:
        return True

    def is_failure(self) -> Literal[False]:
        return False

    def match[U](
        self,
        *,
        on_success: Callable[[T], U],
        on_failure: Callable[[Never], U],
    ) -> U:
        """Invoke ``on_success`` with the value; ``on_failure`` is never called."""
        del on_failure
        return on_success(self.value)

    def map[U](self, fn: Callable[[T], U]) -> Success[U]:
        return Success(fn(self.value))

    def map_error(self, fn: Callable[[Never], object]) -> Success[T]:  # noqa: ARG002
        return self

    def unwrap(self) -> T:
        return self.value

    def unwrap_or[D](self, default: D) -> T | D:  # noqa: ARG002
        return self.value


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E]:
    """A failed outcome holding ``error``."""

    error: E

    @property
    def tag(self) -> Literal["failure"]:
        return "failure"

    def is_success(self) -> Literal[False]:
        return False

    def is_failure(self) -> Literal[True]:
        return True

    def match[U](
        self,
        *,
        on_success: Callable[[Never], U],
        on_failure: Callable[[E], U],
    ) -> U:
        """Invoke ``on_failure`` with the error; ``on_success`` is never called."""
        del on_success
        return on_failure(self.error)

    def map(self, fn: Callable[[Never], object]) -> Failure[E]:  # noqa: ARG002
        return self

    def map_error[F](self, fn: Callable[[E], F]) -> Failure[F]:
        return Failure(fn(self.error))

    def unwrap(self) -> Never:
        if isinstance(self.error, BaseException):
            raise UnwrapError(self.error) from self.error
        raise UnwrapError(self.error)

    def unwrap_or[D](self, default: D) -> D:
        return default


type Result[T, E] = Success[T] | Failure[E]


def success[T](value: T) -> Success[T]:
    """Create a ``Success`` holding ``value``."""
    return Success(value)


def failure[E](error: E) -> Failure[E]:
    """Create a ``Failure`` holding ``error``."""
    return Failure(error)


def is_result(obj: object) -> bool:
    """Return True when ``obj`` is a ``Success`` or ``Failure``."""
    return isinstance(obj, Success | Failure)


__all__ = ["Failure", "Result", "Success", "failure", "is_result", "success"]
