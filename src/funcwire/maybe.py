"""Optional values as an explicit two-variant type."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Literal, Never

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclasses.dataclass(frozen=True, slots=True)
class Some[T]:
    """A present value."""

    value: T

    @property
    def tag(self) -> Literal["some"]:
        return "some"

    def is_some(self) -> Literal[True]:
        return True

    def is_none(self) -> Literal[False]:
        return False

    def match[U](
        self, *, on_some: Callable[[T], U], on_none: Callable[[], U]
    ) -> U:
        del on_none
        return on_some(self.value)

    def unwrap_or[D](self, default: D) -> T | D:  # noqa: ARG002
        return self.value


@dataclasses.dataclass(frozen=True, slots=True)
class Nothing:
    """The absent variant. Use ``none()`` rather than constructing directly."""

    @property
    def tag(self) -> Literal["none"]:
        return "none"

    def is_some(self) -> Literal[False]:
        return False

    def is_none(self) -> Literal[True]:
        return True

    def match[U](
        self, *, on_some: Callable[[Never], U], on_none: Callable[[], U]
    ) -> U:
        del on_some
        return on_none()

    def unwrap_or[D](self, default: D) -> D:
        return default


type Maybe[T] = Some[T] | Nothing

_NOTHING = Nothing()


def some[T](value: T) -> Some[T]:
    return Some(value)


def none() -> Nothing:
    return _NOTHING


def maybe[T](value: T | None) -> Some[T] | Nothing:
    """Lift a Python optional: ``None`` becomes ``Nothing``, anything else ``Some``."""
    return _NOTHING if value is None else Some(value)


__all__ = ["Maybe", "Nothing", "Some", "maybe", "none", "some"]
