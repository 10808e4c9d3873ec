"""Declarations and the API builder.

Everything here is descriptive. Declaring an endpoint stores its schema and
handler and nothing more: no validation, no context, no handler call. Those
happen per call, after ``create_api`` has activated the declaration tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Literal

from funcwire.errors import ExtensionError
from funcwire.schema import Schema, as_schema

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator, Sequence

    from funcwire.extensions import Extension
    from funcwire.result import Result

    type Handler = Callable[[Any, Any], Awaitable[Result[Any, Any]] | Result[Any, Any]]

log = logging.getLogger(__name__)

type EndpointKind = Literal["query", "mutation"]


@dataclass(frozen=True, slots=True)
class Declaration(ABC):
    """Base record for an inert endpoint declaration.

    Abstract: build endpoints with ``QueryDefinition`` or ``MutationDefinition``
    (or the ``query``/``mutation`` helpers).
    """

    args: Schema
    handler: Handler

    def __post_init__(self) -> None:
        if not callable(self.handler):
            raise TypeError(
                f"{type(self).__name__} handler must be callable, "
                f"got {type(self.handler).__name__}"
            )
        object.__setattr__(self, "args", as_schema(self.args))

    @property
    @abstractmethod
    def kind(self) -> EndpointKind: ...


@dataclass(frozen=True, slots=True)
class QueryDefinition(Declaration):
    """A read-only endpoint."""

    @property
    def kind(self) -> Literal["query"]:
        return "query"


@dataclass(frozen=True, slots=True)
class MutationDefinition(Declaration):
    """An endpoint with side effects."""

    @property
    def kind(self) -> Literal["mutation"]:
        return "mutation"


class Router(Mapping[str, Any]):
    """Explicit namespace tag around a mapping of routes.

    The wrapped mapping is neither copied nor altered: ``router(r).routes is r``
    and every lookup returns the caller's own objects.
    """

    __slots__ = ("routes",)

    def __init__(self, routes: Mapping[str, Any]) -> None:
        if not isinstance(routes, Mapping):
            raise TypeError(f"router() expects a mapping, got {type(routes).__name__}")
        self.routes = routes

    def __getitem__(self, key: str) -> Any:
        return self.routes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def __repr__(self) -> str:
        return f"Router({self.routes!r})"


def router(routes: Mapping[str, Any]) -> Router:
    """Group endpoints under a namespace (organizational only)."""
    if isinstance(routes, Router):
        return routes
    return Router(routes)


class APIBuilder:
    """Attribute bag of declaration helpers (``t`` in user code).

    ``router`` is always present; extension ``functions()`` are merged on top
    in declaration order, so later extensions win on name collisions.
    """

    __slots__ = ("_functions",)

    def __init__(self, functions: Mapping[str, Callable[..., Any]]) -> None:
        self._functions: dict[str, Callable[..., Any]] = dict(functions)

    @classmethod
    def from_extensions(cls, extensions: Sequence[Extension]) -> APIBuilder:
        merged: dict[str, Callable[..., Any]] = {"router": router}
        for ext in extensions:
            if ext.functions is None:
                continue
            contributed = ext.functions()
            if not isinstance(contributed, Mapping):
                raise ExtensionError(
                    f"functions() must return a mapping, got {type(contributed).__name__}",
                    extension=ext.name,
                )
            for name in contributed:
                if name in merged:
                    log.debug("Extension %r overrides builder function %r", ext.name, name)
            merged.update(contributed)
        return cls(merged)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._functions[name]
        except KeyError:
            available = ", ".join(sorted(self._functions))
            raise AttributeError(
                f"API builder has no function {name!r} (available: {available})"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def names(self) -> tuple[str, ...]:
        return tuple(self._functions)

    def __repr__(self) -> str:
        return f"APIBuilder({', '.join(self._functions)})"


__all__ = [
    "APIBuilder",
    "Declaration",
    "MutationDefinition",
    "QueryDefinition",
    "Router",
    "router",
]
