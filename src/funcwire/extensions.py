"""Extensions and their per-activation state.

An extension is an inert record. It can contribute:

- ``init()``: persistent state, built once per ``create_api`` call.
- ``request(state, ctx)``: a context fragment, resolved once per endpoint call
  and merged onto the context accumulated so far.
- ``functions()``: helpers exposed on the API builder (``t.query`` etc.).
- ``dispose(state)``: teardown, run when the activated API is disposed.

State lives in an ``ExtensionStates`` store owned by one activated API, so two
activations of the same composition never share it.
"""

from __future__ import annotations

from dataclasses import dataclass
import inspect
import logging
from typing import TYPE_CHECKING, Any

from funcwire.errors import ConfigurationError, DisposedError, ExtensionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence

log = logging.getLogger(__name__)

type ContextFragment = Mapping[str, Any] | None
type RequestHook = Callable[
    [Any, Mapping[str, Any]], ContextFragment | Awaitable[ContextFragment]
]


@dataclass(frozen=True, slots=True)
class Extension:
    """A named unit contributing state, context and builder helpers."""

    name: str
    init: Callable[[], Any] | None = None
    request: RequestHook | None = None
    functions: Callable[[], Mapping[str, Callable[..., Any]]] | None = None
    dispose: Callable[[Any], None] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(
                f"Extension name must be a non-empty string, got {self.name!r}",
                hint="Names key the per-activation state store.",
            )
        for hook in ("init", "request", "functions", "dispose"):
            value = getattr(self, hook)
            if value is not None and not callable(value):
                raise ConfigurationError(
                    f"Extension {self.name!r}: '{hook}' must be callable",
                )


def extension(
    name: str,
    *,
    init: Callable[[], Any] | None = None,
    request: RequestHook | None = None,
    functions: Callable[[], Mapping[str, Callable[..., Any]]] | None = None,
    dispose: Callable[[Any], None] | None = None,
) -> Extension:
    """Build an ``Extension`` from keyword hooks."""
    return Extension(
        name=name, init=init, request=request, functions=functions, dispose=dispose
    )


def ensure_unique_names(extensions: Sequence[Extension]) -> None:
    seen: set[str] = set()
    for ext in extensions:
        if not isinstance(ext, Extension):
            raise ConfigurationError(
                f"Expected an Extension, got {type(ext).__name__}",
                hint="Build extensions with funcwire.extension(...).",
            )
        if ext.name in seen:
            raise ConfigurationError(
                f"Duplicate extension name: {ext.name!r}",
                hint="Each extension in a composition needs a unique name.",
            )
        seen.add(ext.name)


class ExtensionStates:
    """Persistent extension state for one activated API.

    Runs every ``init`` hook in declaration order on construction. If one of
    them raises, the extensions initialized so far are disposed before the
    error propagates.
    """

    def __init__(self, extensions: Sequence[Extension]) -> None:
        self._extensions: tuple[Extension, ...] = tuple(extensions)
        self._states: dict[str, Any] = {}
        self._started: list[Extension] = []
        self._closed = False
        try:
            for ext in self._extensions:
                if ext.init is None:
                    self._started.append(ext)
                    continue
                state = ext.init()
                if inspect.isawaitable(state):
                    if inspect.iscoroutine(state):
                        state.close()
                    raise ExtensionError(
                        "init() returned an awaitable; init must be synchronous",
                        extension=ext.name,
                        hint="Resolve asynchronous resources in request() instead.",
                    )
                self._states[ext.name] = state
                self._started.append(ext)
                log.debug("Initialized extension state for %r", ext.name)
        except BaseException:
            self._teardown(raise_first=False)
            raise

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, name: str) -> Any:
        """Return the stored state for ``name`` (``None`` when it has no ``init``)."""
        self._check_open()
        return self._states.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def dispose(self) -> None:
        """Run ``dispose`` hooks in reverse declaration order, then drop all state.

        Idempotent. Every hook runs even if an earlier one fails; the first
        failure is re-raised afterwards.
        """
        if self._closed:
            return
        self._teardown(raise_first=True)

    def _teardown(self, *, raise_first: bool) -> None:
        self._closed = True
        first_error: Exception | None = None
        for ext in reversed(self._started):
            if ext.dispose is None:
                continue
            try:
                ext.dispose(self._states.get(ext.name))
                log.debug("Disposed extension %r", ext.name)
            except Exception as e:
                log.error(
                    "Extension %r failed to dispose: %s", ext.name, e, exc_info=True
                )
                if first_error is None:
                    first_error = e
        self._states.clear()
        self._started.clear()
        if raise_first and first_error is not None:
            raise first_error

    def _check_open(self) -> None:
        if self._closed:
            raise DisposedError(
                "Extension state has been disposed",
                hint="Create a new API with create_api() after dispose().",
            )


__all__ = ["ContextFragment", "Extension", "ExtensionStates", "extension"]
