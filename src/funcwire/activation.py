"""Activation and dispatch.

``activate`` walks a declaration tree once and returns a tree of the same
shape in which every ``Declaration`` became an ``Endpoint``. It is pure: no
handler runs, no context resolves and nothing is validated.

Each endpoint call then runs, strictly in order:

1. validation of the raw input (a failure returns ``Failure`` immediately,
   before any extension hook runs);
2. context resolution;
3. the handler, whose ``Result`` is returned unchanged.

Exceptions raised in steps 2 and 3 propagate to the caller unless the
activation was configured with ``catch_exceptions``.
"""

from __future__ import annotations

from collections.abc import Mapping
import inspect
import logging
from typing import TYPE_CHECKING, Any

from funcwire.builder import Declaration
from funcwire.errors import DisposedError, InvariantViolationError, UnhandledError
from funcwire.result import Failure, is_result
from funcwire.schema import parse_args

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator
    from types import TracebackType

    from funcwire.builder import EndpointKind
    from funcwire.config import Config
    from funcwire.extensions import ExtensionStates
    from funcwire.result import Result
    from funcwire.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class Dispatcher:
    """Per-activation call pipeline shared by every endpoint of one API."""

    __slots__ = ("_config", "_resolve_context", "_states", "_telemetry", "_validate")

    def __init__(
        self,
        *,
        resolve_context: Callable[[], Awaitable[dict[str, Any]]],
        states: ExtensionStates,
        config: Config,
        telemetry: TelemetryContextProtocol,
    ) -> None:
        self._resolve_context = resolve_context
        self._states = states
        self._config = config
        self._telemetry = telemetry
        self._validate = config.validate_results

    async def dispatch(self, endpoint: Endpoint, raw_input: Any) -> Result[Any, Any]:
        if self._states.closed:
            raise DisposedError(
                f"Cannot call {endpoint.path!r}: the API has been disposed",
                hint="Create a new API with create_api().",
            )
        tele = self._telemetry
        declaration = endpoint.declaration

        with tele("endpoint.validate", path=endpoint.path):
            parsed = parse_args(declaration.args, raw_input)
        if isinstance(parsed, Failure):
            tele.count("endpoint.validation_failure", path=endpoint.path)
            log.debug("Rejected input for %s: %s", endpoint.path, parsed.error)
            return parsed

        try:
            with tele("endpoint.context", path=endpoint.path):
                ctx = await self._resolve_context()
            with tele("endpoint.handler", path=endpoint.path, kind=endpoint.kind):
                result = declaration.handler(parsed.value, ctx)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as exc:
            if not self._config.catch_exceptions:
                raise
            log.warning(
                "Endpoint %s raised %s; returning Failure",
                endpoint.path,
                type(exc).__name__,
                exc_info=True,
            )
            error = UnhandledError(str(exc) or type(exc).__name__, original=exc)
            error.__cause__ = exc
            return Failure(error)

        if self._validate and not is_result(result):
            raise InvariantViolationError(
                f"Handler returned {type(result).__name__}; expected Success|Failure.",
                stage=endpoint.path,
                hint="Return success(...) or failure(...) from every handler.",
            )
        return result


class Endpoint:
    """A declaration bound to a live dispatch pipeline."""

    __slots__ = ("_dispatcher", "declaration", "path")

    def __init__(self, path: str, declaration: Declaration, dispatcher: Dispatcher):
        self.path = path
        self.declaration = declaration
        self._dispatcher = dispatcher

    @property
    def kind(self) -> EndpointKind:
        return self.declaration.kind

    async def __call__(self, raw_input: Any) -> Result[Any, Any]:
        return await self._dispatcher.dispatch(self, raw_input)

    def __repr__(self) -> str:
        return f"<Endpoint {self.kind} {self.path}>"


class Namespace:
    """Read-only node of an activated tree.

    Supports item access (``api["users"]["get"]``), attribute access
    (``api.users.get``), iteration over keys in declaration order, ``len``
    and ``in``. It defines no public methods so that route names never clash
    with them.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[str, Any]) -> None:
        self._entries = entries

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(f"No route named {name!r}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(str, self._entries))})"


def activate(node: Any, dispatcher: Dispatcher, path: tuple[str, ...] = ()) -> Any:
    """Return ``node`` with every declaration replaced by an ``Endpoint``.

    Mappings (including routers) become ``Namespace`` objects with the same
    keys in the same order; every other value passes through unchanged.
    """
    if isinstance(node, Declaration):
        dotted = ".".join(path)
        log.debug("Activated %s endpoint %s", node.kind, dotted)
        return Endpoint(dotted, node, dispatcher)
    if isinstance(node, Mapping):
        return Namespace(
            {
                key: activate(value, dispatcher, (*path, str(key)))
                for key, value in node.items()
            }
        )
    return node


def _walk(node: Any) -> Iterator[Endpoint]:
    if isinstance(node, Endpoint):
        yield node
    elif isinstance(node, Namespace):
        for key in node:
            yield from _walk(node[key])


class ActivatedAPI(Namespace):
    """Root of an activated tree; owns the extension state for its lifetime.

    ``dispose()`` tears the state down; afterwards every endpoint call raises
    ``DisposedError``. Also usable as a context manager.
    """

    __slots__ = ("_states",)

    def __init__(self, root: Namespace, *, states: ExtensionStates) -> None:
        super().__init__(root._entries)  # noqa: SLF001
        self._states = states

    @property
    def disposed(self) -> bool:
        return self._states.closed

    def dispose(self) -> None:
        """Run extension ``dispose`` hooks. Safe to call more than once."""
        if not self._states.closed:
            log.debug("Disposing activated API")
        self._states.dispose()

    def endpoints(self) -> Iterator[tuple[str, Endpoint]]:
        """Yield ``(dotted_path, endpoint)`` for every endpoint, depth-first."""
        for endpoint in _walk(self):
            yield endpoint.path, endpoint

    def __enter__(self) -> ActivatedAPI:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


__all__ = ["ActivatedAPI", "Dispatcher", "Endpoint", "Namespace", "activate"]
