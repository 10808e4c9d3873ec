"""Context composition: merge a default context with N extensions.

Lifecycle:

1. Declare time: ``define_context(default).with_extensions([...])`` validates
   the extension list and builds the API builder ``t``. Nothing runs yet.
2. Activation: ``create_api(root)`` runs every extension's ``init`` once,
   storing state in a fresh ``ExtensionStates``, and turns the declaration
   tree into callable endpoints.
3. Call time: each endpoint call resolves a brand-new context. The base is
   the default context, or the ``context`` override given to ``create_api``
   (which replaces the default entirely). Extensions then contribute
   ``request`` fragments sequentially, in declaration order, each seeing the
   context accumulated so far. Later fragments win on key collisions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import inspect
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from funcwire.activation import ActivatedAPI, Dispatcher, activate
from funcwire.builder import APIBuilder
from funcwire.config import Config
from funcwire.errors import ConfigurationError, ExtensionError
from funcwire.extensions import Extension, ExtensionStates, ensure_unique_names
from funcwire.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator, Sequence

    from funcwire.telemetry import TelemetryReporter

    type ContextOverride = (
        Mapping[str, Any]
        | Callable[[], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]
    )

log = logging.getLogger(__name__)


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"{what} must be a mapping, got {type(value).__name__}",
            hint="Contexts are plain key/value mappings such as dicts.",
        )
    return value


@dataclass(frozen=True)
class Composition:
    """A default context plus an ordered extension list, ready to activate.

    Unpacks as ``(t, create_api)`` for the common destructuring idiom.
    """

    default: Mapping[str, Any]
    extensions: tuple[Extension, ...]
    t: APIBuilder

    def __iter__(self) -> Iterator[Any]:
        yield self.t
        yield self.create_api

    async def resolve_context(
        self,
        states: ExtensionStates,
        override: ContextOverride | None = None,
    ) -> dict[str, Any]:
        """Build the context for exactly one endpoint call.

        Exceptions raised by the override factory or by an extension's
        ``request`` hook propagate unchanged.
        """
        if override is None:
            base: Any = self.default
        elif isinstance(override, Mapping):
            base = override
        else:
            base = override()
            if inspect.isawaitable(base):
                base = await base
        ctx: dict[str, Any] = dict(_require_mapping(base, "Runtime context"))

        for ext in self.extensions:
            if ext.request is None:
                continue
            fragment = ext.request(states.get(ext.name), MappingProxyType(ctx))
            if inspect.isawaitable(fragment):
                fragment = await fragment
            if fragment is None:
                continue
            if not isinstance(fragment, Mapping):
                raise ExtensionError(
                    f"request() must return a mapping, got {type(fragment).__name__}",
                    extension=ext.name,
                )
            log.debug("Extension %r contributed context keys %s", ext.name, list(fragment))
            ctx = {**ctx, **fragment}
        return ctx

    def create_api(
        self,
        root: Mapping[str, Any],
        *,
        context: ContextOverride | None = None,
        config: Config | None = None,
        reporters: Sequence[TelemetryReporter] = (),
    ) -> ActivatedAPI:
        """Activate a declaration tree into callable endpoints.

        Args:
            root: Mapping of declarations, routers and nested mappings.
            context: Optional override for the default context; either a
                mapping or a zero-argument (possibly async) factory called on
                every endpoint call.
            config: Dispatch settings; resolved from the environment when omitted.
            reporters: Telemetry reporters used when telemetry is enabled.

        Returns:
            An ``ActivatedAPI`` with the same shape as ``root``.
        """
        if not isinstance(root, Mapping):
            raise TypeError(f"create_api() root must be a mapping, got {type(root).__name__}")
        if context is not None and not (isinstance(context, Mapping) or callable(context)):
            raise ConfigurationError(
                f"context must be a mapping or a callable, got {type(context).__name__}",
            )
        final_config = config if config is not None else Config.from_env()

        states = ExtensionStates(self.extensions)

        async def resolve() -> dict[str, Any]:
            return await self.resolve_context(states, context)

        dispatcher = Dispatcher(
            resolve_context=resolve,
            states=states,
            config=final_config,
            telemetry=TelemetryContext(*reporters, enabled=final_config.telemetry),
        )
        return ActivatedAPI(activate(root, dispatcher), states=states)


@dataclass(frozen=True)
class ContextDefinition:
    """Result of ``define_context``; call ``with_extensions`` to continue."""

    default: Mapping[str, Any]

    def with_extensions(self, extensions: Sequence[Extension]) -> Composition:
        exts = tuple(extensions)
        ensure_unique_names(exts)
        return Composition(
            default=self.default,
            extensions=exts,
            t=APIBuilder.from_extensions(exts),
        )


def define_context(default: Mapping[str, Any] | None = None) -> ContextDefinition:
    """Start a composition with an optional default context.

    Example:
        t, create_api = define_context({"user_id": "anon"}).with_extensions([rpc])
    """
    if default is None:
        return ContextDefinition(MappingProxyType({}))
    return ContextDefinition(
        MappingProxyType(dict(_require_mapping(default, "Default context")))
    )


__all__ = ["Composition", "ContextDefinition", "define_context"]
