"""Telemetry context and reporter interfaces.

Disabled contexts are a shared, stateless no-op. Enabled contexts time nested
scopes (``endpoint.validate``, ``endpoint.context``, ``endpoint.handler``) and
forward counters to reporters. Scope nesting is tracked in a ``ContextVar`` so
concurrent endpoint calls never see each other's scopes.
"""

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

from funcwire._dev_flags import env_flag

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar(
    "funcwire_scope_stack",
    default=(),
)


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Immutable, stateless stand-in used whenever telemetry is off."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        _: type[BaseException] | None,
        __: BaseException | None,
        ___: TracebackType | None,
    ) -> bool | None:
        return None

    @property
    def is_enabled(self) -> bool:
        return False

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager["_EnabledTelemetryContext"]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator["_EnabledTelemetryContext"]:
        if not name:
            raise ValueError("Scope name must be a non-empty string")
        stack = _scope_stack_var.get()
        token = _scope_stack_var.set((*stack, name))
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            scope_path = ".".join((*stack, name))
            meta = {"depth": len(stack), **metadata}
            for reporter in self.reporters:
                try:
                    reporter.record_timing(scope_path, duration, **meta)
                except Exception as e:
                    log.error(
                        "Telemetry reporter '%s' failed: %s",
                        type(reporter).__name__,
                        e,
                        exc_info=True,
                    )

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter metric under the current scope."""
        scope_path = ".".join((*_scope_stack_var.get(), name))
        for reporter in self.reporters:
            try:
                reporter.record_metric(
                    scope_path, increment, metric_type="counter", **metadata
                )
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )

    @property
    def is_enabled(self) -> bool:
        return True


_NO_OP_SINGLETON = _NoOpTelemetryContext()

type TelemetryContextProtocol = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: bool | None = None
) -> TelemetryContextProtocol:
    """Return a telemetry context.

    ``enabled=None`` follows the ``FUNCWIRE_TELEMETRY`` toggle, parsed like
    every other ``FUNCWIRE_*`` flag. An enabled context with no reporters
    logs timings at DEBUG level through ``LoggingReporter``.
    """
    if enabled is None:
        enabled = bool(env_flag("FUNCWIRE_TELEMETRY"))
    if not enabled:
        return _NO_OP_SINGLETON
    return _EnabledTelemetryContext(*(reporters or (LoggingReporter(),)))


class LoggingReporter:
    """Writes every timing and metric to the ``funcwire.telemetry`` logger."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        log.debug("timing %s %.6fs %s", scope, duration, metadata)

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        log.debug("metric %s=%r %s", scope, value, metadata)


class InMemoryReporter:
    """Collects telemetry in memory (development and tests)."""

    def __init__(self) -> None:
        self.timings: dict[str, list[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, list[tuple[Any, dict[str, Any]]]] = {}

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings.setdefault(scope, []).append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics.setdefault(scope, []).append((value, metadata))

    def total(self, scope: str) -> Any:
        """Sum of recorded values for a metric scope (0 when absent)."""
        return sum(v for v, _ in self.metrics.get(scope, ()))

    def reset(self) -> None:
        self.timings.clear()
        self.metrics.clear()
