"""Catch-to-Result helpers.

The dispatch path lets exceptions raised by handlers and extensions propagate
to the caller. Wrap a call in these helpers to fold both channels into a
single ``Result``::

    result = await try_catch_async(lambda: api.users.get({"id": 1}))

A ``Failure`` produced by the endpoint itself comes back as
``Success(Failure(...))``; use ``flatten`` to collapse the two layers.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from funcwire.result import Failure, Success, is_result

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from funcwire.result import Result


def try_catch[T](fn: Callable[[], T]) -> Result[T, Exception]:
    """Call ``fn`` and capture any ``Exception`` as a ``Failure``."""
    try:
        return Success(fn())
    except Exception as exc:
        return Failure(exc)


async def try_catch_async[T](
    fn: Callable[[], Awaitable[T] | T],
) -> Result[T, Exception]:
    """Async variant of ``try_catch``; ``fn`` may return a value or an awaitable.

    Cancellation is not an ``Exception`` subclass and is never captured.
    """
    try:
        value = fn()
        if inspect.isawaitable(value):
            value = await value
        return Success(value)
    except Exception as exc:
        return Failure(exc)


async def from_async[T](fn: Callable[[], Awaitable[T]]) -> Result[T, Exception]:
    """Run an async factory and return its outcome as a ``Result``."""
    return await try_catch_async(fn)


def flatten(result: Result[Any, Any]) -> Result[Any, Any]:
    """Collapse ``Success(Success(v))``/``Success(Failure(e))`` into the inner result."""
    if isinstance(result, Success) and is_result(result.value):
        return result.value
    return result


__all__ = ["flatten", "from_async", "try_catch", "try_catch_async"]
