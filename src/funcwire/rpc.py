"""Built-in RPC extension: the ``query`` and ``mutation`` declaration helpers.

Example:
    t, create_api = define_context({"user_id": "anon"}).with_extensions([rpc])

    class GetUser(BaseModel):
        id: int

    @t.query(args=GetUser)
    async def get_user(args: GetUser, ctx: Mapping[str, Any]) -> Result[dict, DomainError]:
        return success({"id": args.id, "requested_by": ctx["user_id"]})

The helpers also accept the handler directly:
``t.mutation(args=CreateUser, handler=create_user)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, overload

from funcwire.builder import MutationDefinition, QueryDefinition
from funcwire.extensions import Extension

if TYPE_CHECKING:
    from collections.abc import Callable

    from funcwire.builder import Handler


@overload
def query(*, args: Any, handler: Handler) -> QueryDefinition: ...
@overload
def query(*, args: Any) -> Callable[[Handler], QueryDefinition]: ...
def query(
    *, args: Any, handler: Handler | None = None
) -> QueryDefinition | Callable[[Handler], QueryDefinition]:
    """Declare a read-only endpoint (usable as a decorator when ``handler`` is omitted)."""
    if handler is None:
        return lambda fn: QueryDefinition(args=args, handler=fn)
    return QueryDefinition(args=args, handler=handler)


@overload
def mutation(*, args: Any, handler: Handler) -> MutationDefinition: ...
@overload
def mutation(*, args: Any) -> Callable[[Handler], MutationDefinition]: ...
def mutation(
    *, args: Any, handler: Handler | None = None
) -> MutationDefinition | Callable[[Handler], MutationDefinition]:
    """Declare an endpoint with side effects (decorator form as for ``query``)."""
    if handler is None:
        return lambda fn: MutationDefinition(args=args, handler=fn)
    return MutationDefinition(args=args, handler=handler)


rpc = Extension(
    name="core",
    functions=lambda: {"query": query, "mutation": mutation},
)


__all__ = ["mutation", "query", "rpc"]
