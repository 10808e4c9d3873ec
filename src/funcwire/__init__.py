"""funcwire: compose extensions into a typed, Result-returning API surface.

Public API:
    - define_context(): start a composition with a default context
    - Extension / extension(): contribute state, context and builder helpers
    - rpc: built-in extension providing ``t.query`` and ``t.mutation``
    - Result (Success/Failure) and Maybe (Some/Nothing) outcome types
    - Config: dispatch settings

Example:
    t, create_api = define_context({"user_id": "anon"}).with_extensions([rpc])

    get_user = t.query(
        args=GetUser,
        handler=lambda args, ctx: success({"id": args.id, "by": ctx["user_id"]}),
    )

    api = create_api({"users": t.router({"get": get_user})})
    result = await api.users.get({"id": 1})
"""

from __future__ import annotations

import logging

from funcwire.activation import ActivatedAPI, Endpoint, Namespace
from funcwire.attempt import flatten, from_async, try_catch, try_catch_async
from funcwire.builder import (
    APIBuilder,
    Declaration,
    MutationDefinition,
    QueryDefinition,
    Router,
    router,
)
from funcwire.config import Config
from funcwire.context import Composition, ContextDefinition, define_context
from funcwire.errors import (
    ArgsValidationError,
    ConfigurationError,
    DisposedError,
    DomainError,
    ExtensionError,
    FuncwireError,
    InvariantViolationError,
    UnhandledError,
    UnwrapError,
)
from funcwire.extensions import Extension, ExtensionStates, extension
from funcwire.maybe import Maybe, Nothing, Some, maybe, none, some
from funcwire.result import Failure, Result, Success, failure, is_result, success
from funcwire.rpc import mutation, query, rpc
from funcwire.schema import Issue, ParseResult, PydanticSchema, Schema, as_schema

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("funcwire")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("funcwire").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Composition
    "define_context",
    "ContextDefinition",
    "Composition",
    "Extension",
    "ExtensionStates",
    "extension",
    "rpc",
    "query",
    "mutation",
    "router",
    # Declarations and activation
    "APIBuilder",
    "Declaration",
    "QueryDefinition",
    "MutationDefinition",
    "Router",
    "ActivatedAPI",
    "Endpoint",
    "Namespace",
    # Outcome types
    "Result",
    "Success",
    "Failure",
    "success",
    "failure",
    "is_result",
    "Maybe",
    "Some",
    "Nothing",
    "some",
    "none",
    "maybe",
    "try_catch",
    "try_catch_async",
    "from_async",
    "flatten",
    # Schemas
    "Schema",
    "ParseResult",
    "Issue",
    "PydanticSchema",
    "as_schema",
    # Configuration
    "Config",
    # Errors
    "FuncwireError",
    "ArgsValidationError",
    "ConfigurationError",
    "DisposedError",
    "DomainError",
    "ExtensionError",
    "InvariantViolationError",
    "UnhandledError",
    "UnwrapError",
]
