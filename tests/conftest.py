"""Pytest configuration and fixtures.

Provides environment isolation and small composition doubles shared by the
unit and integration suites.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

from funcwire import Config, Extension, define_context, rpc

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CallLog:
    """Records hook invocations in order so tests can assert sequencing."""

    events: list[str] = field(default_factory=list)

    def extension(
        self,
        name: str,
        fragment: dict[str, Any] | None = None,
        *,
        with_init: bool = False,
    ) -> Extension:
        """Build an extension that logs its init/request calls."""

        def init() -> dict[str, int]:
            self.events.append(f"{name}.init")
            return {"calls": 0}

        async def request(state: Any, ctx: Any) -> dict[str, Any]:
            self.events.append(f"{name}.request")
            if isinstance(state, dict):
                state["calls"] += 1
            return dict(fragment or {})

        return Extension(name=name, init=init if with_init else None, request=request)


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def plain_config() -> Config:
    """Explicit two-tier dispatch config, independent of the environment."""
    return Config(catch_exceptions=False, validate_results=False, telemetry=False)


@pytest.fixture
def composition():
    """A default composition with only the built-in rpc extension."""
    return define_context({"user_id": "default-user"}).with_extensions([rpc])


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_funcwire_env(monkeypatch):
    """Clear FUNCWIRE_* variables so ambient settings never leak into tests."""
    for key in list(os.environ.keys()):
        if key.startswith("FUNCWIRE_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
