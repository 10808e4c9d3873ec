"""Configuration: frozen dispatch settings with environment resolution."""

from __future__ import annotations

from dataclasses import dataclass

import dotenv

from funcwire._dev_flags import env_flag
from funcwire.errors import ConfigurationError

_ENV_VARS: dict[str, str] = {
    "catch_exceptions": "FUNCWIRE_CATCH_EXCEPTIONS",
    "validate_results": "FUNCWIRE_VALIDATE",
    "telemetry": "FUNCWIRE_TELEMETRY",
}


@dataclass(frozen=True)
class Config:
    """Immutable settings for one activated API.

    Example:
        api = create_api(root, config=Config(catch_exceptions=True))
    """

    #: Convert exceptions raised by handlers/extensions into ``Failure(UnhandledError)``.
    catch_exceptions: bool = False
    #: Raise ``InvariantViolationError`` when a handler returns a non-Result.
    validate_results: bool = False
    #: Time validation, context resolution and handler calls per endpoint.
    telemetry: bool = False

    def __post_init__(self) -> None:
        """Reject non-boolean toggles early."""
        for name in _ENV_VARS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"{name} must be a bool, got {type(value).__name__}",
                    hint=f"Pass True/False or set {_ENV_VARS[name]}=1/0.",
                )

    @classmethod
    def from_env(cls) -> Config:
        """Resolve settings from ``FUNCWIRE_*`` variables (after loading ``.env``)."""
        dotenv.load_dotenv()
        values: dict[str, bool] = {}
        for name, env_var in _ENV_VARS.items():
            parsed = env_flag(env_var)
            if parsed is None:
                raise ConfigurationError(
                    f"Invalid value for {env_var}",
                    hint="Use one of 1/0, true/false, yes/no, on/off.",
                )
            values[name] = parsed
        return cls(**values)
