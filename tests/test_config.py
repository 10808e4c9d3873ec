"""Configuration boundary tests."""

from __future__ import annotations

import pytest

from funcwire import Config, ConfigurationError, define_context, rpc

pytestmark = pytest.mark.unit


def test_defaults_keep_two_tier_error_handling() -> None:
    cfg = Config()

    assert cfg.catch_exceptions is False
    assert cfg.validate_results is False
    assert cfg.telemetry is False


def test_non_bool_values_raise_with_hint() -> None:
    with pytest.raises(ConfigurationError, match="catch_exceptions must be a bool") as exc:
        Config(catch_exceptions="yes")  # type: ignore[arg-type]
    assert exc.value.hint is not None
    assert "FUNCWIRE_CATCH_EXCEPTIONS" in exc.value.hint

    with pytest.raises(ConfigurationError, match="validate_results"):
        Config(validate_results=1)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), (" ON ", True), ("0", False), ("no", False), ("", False)],
)
def test_from_env_parses_boolean_toggles(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("FUNCWIRE_CATCH_EXCEPTIONS", raw)
    monkeypatch.setenv("FUNCWIRE_VALIDATE", raw)
    monkeypatch.setenv("FUNCWIRE_TELEMETRY", raw)

    cfg = Config.from_env()

    assert cfg.catch_exceptions is expected
    assert cfg.validate_results is expected
    assert cfg.telemetry is expected


@pytest.mark.parametrize("env_var", ["FUNCWIRE_TELEMETRY", "FUNCWIRE_VALIDATE"])
def test_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch, env_var: str) -> None:
    monkeypatch.setenv(env_var, "bogus")

    with pytest.raises(ConfigurationError, match=env_var):
        Config.from_env()


def test_from_env_defaults_every_toggle_off() -> None:
    assert Config.from_env() == Config()


@pytest.mark.asyncio
async def test_create_api_resolves_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUNCWIRE_CATCH_EXCEPTIONS", "1")
    t, create_api = define_context().with_extensions([rpc])

    def boom(args: object, ctx: object) -> object:
        raise ValueError("from env")

    api = create_api({"q": t.query(args=dict, handler=boom)})

    result = await api.q({})
    assert result.is_failure()
    assert str(result.error) == "from env"


def test_str_is_readable() -> None:
    assert "catch_exceptions=True" in str(Config(catch_exceptions=True))
