"""Result and Maybe outcome types: predicates, matching, immutability."""

from __future__ import annotations

import dataclasses
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from funcwire import (
    Failure,
    Nothing,
    Some,
    Success,
    UnwrapError,
    failure,
    is_result,
    maybe,
    none,
    some,
    success,
)

pytestmark = pytest.mark.unit

_values = st.one_of(st.integers(), st.text(), st.none(), st.lists(st.integers()))


@given(value=_values)
@settings(max_examples=25, deadline=None, derandomize=True)
def test_success_predicates_and_match_invoke_only_success_branch(value: Any) -> None:
    """Property: success(v) is a Success and match calls on_success with v."""
    seen: list[tuple[str, Any]] = []
    result = success(value)

    assert result.is_success() is True
    assert result.is_failure() is False
    out = result.match(
        on_success=lambda v: seen.append(("success", v)) or "s",
        on_failure=lambda e: seen.append(("failure", e)) or "f",
    )

    assert out == "s"
    assert seen == [("success", value)]


@given(error=_values)
@settings(max_examples=25, deadline=None, derandomize=True)
def test_failure_predicates_and_match_invoke_only_failure_branch(error: Any) -> None:
    """Property: failure(e) is a Failure and match calls on_failure with e."""
    seen: list[tuple[str, Any]] = []
    result = failure(error)

    assert result.is_success() is False
    assert result.is_failure() is True
    out = result.match(
        on_success=lambda v: seen.append(("success", v)) or "s",
        on_failure=lambda e: seen.append(("failure", e)) or "f",
    )

    assert out == "f"
    assert seen == [("failure", error)]


def test_match_requires_both_handlers() -> None:
    with pytest.raises(TypeError):
        success(1).match(on_success=lambda v: v)  # type: ignore[call-arg]
    with pytest.raises(TypeError):
        failure("x").match(on_failure=lambda e: e)  # type: ignore[call-arg]


def test_results_are_frozen_and_compare_by_value() -> None:
    result = success({"a": 1})

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.value = 2  # type: ignore[misc]
    assert success(1) == Success(1)
    assert failure("e") == Failure("e")
    assert success(1) != failure(1)
    assert hash(success(1)) == hash(success(1))


def test_structural_pattern_matching_on_variants() -> None:
    def describe(result: Success[int] | Failure[str]) -> str:
        match result:
            case Success(value):
                return f"ok:{value}"
            case Failure(error):
                return f"err:{error}"

    assert describe(success(3)) == "ok:3"
    assert describe(failure("boom")) == "err:boom"


def test_map_and_map_error_touch_only_their_variant() -> None:
    assert success(2).map(lambda v: v * 10) == success(20)
    assert success(2).map_error(lambda e: "never") == success(2)
    assert failure("e").map(lambda v: "never") == failure("e")
    assert failure("e").map_error(str.upper) == failure("E")


def test_unwrap_returns_value_or_raises_unwrap_error() -> None:
    assert success(5).unwrap() == 5
    assert success(5).unwrap_or(0) == 5
    assert failure("bad").unwrap_or(0) == 0

    cause = ValueError("inner")
    with pytest.raises(UnwrapError) as exc:
        failure(cause).unwrap()
    assert exc.value.error is cause
    assert exc.value.__cause__ is cause


def test_is_result_recognizes_only_the_two_variants() -> None:
    assert is_result(success(None))
    assert is_result(failure(None))
    assert not is_result({"value": 1})
    assert not is_result(None)


def test_tags_identify_variants() -> None:
    assert success(1).tag == "success"
    assert failure(1).tag == "failure"
    assert some(1).tag == "some"
    assert none().tag == "none"


# --- Maybe ---


def test_some_and_none_predicates_and_match() -> None:
    assert some(1).is_some() and not some(1).is_none()
    assert none().is_none() and not none().is_some()

    assert some(4).match(on_some=lambda v: v + 1, on_none=lambda: 0) == 5
    assert none().match(on_some=lambda v: v + 1, on_none=lambda: 0) == 0


def test_none_is_a_shared_singleton() -> None:
    assert none() is none()
    assert none() == Nothing()


def test_maybe_lifts_python_optionals() -> None:
    assert maybe(None) is none()
    assert maybe(0) == Some(0)
    assert maybe("") == Some("")
    assert maybe(None).unwrap_or("d") == "d"
    assert maybe(3).unwrap_or("d") == 3
