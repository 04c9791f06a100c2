"""Tests for orbit.core.result module."""

import pytest

from orbit.core.result import Err, Ok, Result


def test_ok_unwrap() -> None:
    assert Ok("v1.1.0").unwrap() == "v1.1.0"


def test_err_unwrap_raises() -> None:
    with pytest.raises(ValueError, match="called unwrap on Err: 'boom'"):
        Err("boom").unwrap()


def test_equality() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert Err("tag") == Err("tag")


def test_frozen() -> None:
    result = Ok(42)
    with pytest.raises(AttributeError):
        result.value = 0  # type: ignore[misc]


def test_pattern_matching() -> None:
    def describe(result: Result[str, str]) -> str:
        match result:
            case Ok(value):
                return f"released {value}"
            case Err(error):
                return f"failed: {error}"

    assert describe(Ok("v1.0.0")) == "released v1.0.0"
    assert describe(Err("publish")) == "failed: publish"


def test_isinstance_narrowing() -> None:
    results: list[Result[int, str]] = [Ok(1), Err("no commits"), Ok(3)]
    errors = [r.error for r in results if isinstance(r, Err)]
    assert errors == ["no commits"]
