# tests/test_result.py
"""Combinators on Success / Failure."""

from __future__ import annotations

import pytest

from cloudbucket.result import Failure, Result, Success, collect_results


def _half(n: int) -> Result[int, str]:
    return Success(n // 2) if n % 2 == 0 else Failure(f"{n} is odd")


def test_success_combinators() -> None:
    result: Result[int, str] = Success(4)
    assert result.is_success() and not result.is_failure()
    assert result.unwrap() == 4
    assert result.unwrap_or(0) == 4
    assert result.map(lambda n: n + 1) == Success(5)
    assert result.map_error(len) == Success(4)
    assert result.and_then(_half) == Success(2)


def test_failure_combinators() -> None:
    result: Result[int, str] = Failure("boom")
    assert result.is_failure() and not result.is_success()
    assert result.unwrap_or(7) == 7
    assert result.map(lambda n: n + 1) == Failure("boom")
    assert result.map_error(len) == Failure(4)
    assert result.and_then(_half) == Failure("boom")
    with pytest.raises(RuntimeError, match="boom"):
        result.unwrap()


def test_and_then_short_circuits_on_odd() -> None:
    eight: Result[int, str] = Success(8)
    six: Result[int, str] = Success(6)
    assert eight.and_then(_half).and_then(_half) == Success(2)
    assert six.and_then(_half).and_then(_half) == Failure("3 is odd")


def test_collect_results_keeps_order() -> None:
    assert collect_results([Success(3), Success(1), Success(2)]) == Success([3, 1, 2])


def test_collect_results_returns_first_failure() -> None:
    results: list[Result[int, str]] = [Success(1), Failure("a"), Failure("b")]
    assert collect_results(results) == Failure("a")


def test_collect_results_empty() -> None:
    assert collect_results([]) == Success([])
