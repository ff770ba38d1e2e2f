from __future__ import annotations

import math

import pytest

from core.expression import (
    ExpressionError,
    calculate,
    clean_expression,
    evaluate_expression,
    format_result,
    tokenize,
    validate_expression,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("What is 5 + 5?", "5 + 5"),
        ("calculate   (2+3) *  4 apples", "(2+3) * 4"),
        ("COMPUTE 7*6", "7*6"),
        ("solve 12 / 4", "12 / 4"),
        ("what's 3-1", "3-1"),
        ("  1 +\t\n 2  ", "1 + 2"),
        ("import os; os.system('rm -rf /')", ".( - /)"),
    ],
)
def test_clean_expression_strips_filler_and_noise(raw: str, expected: str) -> None:
    assert clean_expression(raw) == expected


@pytest.mark.parametrize("expression", ["((1+2)*3)", "1 + 2", "10 % 3", ".5 * (4 - 2)"])
def test_validate_expression_accepts_arithmetic(expression: str) -> None:
    validate_expression(expression)


@pytest.mark.parametrize(
    "expression, message",
    [
        ("(1+2", "Unbalanced parentheses"),
        (")1+2(", "Unbalanced parentheses"),
        ("(1+2))", "Unbalanced parentheses"),
        ("2 + x", "invalid characters"),
        ("Math.PI", "invalid characters"),
        ("$1", "invalid characters"),
        ("1_000", "invalid characters"),
        ("2 ^ 3", "invalid characters"),
        ("", "invalid characters"),
    ],
)
def test_validate_expression_rejects_unsafe_input(expression: str, message: str) -> None:
    with pytest.raises(ExpressionError, match=message):
        validate_expression(expression)


def test_letters_are_rejected_before_any_tokenisation(monkeypatch: pytest.MonkeyPatch) -> None:
    import core.expression as expression_module

    def fail(*args, **kwargs):  # pragma: no cover - must never run
        raise AssertionError("evaluation reached for rejected input")

    monkeypatch.setattr(expression_module, "evaluate_expression", fail)
    monkeypatch.setattr(expression_module, "clean_expression", lambda raw: raw)

    with pytest.raises(ExpressionError):
        expression_module.calculate("1 + abs(2)")


def test_tokenize_splits_numbers_and_operators() -> None:
    kinds = [token.kind for token in tokenize("12.5*(3 - .5)")]
    assert kinds == ["number", "*", "(", "number", "-", "number", ")"]


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("6", 6.0),
        ("2 + 3 * 4", 14.0),
        ("(2 + 3) * 4", 20.0),
        ("10 - 4 - 3", 3.0),
        ("100 / 10 / 5", 2.0),
        ("7 % 3", 1.0),
        ("-7 % 3", -1.0),
        ("2 * -3", -6.0),
        ("-(2 + 3)", -5.0),
        ("+4 - -1", 5.0),
        (".5 + .5", 1.0),
        ("2 + 3 * 4 % 5 - 6 / 3", 2.0),
        ("((1+2)*3)", 9.0),
    ],
)
def test_evaluate_expression_uses_standard_precedence(expression: str, expected: float) -> None:
    assert evaluate_expression(expression) == pytest.approx(expected)


def test_division_and_modulo_by_zero_follow_ieee() -> None:
    assert evaluate_expression("1/0") == math.inf
    assert evaluate_expression("-1/0") == -math.inf
    assert math.isnan(evaluate_expression("0/0"))
    assert math.isnan(evaluate_expression("5 % 0"))


@pytest.mark.parametrize("expression", ["5 +", "2 ** 3", "(", "()", "1 2", "1..2", "*3", "4 (2)"])
def test_evaluate_expression_rejects_malformed_input(expression: str) -> None:
    with pytest.raises(ExpressionError):
        evaluate_expression(expression)


def test_deeply_nested_expression_is_rejected_not_crashing() -> None:
    expression = "(" * 5000 + "1" + ")" * 5000
    with pytest.raises(ExpressionError, match="nested too deeply"):
        evaluate_expression(expression)


@pytest.mark.parametrize(
    "value, expected",
    [
        (6.0, "6"),
        (-42.0, "-42"),
        (2.5, "2.5"),
        (1 / 3, "0.333333"),
        (2 / 3, "0.666667"),
        (0.1 + 0.2, "0.3"),
        (1.10, "1.1"),
        (-0.0, "0"),
        (1e-7, "0"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (-2.5e22, "-2.5e+22"),
        (1.23456789e28, "1.23456789e+28"),
        (math.nan, "Not a number"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
    ],
)
def test_format_result(value: float, expected: str) -> None:
    assert format_result(value) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10/4", ("10/4", "2.5")),
        ("1/0", ("1/0", "Infinity")),
        ("6", ("6", "6")),
        ("what is 0/0", ("0/0", "Not a number")),
        ("1000000000 * 1000000000000", ("1000000000 * 1000000000000", "1e+21")),
    ],
)
def test_calculate_pipeline(raw: str, expected: tuple) -> None:
    assert calculate(raw) == expected
