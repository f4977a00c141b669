"""Tests for the string-reduction evaluator."""

from __future__ import annotations

import logging
import math

import pytest

from simplecalc.core import reducer
from simplecalc.core.errors import (
    DivisionByZeroError,
    InvalidExpressionError,
    NumericOverflowError,
    UnknownOperatorError,
)
from simplecalc.core.reducer import (
    contains_operator,
    count_binary_operators,
    extract_binary_expression,
    find_parenthesized,
    parse_number,
    reduce_expression,
    reduce_flat,
    resolve_parentheses,
)

# =============================================================================
# Parentheses
# =============================================================================


class TestFindParenthesized:
    def test_leftmost_outer_group(self) -> None:
        assert find_parenthesized("2*(3+(4-1))+(5)") == (2, 10)

    def test_single_group(self) -> None:
        assert find_parenthesized("(1)") == (0, 2)

    def test_unmatched(self) -> None:
        with pytest.raises(InvalidExpressionError, match="Unmatched"):
            find_parenthesized("(1+2")

    def test_no_parentheses(self) -> None:
        with pytest.raises(InvalidExpressionError):
            find_parenthesized("1+2")


class TestResolveParentheses:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("(2*(3+4))", "14"),
            ("((1+2)*(3+4))", "21"),
            ("-(0-6)", "6"),
            ("-(-2)", "2"),
            ("3-(0-2)^2", "-1"),
            ("3+(0-2)^2", "7"),
            ("(0-1)-(0-2)", "1"),
            ("2-(0-3)*2", "8"),
            ("2+(0-3)*2", "-4"),
            ("5*(0-1)^2", "5"),
            ("2^(0-1)", "0.5"),
        ],
    )
    def test_resolves_to_literal(self, expression: str, expected: str) -> None:
        assert resolve_parentheses(expression) == expected

    def test_deep_nesting(self) -> None:
        expression = "(" * 2000 + "1" + ")" * 2000
        assert resolve_parentheses(expression) == "1"

    def test_deep_nesting_with_signs(self) -> None:
        expression = "-(" * 500 + "0-3" + ")" * 500
        assert resolve_parentheses(expression) == "-3"

    def test_unmatched_deep_inside(self) -> None:
        with pytest.raises(InvalidExpressionError, match=r"Unmatched '\('"):
            resolve_parentheses("(" * 200 + "1" + ")" * 199 + "+(2")

    def test_stray_close(self) -> None:
        with pytest.raises(InvalidExpressionError, match=r"Unmatched '\)'"):
            resolve_parentheses("1)+2")


# =============================================================================
# Flat reduction
# =============================================================================


class TestContainsOperator:
    def test_leading_sign_is_not_an_operator(self) -> None:
        assert not contains_operator("-5+3", "-")

    def test_binary_minus_after_signed_operand(self) -> None:
        assert contains_operator("-5-3", "-")

    def test_sign_after_operator(self) -> None:
        assert not contains_operator("5*-3", "-")

    def test_present(self) -> None:
        assert contains_operator("2^3", "^")

    def test_absent(self) -> None:
        assert not contains_operator("2^3", "+")

    def test_unknown_symbol(self) -> None:
        with pytest.raises(UnknownOperatorError):
            contains_operator("1+2", "%")


class TestExtractBinaryExpression:
    @pytest.mark.parametrize(
        ("expression", "symbol", "expected"),
        [
            ("-5+3", "+", (0, 4, "-5", "3")),
            ("1-3^2", "^", (2, 5, "3", "2")),
            ("2*-3", "*", (0, 4, "2", "-3")),
            ("3--2^2", "^", (2, 6, "-2", "2")),
            ("10.5/2.5", "/", (0, 8, "10.5", "2.5")),
            ("1+2+3", "+", (0, 3, "1", "2")),
        ],
    )
    def test_operands(
        self, expression: str, symbol: str, expected: tuple[int, int, str, str]
    ) -> None:
        assert extract_binary_expression(expression, symbol) == expected

    def test_operator_missing(self) -> None:
        with pytest.raises(InvalidExpressionError):
            extract_binary_expression("12+3", "*")

    def test_right_operand_missing(self) -> None:
        with pytest.raises(InvalidExpressionError, match="Missing right operand"):
            extract_binary_expression("1+", "+")


class TestReduceFlat:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("5", "5"),
            ("-5", "-5"),
            ("2+3*4", "14"),
            ("8/2*4", "16"),
            ("8/2/2", "2"),
            ("1-2-3", "-4"),
            ("1+2-5", "-2"),
            ("2^3^2", "64"),
            ("-2^2", "4"),
            ("-0/5", "0"),
            ("0.1+0.2", "0.30000000000000004"),
        ],
    )
    def test_reduces(self, expression: str, expected: str) -> None:
        assert reduce_flat(expression) == expected

    def test_missing_operand(self) -> None:
        with pytest.raises(InvalidExpressionError):
            reduce_flat("1+")

    def test_not_a_number(self) -> None:
        with pytest.raises(InvalidExpressionError, match="did not reduce"):
            reduce_flat("1..2")

    def test_division_by_zero(self) -> None:
        with pytest.raises(DivisionByZeroError):
            reduce_flat("1+2/0")

    def test_step_that_does_not_shrink_is_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(reducer, "format_number", lambda value: "1+1")
        with pytest.raises(InvalidExpressionError, match="cannot be reduced"):
            reduce_flat("2*3")

    @pytest.mark.parametrize("expression", ["1+2*3-4/2^2", "-1-2-3-4", "2^2^2^2", "9"])
    def test_one_step_per_operator(
        self, expression: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="simplecalc.core.reducer"):
            reduce_flat(expression)
        steps = [r for r in caplog.records if r.getMessage().startswith("Reduced")]
        assert len(steps) == count_binary_operators(expression)


class TestCountBinaryOperators:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [("5", 0), ("-5", 0), ("1+2", 1), ("-1-2*-3", 2), ("1.5^2/3", 2)],
    )
    def test_counts(self, expression: str, expected: int) -> None:
        assert count_binary_operators(expression) == expected


class TestParseNumber:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("12", 12.0), ("-12.5", -12.5), ("1.", 1.0), (".5", 0.5)],
    )
    def test_parses(self, text: str, expected: float) -> None:
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1e5", "--1", "1.2.3", "inf"])
    def test_rejects(self, text: str) -> None:
        with pytest.raises(InvalidExpressionError):
            parse_number(text)

    def test_too_large(self) -> None:
        with pytest.raises(NumericOverflowError):
            parse_number("1" + "0" * 400)


# =============================================================================
# Full evaluation
# =============================================================================


class TestReduceExpression:
    def test_spaces_and_parentheses(self) -> None:
        assert reduce_expression(" ( 2 + 3 ) * 4 ") == 20.0

    def test_negative_zero_result(self) -> None:
        result = reduce_expression("-0/5")
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    def test_deeply_nested_expression(self) -> None:
        assert reduce_expression("(" * 101 + "1" + ")" * 101) == 1.0

    def test_invalid_input_is_rejected_before_reduction(self) -> None:
        with pytest.raises(InvalidExpressionError, match="Disallowed operator sequence"):
            reduce_expression("1--2")
