"""
String-reduction evaluator for simplecalc expressions.

The ideas behind the algorithm:

- open every parenthesized group, leftmost first, by evaluating
  the enclosed expression and putting its value in place of the group
- reduce the remaining flat expression one operator at a time, in catalog
  order, replacing each ``left <op> right`` with its computed value

Signs and operators share the ``-`` character. A ``-`` is a sign when it is
the first character of the expression or directly follows another operator;
otherwise it is a binary subtraction. Signs always belong to the literal that
follows them, so ``-2^2`` is ``(-2)^2``.
"""

from __future__ import annotations

import logging
import math
import re

from simplecalc.core.errors import (
    InvalidExpressionError,
    NumericOverflowError,
    make_invalid_expression,
)
from simplecalc.core.operators import (
    OPERATORS,
    format_number,
    get_operator,
    is_operator,
    normalize_zero,
)
from simplecalc.core.validator import DIGITS, NUMBER_RE, validate_expression

logger = logging.getLogger(__name__)

_SIGNED_NUMBER_RE = re.compile(r"-?(?:" + NUMBER_RE.pattern + r")")
_ADDITIVE_RANK = get_operator("-").rank


def reduce_expression(expression: str) -> float:
    """Evaluate an expression by string reduction.

    Args:
        expression: Raw expression, e.g. ``"(2+3)*4"``

    Returns:
        The zero-normalized result.

    Raises:
        InvalidExpressionError: If the expression is malformed.
        UnknownOperatorError: If a symbol outside the catalog is used.
        DivisionByZeroError: If a divisor reduces to zero.
        NumericOverflowError: If a value is not finite.
    """
    compact = validate_expression(expression)
    literal = resolve_parentheses(compact)
    return normalize_zero(parse_number(literal))


def find_parenthesized(expression: str) -> tuple[int, int]:
    """Return the indices of the leftmost ``(`` and its matching ``)``."""
    start = expression.find("(")
    if start < 0:
        raise InvalidExpressionError(f"No parentheses in {expression!r}")

    depth = 0
    for end in range(start, len(expression)):
        if expression[end] == "(":
            depth += 1
        elif expression[end] == ")":
            depth -= 1
            if depth == 0:
                return start, end

    raise make_invalid_expression("Unmatched '('", expression, start)


def resolve_parentheses(expression: str) -> str:
    """Evaluate every parenthesized group, then reduce the flat remainder.

    Groups are opened leftmost first. The text around an opened group waits
    on an explicit stack until the group's value is known, so nesting depth
    is limited only by the length of the input.

    Returns:
        A single canonical numeric literal.
    """
    # (head, tail) around each group still being evaluated
    pending: list[tuple[str, str]] = []

    while True:
        if "(" in expression:
            start, end = find_parenthesized(expression)
            inner = expression[start + 1 : end]
            if not inner:
                raise make_invalid_expression("Empty parentheses", expression, start)
            pending.append((expression[:start], expression[end + 1 :]))
            expression = inner
            continue

        if ")" in expression:
            raise make_invalid_expression("Unmatched ')'", expression, expression.index(")"))

        value = reduce_flat(expression)
        if not pending:
            return value

        head, tail = pending.pop()
        if value.startswith("-") and head.endswith("-") and _is_sign(head, len(head) - 1):
            # -(negative) drops both signs
            head = head[:-1]
            value = value[1:]
        expression = head + value + tail
        logger.debug("Opened group -> %s", expression)


def contains_operator(expression: str, symbol: str) -> bool:
    """Check whether a flat expression contains ``symbol`` as a binary operator.

    Position 0 is never an operator: a leading ``-`` is the sign of the first
    operand.
    """
    get_operator(symbol)
    return _find_binary(expression, symbol) >= 0


def extract_binary_expression(expression: str, symbol: str) -> tuple[int, int, str, str]:
    """Locate the leftmost binary ``symbol`` and its operands.

    Returns:
        ``(start, end, left, right)`` where ``expression[start:end]`` is the
        whole binary expression.

    Raises:
        InvalidExpressionError: If the operator or one of its operands is missing.
    """
    index = _find_binary(expression, symbol)
    if index < 0:
        raise InvalidExpressionError(f"No {symbol!r} operator in {expression!r}")

    n = len(expression)

    start = index
    while start > 0 and _is_number_char(expression[start - 1]):
        start -= 1
    if start > 0 and _is_sign(expression, start - 1):
        start -= 1

    end = index + 1
    if end < n and expression[end] == "-":
        end += 1
    while end < n and _is_number_char(expression[end]):
        end += 1

    left = expression[start:index]
    right = expression[index + 1 : end]
    if not _SIGNED_NUMBER_RE.fullmatch(left):
        raise make_invalid_expression(f"Missing left operand for {symbol!r}", expression, index)
    if not _SIGNED_NUMBER_RE.fullmatch(right):
        raise make_invalid_expression(f"Missing right operand for {symbol!r}", expression, index)
    return start, end, left, right


def reduce_flat(expression: str) -> str:
    """Reduce a parenthesis-free expression to a single numeric literal.

    Operators are applied in catalog order; within one operator, leftmost
    first. Every step replaces one binary expression with its value, so the
    number of binary operators strictly decreases.
    """
    for op in OPERATORS:
        additive = op.rank >= _ADDITIVE_RANK
        if additive:
            expression = _collapse_signs(expression)

        while contains_operator(expression, op.symbol):
            before = count_binary_operators(expression)
            start, end, left, right = extract_binary_expression(expression, op.symbol)
            value = op.calculate(parse_number(left), parse_number(right))
            reduced = expression[:start] + format_number(value) + expression[end:]
            if additive:
                reduced = _collapse_signs(reduced)

            if count_binary_operators(reduced) >= before:
                raise make_invalid_expression("Expression cannot be reduced", expression, start)
            logger.debug("Reduced %s%s%s in %s -> %s", left, op.symbol, right, expression, reduced)
            expression = reduced

    if not _SIGNED_NUMBER_RE.fullmatch(expression):
        raise InvalidExpressionError(f"Expression did not reduce to a number: {expression!r}")
    return expression


def count_binary_operators(expression: str) -> int:
    """Count characters of a flat expression that act as binary operators."""
    return sum(
        1
        for i in range(1, len(expression))
        if is_operator(expression[i]) and _is_number_char(expression[i - 1])
    )


def parse_number(text: str) -> float:
    """Parse a signed numeric literal.

    Raises:
        InvalidExpressionError: If ``text`` is not a numeric literal.
        NumericOverflowError: If the literal is too large for a float.
    """
    if not _SIGNED_NUMBER_RE.fullmatch(text):
        raise InvalidExpressionError(f"Not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise NumericOverflowError(f"Number is too large: {text}")
    return value


def _find_binary(expression: str, symbol: str) -> int:
    for i in range(1, len(expression)):
        if expression[i] == symbol and _is_number_char(expression[i - 1]):
            return i
    return -1


def _is_number_char(c: str) -> bool:
    return c in DIGITS or c == "."


def _is_sign(expression: str, i: int) -> bool:
    """Check whether the ``-`` at ``i`` is a sign rather than a subtraction."""
    if expression[i] != "-":
        return False
    return i == 0 or is_operator(expression[i - 1]) or expression[i - 1] == "("


def _collapse_signs(expression: str) -> str:
    # Only safe once ^, / and * are gone: a+-b and a-b are then the same.
    return expression.replace("+-", "-")
