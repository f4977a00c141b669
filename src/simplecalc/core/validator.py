"""
Structural validation of raw expression input.

Both engines call :func:`validate_expression` before evaluating, so every
malformed input is rejected the same way regardless of the engine. The
validator only checks shape; arithmetic failures surface during evaluation.
"""

from __future__ import annotations

import logging
import re

from simplecalc.core.errors import (
    ErrorContext,
    InvalidExpressionError,
    UnknownOperatorError,
    make_invalid_expression,
)
from simplecalc.core.operators import is_operator

logger = logging.getLogger(__name__)

DIGITS = "0123456789"

# A numeric literal: 12, 12., 12.5 or .5
NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")

_SPLIT_NUMBER_RE = re.compile(r"[0-9.]\s+[0-9.]")
_WHITESPACE_RE = re.compile(r"\s+")


def validate_expression(expression: str) -> str:
    """Check an expression and return it with all whitespace removed.

    A ``-`` is accepted as a sign only at the start of the expression or
    directly after ``(``. Every other operator must sit between two operands.

    Args:
        expression: Raw user input, e.g. ``" (2 + 3) * 4 "``

    Returns:
        The compacted expression, e.g. ``"(2+3)*4"``.

    Raises:
        InvalidExpressionError: If the expression is malformed.
        UnknownOperatorError: If a symbol outside the catalog is used.
    """
    if expression is None or not expression.strip():
        raise InvalidExpressionError("Expression is empty")

    split = _SPLIT_NUMBER_RE.search(expression)
    if split:
        raise make_invalid_expression(
            "Whitespace inside a number", expression, split.start() + 1
        )

    compact = _WHITESPACE_RE.sub("", expression)
    open_positions: list[int] = []
    expect_operand = True
    i = 0
    n = len(compact)

    while i < n:
        c = compact[i]

        if c == "(":
            if not expect_operand:
                raise make_invalid_expression("Missing operator before '('", compact, i)
            if i + 1 < n and compact[i + 1] == ")":
                raise make_invalid_expression("Empty parentheses", compact, i)
            open_positions.append(i)
            i += 1
            continue

        if c == ")":
            if not open_positions:
                raise make_invalid_expression("Unmatched ')'", compact, i)
            if expect_operand:
                raise make_invalid_expression("Missing operand before ')'", compact, i)
            open_positions.pop()
            i += 1
            continue

        if c in DIGITS or c == ".":
            if not expect_operand:
                raise make_invalid_expression("Missing operator before number", compact, i)
            m = NUMBER_RE.match(compact, i)
            if m is None or (m.end() < n and compact[m.end()] == "."):
                raise make_invalid_expression("Malformed number", compact, i)
            i = m.end()
            expect_operand = False
            continue

        if is_operator(c):
            if expect_operand:
                _check_sign(compact, i)
            expect_operand = True
            i += 1
            continue

        # A letter in operand position is malformed; in operator position it is
        # an unknown operator, as is any other stray symbol
        if (c.isalnum() or c == "_") and expect_operand:
            raise make_invalid_expression(f"Unexpected character: {c!r}", compact, i)
        raise UnknownOperatorError(c, ErrorContext(compact, i))

    if open_positions:
        raise make_invalid_expression("Unmatched '('", compact, open_positions[-1])
    if expect_operand:
        raise make_invalid_expression("Expression ends with an operator", compact, n - 1)

    logger.debug("Validated expression %r", compact)
    return compact


def _check_sign(compact: str, i: int) -> None:
    """Accept ``compact[i]`` as a sign or raise for a missing operand."""
    c = compact[i]
    if c == "-" and (i == 0 or compact[i - 1] == "("):
        return
    if i > 0 and is_operator(compact[i - 1]):
        raise make_invalid_expression(
            f"Disallowed operator sequence {compact[i - 1] + c!r}", compact, i
        )
    raise make_invalid_expression(f"Missing operand before {c!r}", compact, i)
