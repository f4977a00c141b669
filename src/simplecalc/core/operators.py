"""
Operator catalog for simplecalc.

The catalog is a fixed, ordered tuple of binary operators. Their order is
their precedence: the first operator is applied first. Subtraction must come
before addition because a ``-`` at the start of an expression is read as the
sign of the first operand, and resolving every binary ``-`` before any ``+``
keeps that reading unambiguous.

Parentheses, ``--``, ``+-`` and ``-+`` can never be used as an operator or as
part of one.

All computations use ``float``. Swapping the operator functions for
``decimal.Decimal`` arithmetic is the place to remove round-off errors.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from simplecalc.core.errors import (
    DivisionByZeroError,
    NumericOverflowError,
    UnknownOperatorError,
)

BinaryFunction = Callable[[float, float], float]


class Operator(BaseModel):
    """A binary operator: its symbol, display name, rank and arithmetic."""

    name: str = Field(description="Display name, e.g. POWER")
    symbol: str = Field(min_length=1, max_length=1, description="Single-character symbol")
    rank: int = Field(ge=0, description="Precedence rank, 0 is applied first")
    function: BinaryFunction = Field(exclude=True, repr=False)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}({self.symbol})"

    def calculate(self, x: float, y: float) -> float:
        """Apply the operator and return a finite, zero-normalized result."""
        return _finite(normalize_zero(self.function(x, y)), self.symbol)


def normalize_zero(value: float) -> float:
    """Convert ``-0.0`` to ``0.0`` so comparisons and formatting are stable."""
    if value == 0.0:
        return 0.0
    return value


def _finite(value: float, symbol: str) -> float:
    if not math.isfinite(value):
        raise NumericOverflowError(f"Result of {symbol!r} is not a finite number: {value}")
    return value


def _power(x: float, y: float) -> float:
    # Integer exponents use the ordinary power, so (-2)^2 is 4.
    # A negative base with a fractional exponent keeps the sign of the base.
    try:
        if float(y).is_integer() or x >= 0:
            return x**y
        return -(abs(x) ** y)
    except ZeroDivisionError as e:
        raise DivisionByZeroError(f"Zero cannot be raised to a negative power: 0^{y}") from e
    except OverflowError as e:
        raise NumericOverflowError(f"Power overflows: {x}^{y}") from e


def _divide(x: float, y: float) -> float:
    if normalize_zero(y) == 0.0:
        raise DivisionByZeroError(f"Division by zero: {format_number(x)}/0")
    return x / y


def _multiply(x: float, y: float) -> float:
    return x * y


def _subtract(x: float, y: float) -> float:
    return x - y


def _add(x: float, y: float) -> float:
    return x + y


OPERATORS: tuple[Operator, ...] = (
    Operator(name="POWER", symbol="^", rank=0, function=_power),
    Operator(name="DIVIDE", symbol="/", rank=1, function=_divide),
    Operator(name="MULTIPLY", symbol="*", rank=2, function=_multiply),
    Operator(name="SUBTRACT", symbol="-", rank=3, function=_subtract),
    Operator(name="ADD", symbol="+", rank=4, function=_add),
)

_BY_SYMBOL: dict[str, Operator] = {op.symbol: op for op in OPERATORS}

SYMBOLS: frozenset[str] = frozenset(_BY_SYMBOL)

_OPERATOR_RE = re.compile("[" + "".join(re.escape(op.symbol) for op in OPERATORS) + "]")


def list_operators() -> list[tuple[str, str]]:
    """Return ``(symbol, name)`` pairs in precedence order, for help text."""
    return [(op.symbol, op.name) for op in OPERATORS]


def operator_pattern() -> re.Pattern[str]:
    """Return a pattern matching exactly one registered operator symbol."""
    return _OPERATOR_RE


def is_operator(char: str) -> bool:
    return char in _BY_SYMBOL


def get_operator(symbol: str) -> Operator:
    """Look up an operator by symbol.

    Raises:
        UnknownOperatorError: If the symbol is not registered.
    """
    op = _BY_SYMBOL.get(symbol)
    if op is None:
        raise UnknownOperatorError(symbol)
    return op


def apply(symbol: str, x: float, y: float) -> float:
    """Apply the operator registered under ``symbol`` to ``x`` and ``y``.

    Raises:
        UnknownOperatorError: If the symbol is not registered.
        DivisionByZeroError: If dividing by zero.
        NumericOverflowError: If the result is not finite.
    """
    return get_operator(symbol).calculate(x, y)


def format_number(value: float) -> str:
    """Render a float as a positional decimal string that parses back to it.

    Scientific notation is never produced, so the result can be substituted
    into an expression and scanned as digits and an optional point.

    Examples:
        >>> format_number(20.0)
        '20'
        >>> format_number(1e-05)
        '0.00001'
        >>> format_number(-0.0)
        '0'
    """
    value = normalize_zero(value)
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
