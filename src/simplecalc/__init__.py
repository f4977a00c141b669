"""
simplecalc - arithmetic expression evaluator.

Evaluates infix expressions over decimal numbers with the operators
``^ / * - +`` (applied in that order) and parentheses.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    CalcError,
    ConfigurationError,
    DivisionByZeroError,
    InvalidExpressionError,
    NumericOverflowError,
    UnknownOperatorError,
    evaluate,
    list_operators,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "evaluate",
    "list_operators",
    "CalcError",
    "ConfigurationError",
    "DivisionByZeroError",
    "InvalidExpressionError",
    "NumericOverflowError",
    "UnknownOperatorError",
]
