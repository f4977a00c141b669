"""
simplecalc core: operator catalog, validation and evaluation engines.

Usage:
    from simplecalc.core import evaluate, list_operators

    evaluate("(2+3)*4")  # 20.0
    list_operators()  # [("^", "POWER"), ("/", "DIVIDE"), ...]
"""

from simplecalc.core.engine import (
    ExpressionEngine,
    PrecedenceEngine,
    ReductionEngine,
    evaluate,
    get_engine,
    list_engines,
)
from simplecalc.core.errors import (
    CalcError,
    ConfigurationError,
    DivisionByZeroError,
    InvalidExpressionError,
    NumericOverflowError,
    UnknownOperatorError,
)
from simplecalc.core.operators import (
    OPERATORS,
    Operator,
    apply,
    format_number,
    list_operators,
    operator_pattern,
)

__all__ = [
    # Engines
    "ExpressionEngine",
    "PrecedenceEngine",
    "ReductionEngine",
    "evaluate",
    "get_engine",
    "list_engines",
    # Errors
    "CalcError",
    "ConfigurationError",
    "DivisionByZeroError",
    "InvalidExpressionError",
    "NumericOverflowError",
    "UnknownOperatorError",
    # Operators
    "OPERATORS",
    "Operator",
    "apply",
    "format_number",
    "list_operators",
    "operator_pattern",
]
