"""
Error types for simplecalc expression validation and evaluation.
"""

from dataclasses import dataclass


class CalcError(Exception):
    """Base exception for all simplecalc errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class InvalidExpressionError(CalcError):
    """
    Raised when an expression is malformed.

    Examples:
    - Unmatched or empty parentheses
    - Missing operand (``1+``)
    - Disallowed operator adjacency (``1--2``)
    - Unparseable numeric literal (``1.2.3``)
    """

    pass


class UnknownOperatorError(CalcError):
    """Raised when a symbol outside the operator catalog is used as an operator."""

    def __init__(self, symbol: str, context: "ErrorContext | None" = None):
        self.symbol = symbol
        super().__init__(f"Unknown operator: {symbol!r}", context)


class DivisionByZeroError(CalcError, ZeroDivisionError):
    """Raised when the right operand of a division is zero."""

    pass


class NumericOverflowError(CalcError, OverflowError):
    """Raised when a literal or an intermediate result is not a finite number."""

    pass


class ConfigurationError(CalcError):
    """Raised for an unknown engine name or an invalid configuration value."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside the expression being evaluated.

    Attributes:
        expression: The expression text the position refers to
        position: 0-based offset of the offending character
    """

    expression: str
    position: int

    def format(self) -> str:
        """
        Format the expression with a marker under the error position.

        Returns:
            Two lines: the expression and a ``^`` under the offending column
        """
        return f"  {self.expression}\n  {' ' * self.position}^"


def make_invalid_expression(
    message: str,
    expression: str | None = None,
    position: int | None = None,
) -> InvalidExpressionError:
    """
    Helper to create an InvalidExpressionError with optional context.

    Args:
        message: Error description
        expression: Optional expression text
        position: Optional 0-based offset inside ``expression``

    Returns:
        InvalidExpressionError with context if a location is provided
    """
    if expression is not None and position is not None:
        return InvalidExpressionError(message, ErrorContext(expression, position))
    return InvalidExpressionError(message)
