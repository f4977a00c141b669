"""Evaluation engines and the public ``evaluate`` entry point.

Two interchangeable strategies compute the same results:

- ``reduce``: string reduction, opening parentheses and collapsing binary
  expressions in operator-catalog order
- ``precedence``: tokenizes and evaluates by operator precedence

Both validate the input the same way and share the operator catalog, so they
agree on errors and on results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from simplecalc.core.config import EngineName
from simplecalc.core.errors import ConfigurationError
from simplecalc.core.precedence import climb_expression
from simplecalc.core.reducer import reduce_expression


class ExpressionEngine(ABC):
    """Base class for expression evaluation strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique engine name used in configuration."""
        pass

    @abstractmethod
    def compute(self, expression: str) -> float:
        """Evaluate an expression.

        Args:
            expression: Raw expression text, e.g. ``"(2+3)*4"``

        Returns:
            The zero-normalized result

        Raises:
            CalcError: A subclass describing why evaluation failed
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ReductionEngine(ExpressionEngine):
    """Evaluates by opening parentheses and reducing the string in place."""

    @property
    def name(self) -> str:
        return EngineName.REDUCE

    def compute(self, expression: str) -> float:
        return reduce_expression(expression)


class PrecedenceEngine(ExpressionEngine):
    """Evaluates a token stream by operator precedence."""

    @property
    def name(self) -> str:
        return EngineName.PRECEDENCE

    def compute(self, expression: str) -> float:
        return climb_expression(expression)


_ENGINES: dict[str, type[ExpressionEngine]] = {
    EngineName.REDUCE: ReductionEngine,
    EngineName.PRECEDENCE: PrecedenceEngine,
}


def list_engines() -> list[str]:
    """List the registered engine names."""
    return [str(name) for name in _ENGINES]


def get_engine(name: str | None = None) -> ExpressionEngine:
    """Create the engine registered under ``name`` (``reduce`` when ``None``).

    Raises:
        ConfigurationError: If no engine has that name.
    """
    key = (name or EngineName.REDUCE).strip().lower()
    engine_cls = _ENGINES.get(key)
    if engine_cls is None:
        raise ConfigurationError(
            f"Unknown engine: {name!r}. Available: {', '.join(list_engines())}"
        )
    return engine_cls()


def evaluate(expression: str, engine: str | None = None) -> float:
    """Evaluate an arithmetic expression.

    Example:
        >>> evaluate("(2+3)*4")
        20.0
        >>> evaluate("2+3*4", engine="precedence")
        14.0

    Raises:
        InvalidExpressionError: Malformed input.
        UnknownOperatorError: A symbol outside the operator catalog.
        DivisionByZeroError: A divisor reduced to zero.
        NumericOverflowError: A value is not finite.
        ConfigurationError: Unknown engine name.
    """
    return get_engine(engine).compute(expression)
