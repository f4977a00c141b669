"""
Operator-precedence evaluator over simplecalc tokens.

Grammar (catalog rank 4 binds loosest, rank 0 tightest):
    expr_4   → expr_3 ("+" expr_3)*
    expr_3   → expr_2 ("-" expr_2)*
    expr_2   → expr_1 ("*" expr_1)*
    expr_1   → expr_0 ("/" expr_0)*
    expr_0   → primary ("^" primary)*
    primary  → NUMBER | "(" expr_4 ")" | SIGN primary

Every level is left-associative, which matches the reducer applying the
leftmost occurrence of an operator first. No tree is built and nothing
recurses: operands and pending operators live on two explicit stacks, and an
operator is applied as soon as one of equal or looser rank follows it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from simplecalc.core.errors import NumericOverflowError, make_invalid_expression
from simplecalc.core.operators import OPERATORS, Operator, get_operator, normalize_zero
from simplecalc.core.tokenizer import Token, TokenKind, tokenize
from simplecalc.core.validator import validate_expression

logger = logging.getLogger(__name__)

_LOOSEST_RANK = max(op.rank for op in OPERATORS)


@dataclass(slots=True)
class _Group:
    """An open parenthesis waiting for its ``)``."""

    token: Token
    negate: bool


class _Evaluator:
    """Stack-based precedence evaluator."""

    def __init__(self, tokens: list[Token], source: str) -> None:
        self.tokens = tokens
        self.source = source
        self.values: list[float] = []
        self.pending: list[Operator | _Group] = []

    def run(self) -> float:
        expect_operand = True
        negate = False

        for i, tok in enumerate(self.tokens):
            if expect_operand:
                if tok.kind == TokenKind.SIGN:
                    negate = not negate
                elif tok.kind == TokenKind.NUMBER:
                    value = _to_float(tok)
                    self.values.append(-value if negate else value)
                    negate = False
                    expect_operand = False
                elif tok.kind == TokenKind.LPAREN:
                    following = self.tokens[i + 1] if i + 1 < len(self.tokens) else None
                    if following is not None and following.kind == TokenKind.RPAREN:
                        raise make_invalid_expression("Empty parentheses", self.source, tok.pos)
                    self.pending.append(_Group(tok, negate))
                    negate = False
                elif tok.kind == TokenKind.EOF:
                    raise make_invalid_expression(
                        "Unexpected end of expression", self.source, tok.pos
                    )
                else:
                    raise make_invalid_expression(
                        f"Unexpected token: {tok.kind} ({tok.value!r})", self.source, tok.pos
                    )
                continue

            if tok.kind == TokenKind.OPERATOR:
                op = get_operator(tok.value)
                self.reduce(op.rank)
                self.pending.append(op)
                expect_operand = True
            elif tok.kind == TokenKind.RPAREN:
                self.close_group(tok)
            elif tok.kind == TokenKind.EOF:
                return self.finish(tok)
            else:
                raise make_invalid_expression(
                    f"Unexpected token after expression: {tok.value!r}", self.source, tok.pos
                )

        raise make_invalid_expression("Unexpected end of expression", self.source, len(self.source))

    def reduce(self, rank: int) -> None:
        """Apply pending operators of ``rank`` and tighter."""
        while self.pending:
            op = self.pending[-1]
            if isinstance(op, _Group) or op.rank > rank:
                return
            self.pending.pop()
            right = self.values.pop()
            left = self.values.pop()
            result = op.calculate(left, right)
            logger.debug("Evaluated %r %s %r -> %r", left, op.symbol, right, result)
            self.values.append(result)

    def close_group(self, tok: Token) -> None:
        self.reduce(_LOOSEST_RANK)
        group = self.pending.pop() if self.pending else None
        if not isinstance(group, _Group):
            raise make_invalid_expression("Unmatched ')'", self.source, tok.pos)
        if group.negate:
            self.values[-1] = -self.values[-1]

    def finish(self, tok: Token) -> float:
        self.reduce(_LOOSEST_RANK)
        if self.pending:
            raise make_invalid_expression(
                f"Expected {TokenKind.RPAREN}, got {tok.kind} ({tok.value!r})",
                self.source,
                tok.pos,
            )
        return self.values.pop()


def _to_float(tok: Token) -> float:
    value = float(tok.value)
    if not math.isfinite(value):
        raise NumericOverflowError(f"Number is too large: {tok.value}")
    return value


def evaluate_tokens(tokens: list[Token], source: str = "") -> float:
    """Evaluate a token list produced by :func:`tokenize`.

    Raises:
        InvalidExpressionError: If the tokens do not form an expression.
    """
    return normalize_zero(_Evaluator(tokens, source).run())


def climb_expression(expression: str) -> float:
    """Validate, tokenize and evaluate an expression by operator precedence."""
    compact = validate_expression(expression)
    return evaluate_tokens(tokenize(compact), compact)
