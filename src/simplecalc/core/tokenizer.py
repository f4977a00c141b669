"""
Tokenizer for simplecalc expressions.

Converts an expression string into a flat sequence of typed tokens. A ``-``
at the start of the expression or directly after ``(`` is a sign: it is
folded into the following number, or becomes a SIGN token in front of ``(``.
"""

from __future__ import annotations

from enum import StrEnum, auto

from simplecalc.core.errors import (
    ErrorContext,
    UnknownOperatorError,
    make_invalid_expression,
)
from simplecalc.core.operators import is_operator
from simplecalc.core.validator import DIGITS, NUMBER_RE


class TokenKind(StrEnum):
    """Token types for arithmetic expressions."""

    NUMBER = auto()
    OPERATOR = auto()
    SIGN = auto()
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF."""
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in " \t\n\r":
            i += 1
            continue

        if c in DIGITS or c == ".":
            i = _read_number(source, i, tokens)
            continue

        if c == "(":
            tokens.append(Token(TokenKind.LPAREN, c, i))
            i += 1
            continue

        if c == ")":
            tokens.append(Token(TokenKind.RPAREN, c, i))
            i += 1
            continue

        if c == "-" and _sign_position(tokens):
            j = _skip_whitespace(source, i + 1)
            if j < n and (source[j] in DIGITS or source[j] == "."):
                i = _read_number(source, j, tokens, sign_pos=i)
            else:
                tokens.append(Token(TokenKind.SIGN, c, i))
                i += 1
            continue

        if is_operator(c):
            tokens.append(Token(TokenKind.OPERATOR, c, i))
            i += 1
            continue

        if (c.isalnum() or c == "_") and not _operator_position(tokens):
            raise make_invalid_expression(f"Unexpected character: {c!r}", source, i)
        raise UnknownOperatorError(c, ErrorContext(source, i))

    tokens.append(Token(TokenKind.EOF, "", n))
    return tokens


def _operator_position(tokens: list[Token]) -> bool:
    return bool(tokens) and tokens[-1].kind in (TokenKind.NUMBER, TokenKind.RPAREN)


def _sign_position(tokens: list[Token]) -> bool:
    return not tokens or tokens[-1].kind == TokenKind.LPAREN


def _skip_whitespace(source: str, i: int) -> int:
    while i < len(source) and source[i] in " \t\n\r":
        i += 1
    return i


def _read_number(
    source: str,
    start: int,
    tokens: list[Token],
    sign_pos: int | None = None,
) -> int:
    """Read a numeric literal at ``start`` and return the index after it.

    When ``sign_pos`` is given, the ``-`` at that offset is folded into the
    literal and the token starts there.
    """
    m = NUMBER_RE.match(source, start)
    if m is None or (m.end() < len(source) and source[m.end()] == "."):
        raise make_invalid_expression("Malformed number", source, start)
    text = m.group(0)
    if sign_pos is None:
        tokens.append(Token(TokenKind.NUMBER, text, start))
    else:
        tokens.append(Token(TokenKind.NUMBER, "-" + text, sign_pos))
    return m.end()
