"""
Tokenizer for the calcwright expression language.

Converts an expression string into a sequence of typed tokens, then inserts
the implicit multiplications a calculator user expects (``2x``, ``3(4)``,
``(a)(b)``, ``2pi``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from calcwright.core.errors import LexError, ParseError
from calcwright.core.expression_lang.builtins import CONSTANTS, FUNCTION_NAMES


class TokenKind(StrEnum):
    """Token types for the expression language."""

    NUMBER = "number"
    OPERATOR = "operator"
    FUNCTION = "function"
    CONSTANT = "constant"
    VARIABLE = "variable"
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"

    # End of input; appended by the parser, never returned by tokenize()
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer."""

    kind: TokenKind
    text: str
    position: int
    implicit: bool = False

    def __repr__(self) -> str:
        suffix = ", implicit" if self.implicit else ""
        return f"Token({self.kind}, {self.text!r}, pos={self.position}{suffix})"


OPERATORS = frozenset("+-*/%^")

# Mantissa with at most one decimal point, then an exponent only when digits follow
_NUMBER_RE = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

# (left, right) kinds that get a synthetic "*" between them.
# (number, number) is deliberately absent: "2 3" is a missing operator.
# (variable, lparen) is absent so that "f(x)" stays a call.
_IMPLICIT_MUL_PAIRS: frozenset[tuple[TokenKind, TokenKind]] = frozenset(
    {
        (TokenKind.NUMBER, TokenKind.VARIABLE),
        (TokenKind.NUMBER, TokenKind.LPAREN),
        (TokenKind.NUMBER, TokenKind.FUNCTION),
        (TokenKind.NUMBER, TokenKind.CONSTANT),
        (TokenKind.RPAREN, TokenKind.LPAREN),
        (TokenKind.RPAREN, TokenKind.FUNCTION),
        (TokenKind.RPAREN, TokenKind.VARIABLE),
        (TokenKind.RPAREN, TokenKind.CONSTANT),
    }
)


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Raises:
        LexError: On a character that starts no token.
        ParseError: On a malformed numeric literal such as ``1.2.3``.
    """
    return insert_implicit_multiplication(_scan(source))


def _scan(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        # Numbers
        if c.isdigit() or c == ".":
            m = _NUMBER_RE.match(source, i)
            if m is None:
                raise LexError(f"Unexpected character {c!r} at position {i}", i)
            end = m.end()
            if end < n and source[end] == ".":
                bad = source[i : end + 1]
                raise ParseError(f"Malformed number {bad!r} at position {i}", i)
            tokens.append(Token(TokenKind.NUMBER, m.group(0), i))
            i = end
            continue

        # Functions, constants, and variables
        m = _IDENT_RE.match(source, i)
        if m is not None:
            word = m.group(0)
            lowered = word.lower()
            if lowered in FUNCTION_NAMES:
                tokens.append(Token(TokenKind.FUNCTION, lowered, i))
            elif lowered in CONSTANTS:
                tokens.append(Token(TokenKind.CONSTANT, lowered, i))
            else:
                tokens.append(Token(TokenKind.VARIABLE, word, i))
            i = m.end()
            continue

        if c in OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, c, i))
            i += 1
            continue

        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], c, i))
            i += 1
            continue

        raise LexError(f"Unexpected character {c!r} at position {i}", i)

    return tokens


def insert_implicit_multiplication(tokens: list[Token]) -> list[Token]:
    """Return a copy of ``tokens`` with synthetic ``*`` between implied products."""
    if not tokens:
        return []

    result: list[Token] = [tokens[0]]
    for prev, tok in zip(tokens, tokens[1:], strict=False):
        if (prev.kind, tok.kind) in _IMPLICIT_MUL_PAIRS:
            result.append(Token(TokenKind.OPERATOR, "*", tok.position, implicit=True))
        result.append(tok)
    return result
