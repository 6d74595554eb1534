"""
Precedence-climbing parser for the calcwright expression language.

Grammar (precedence low to high):
    expr     → operand (binop operand)*        resolved by precedence climbing
    binop    → "+" | "-"                       level 1, left-assoc
             | "*" | "/" | "%"                 level 2, left-assoc
             | "^"                             level 4, right-assoc
    operand  → ("+" | "-") operand'            unary, level 3
             | primary
    primary  → NUMBER | CONSTANT | VARIABLE | call | "(" expr ")"
    call     → (FUNCTION | VARIABLE) "(" (expr ("," expr)*)? ")"

Unary sign sits between the multiplicative operators and "^", so ``-5^2``
parses as ``-(5^2)`` while ``2^-1`` is still accepted.
"""

from __future__ import annotations

from types import MappingProxyType

from calcwright.core.errors import ParseError
from calcwright.core.expression_lang.builtins import CONSTANTS
from calcwright.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from calcwright.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Constant,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    Variable,
)

# Binding strength of each binary operator; unary sign binds at UNARY_PRECEDENCE
PRECEDENCE: MappingProxyType[BinaryOp, int] = MappingProxyType(
    {
        BinaryOp.ADD: 1,
        BinaryOp.SUB: 1,
        BinaryOp.MUL: 2,
        BinaryOp.DIV: 2,
        BinaryOp.MOD: 2,
        BinaryOp.POW: 4,
    }
)
UNARY_PRECEDENCE = 3
ATOM_PRECEDENCE = 5
RIGHT_ASSOCIATIVE: frozenset[BinaryOp] = frozenset({BinaryOp.POW})

MAX_NESTING_DEPTH = 200


class _Parser:
    """Recursive descent parser with precedence climbing for binary operators."""

    def __init__(self, tokens: list[Token], source_length: int) -> None:
        self.tokens = [*tokens, Token(TokenKind.EOF, "", source_length)]
        self.pos = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]  # EOF

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def match(self, kind: TokenKind, text: str | None = None) -> Token | None:
        tok = self.current
        if tok.kind == kind and (text is None or tok.text == text):
            return self.advance()
        return None

    def _binary_op(self) -> BinaryOp | None:
        """The binary operator at the cursor, if any."""
        tok = self.current
        if tok.kind != TokenKind.OPERATOR:
            return None
        return BinaryOp(tok.text)

    def _enter(self, tok: Token) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise ParseError("Expression nested too deeply", tok.position)

    def _leave(self) -> None:
        self.depth -= 1

    # -- Grammar rules --

    def parse(self) -> Expr:
        """Parse a complete expression and require that every token is consumed."""
        expr = self.parse_expr()

        tok = self.current
        if tok.kind == TokenKind.RPAREN:
            raise ParseError(
                f"Unmatched closing parenthesis at position {tok.position}",
                tok.position,
            )
        if tok.kind != TokenKind.EOF:
            raise ParseError(
                f"Unexpected token {tok.text!r} at position {tok.position}: missing operator",
                tok.position,
            )
        return expr

    def parse_expr(self, min_precedence: int = 1) -> Expr:
        """operand (binop operand)* with every binop at least ``min_precedence``."""
        left = self.parse_operand()

        while (op := self._binary_op()) is not None:
            precedence = PRECEDENCE[op]
            if precedence < min_precedence:
                break
            op_tok = self.advance()
            next_min = precedence if op in RIGHT_ASSOCIATIVE else precedence + 1
            self._enter(op_tok)
            right = self.parse_expr(next_min)
            self._leave()
            left = BinaryExpr(op=op, left=left, right=right)

        return left

    def parse_operand(self) -> Expr:
        """('+' | '-') operand | primary, where the operand may still take '^'."""
        tok = self.current
        if tok.kind == TokenKind.OPERATOR and tok.text in ("+", "-"):
            self.advance()
            self._enter(tok)
            operand = self.parse_expr(UNARY_PRECEDENCE + 1)
            self._leave()
            return UnaryExpr(op=UnaryOp(tok.text), operand=operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """number | constant | variable | call | '(' expr ')'"""
        tok = self.current

        # Parenthesized expression
        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self._enter(tok)
            expr = self.parse_expr()
            self._leave()
            self._expect_close(tok)
            return expr

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return NumberLiteral(value=float(tok.text), raw=tok.text)

        if tok.kind == TokenKind.CONSTANT:
            self.advance()
            return Constant(name=tok.text, value=CONSTANTS[tok.text])

        if tok.kind == TokenKind.FUNCTION:
            if self.peek(1).kind != TokenKind.LPAREN:
                raise ParseError(
                    f"Function {tok.text!r} requires parentheses at position {tok.position}",
                    tok.position,
                )
            return self._parse_func_call()

        if tok.kind == TokenKind.VARIABLE:
            # A name directly followed by "(" calls a user-defined function
            if self.peek(1).kind == TokenKind.LPAREN:
                return self._parse_func_call()
            self.advance()
            return Variable(name=tok.text)

        if tok.kind == TokenKind.EOF:
            raise ParseError("Unexpected end of expression", tok.position)

        raise ParseError(
            f"Unexpected token {tok.text!r} at position {tok.position}",
            tok.position,
        )

    def _parse_func_call(self) -> FuncCall:
        """NAME '(' (expr (',' expr)*)? ')'"""
        name_tok = self.advance()
        open_tok = self.advance()
        self._enter(open_tok)

        args: list[Expr] = []
        if self.current.kind != TokenKind.RPAREN:
            args.append(self.parse_expr())
            while self.match(TokenKind.COMMA):
                args.append(self.parse_expr())

        self._leave()
        self._expect_close(open_tok)
        return FuncCall(name=name_tok.text, args=tuple(args))

    def _expect_close(self, open_tok: Token) -> None:
        tok = self.current
        if tok.kind == TokenKind.RPAREN:
            self.advance()
            return
        if tok.kind == TokenKind.EOF:
            raise ParseError(
                f"Unmatched opening parenthesis at position {open_tok.position}",
                open_tok.position,
            )
        raise ParseError(
            f"Expected ')' to close parenthesis at position {open_tok.position}, "
            f"got {tok.text!r}",
            tok.position,
        )


def parse_expr(source: str) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "2x + sin(pi/2)")

    Returns:
        Parsed expression AST.

    Raises:
        ParseError: If the expression is empty or malformed.
        LexError: If tokenization fails.
    """
    if not source.strip():
        raise ParseError("Empty expression", 0)

    parser = _Parser(tokenize(source), len(source))
    return parser.parse()
