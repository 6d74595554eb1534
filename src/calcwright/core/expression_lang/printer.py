"""
Pretty-printer: renders an expression AST back to canonical source text.

Parentheses are emitted only where dropping them would change the parse, so
``parse_expr(pretty_print(ast)) == ast`` for every tree the parser produces.
"""

from __future__ import annotations

from calcwright.core.expression_lang.parser import (
    ATOM_PRECEDENCE,
    PRECEDENCE,
    RIGHT_ASSOCIATIVE,
    UNARY_PRECEDENCE,
)
from calcwright.core.ir.expressions import (
    BinaryExpr,
    Constant,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    Variable,
)


def pretty_print(expr: Expr) -> str:
    """Render ``expr`` with single spaces around binary operators."""
    if isinstance(expr, NumberLiteral):
        return _number_text(expr)

    if isinstance(expr, (Constant, Variable)):
        return expr.name

    if isinstance(expr, UnaryExpr):
        operand = pretty_print(expr.operand)
        if _precedence(expr.operand) < UNARY_PRECEDENCE:
            operand = f"({operand})"
        return f"{expr.op.value}{operand}"

    if isinstance(expr, BinaryExpr):
        return _print_binary(expr)

    if isinstance(expr, FuncCall):
        args = ", ".join(pretty_print(a) for a in expr.args)
        return f"{expr.name}({args})"

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _print_binary(expr: BinaryExpr) -> str:
    # Long chains such as ``1 + 1 + ... + 1`` lean left; fold them bottom-up
    spine: list[BinaryExpr] = []
    node: Expr = expr
    while isinstance(node, BinaryExpr):
        spine.append(node)
        node = node.left

    parts = [pretty_print(node)]
    left_prec = _precedence(node)
    for binary in reversed(spine):
        precedence = PRECEDENCE[binary.op]
        right_assoc = binary.op in RIGHT_ASSOCIATIVE
        if left_prec < precedence or (left_prec == precedence and right_assoc):
            parts = ["(", *parts, ")"]

        right = pretty_print(binary.right)
        right_prec = _precedence(binary.right)
        if right_prec < precedence or (right_prec == precedence and not right_assoc):
            right = f"({right})"

        parts.append(f" {binary.op.value} {right}")
        left_prec = precedence

    return "".join(parts)


def _precedence(expr: Expr) -> int:
    """Binding strength of the node's top-level operator."""
    if isinstance(expr, BinaryExpr):
        return PRECEDENCE[expr.op]
    if isinstance(expr, UnaryExpr):
        return UNARY_PRECEDENCE
    if isinstance(expr, NumberLiteral) and _number_text(expr).startswith("-"):
        # Hand-built negative literals print like a unary minus
        return UNARY_PRECEDENCE
    return ATOM_PRECEDENCE


def _number_text(expr: NumberLiteral) -> str:
    if expr.raw:
        return expr.raw
    return repr(expr.value)
