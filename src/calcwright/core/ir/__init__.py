"""
calcwright intermediate representation (IR) types.

The expression AST lives in ``expressions``; everything is re-exported here.
"""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    Constant,
    Expr,
    FuncCall,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    UserFunction,
    Variable,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Constant",
    "Expr",
    "FuncCall",
    "NumberLiteral",
    "UnaryExpr",
    "UnaryOp",
    "UserFunction",
    "Variable",
]
