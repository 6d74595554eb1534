"""
Expression AST types for calcwright.

Node set:
- Numbers: 42, 3.14, 1e-3
- Named constants: pi, e, phi, tau (value fixed at parse time)
- Variables: x, rate (value resolved at evaluation time)
- Unary sign: -x, +x
- Binary arithmetic: +, -, *, /, %, ^
- Calls: sin(x), max(a, b, c), f(x, y)

All nodes are frozen pydantic models and hold their children in tuples, so a
parsed tree can be shared and cached without copying.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"


class UnaryOp(StrEnum):
    """Prefix sign operators."""

    POS = "+"
    NEG = "-"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeric literal, kept alongside the source text it was read from."""

    value: float = Field(description="Parsed double value")
    raw: str = Field(description="Literal as written in the source")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.raw


class Constant(BaseModel):
    """A named mathematical constant such as pi or e."""

    name: str = Field(description="Lower-case constant name")
    value: float = Field(description="Constant value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class Variable(BaseModel):
    """Reference to a variable bound in the evaluation context."""

    name: str = Field(description="Variable name (case-sensitive)")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class UnaryExpr(BaseModel):
    """Prefix sign: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class FuncCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    The name may refer to a built-in (sin, factorial, max, ...) or to a
    user-defined function. Arity is checked when the call is evaluated,
    not when it is parsed.
    """

    name: str = Field(description="Function name")
    args: tuple[Expr, ...] = Field(default=(), description="Arguments in call order")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


class UserFunction(BaseModel):
    """
    A user-defined function: name, parameters, and a pre-parsed body.

    ``body_text`` is what the user typed; ``body`` is its AST, parsed once at
    definition time so calls never re-parse.
    """

    name: str
    params: tuple[str, ...] = Field(default=())
    body_text: str
    body: Expr

    model_config = ConfigDict(frozen=True)

    @property
    def arity(self) -> int:
        return len(self.params)

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.params)}) = {self.body_text}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | Constant | Variable | UnaryExpr | BinaryExpr | FuncCall

# Rebuild models for recursive forward references
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
FuncCall.model_rebuild()
UserFunction.model_rebuild()
