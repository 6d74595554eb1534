"""
Expression evaluator for the calcwright expression language.

Evaluates expression AST nodes against an ``EvaluationContext``.
Pure evaluation with no I/O or side effects. Does NOT use Python's eval().
This is a tree-walking interpreter over a closed set of AST node types.
"""

from __future__ import annotations

import logging

from calcwright.core.errors import (
    ArityError,
    CallDepthError,
    UnresolvedReferenceError,
)
from calcwright.core.expression_lang.builtins import (
    BUILTINS,
    ieee_divide,
    ieee_pow,
    ieee_remainder,
)
from calcwright.core.expression_lang.context import EvaluationContext, create_default_context
from calcwright.core.ir.expressions import (
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

logger = logging.getLogger(__name__)


def evaluate(expr: Expr, context: EvaluationContext | None = None) -> float:
    """Evaluate an expression against a context.

    Args:
        expr: Parsed expression AST.
        context: Angle mode and bindings; defaults to ``create_default_context()``.

    Returns:
        The computed value as a float. Division by zero and out-of-domain
        logarithms produce ``inf``/``nan`` rather than raising.

    Raises:
        UnresolvedReferenceError: Undefined variable or unknown function.
        ArityError: Function called with the wrong number of arguments.
        DomainError: ``factorial``/``gamma`` argument outside their domain.
        CallDepthError: User-defined functions recursing too deeply.
    """
    ctx = context if context is not None else create_default_context()
    try:
        return _interpret(expr, ctx, 0)
    except RecursionError as e:
        raise CallDepthError("Expression too deeply nested to evaluate") from e


def _interpret(expr: Expr, ctx: EvaluationContext, depth: int) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, (NumberLiteral, Constant)):
        return expr.value

    if isinstance(expr, Variable):
        return _interpret_variable(expr, ctx)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, ctx, depth)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, ctx, depth)

    if isinstance(expr, FuncCall):
        return _interpret_func_call(expr, ctx, depth)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_variable(expr: Variable, ctx: EvaluationContext) -> float:
    try:
        return float(ctx.variables[expr.name])
    except KeyError:
        raise UnresolvedReferenceError(f"undefined variable: {expr.name}") from None


def _interpret_unary(expr: UnaryExpr, ctx: EvaluationContext, depth: int) -> float:
    """Evaluate a prefix sign."""
    val = _interpret(expr.operand, ctx, depth)
    if expr.op == UnaryOp.NEG:
        return -val
    return val


def _interpret_binary(expr: BinaryExpr, ctx: EvaluationContext, depth: int) -> float:
    """Evaluate a binary expression with IEEE double semantics.

    The left spine is walked with a loop: the parser builds ``a + b + c + ...``
    as a left-leaning tree whose depth grows with the number of terms.
    """
    spine: list[BinaryExpr] = []
    node: Expr = expr
    while isinstance(node, BinaryExpr):
        spine.append(node)
        node = node.left

    value = _interpret(node, ctx, depth)
    for binary in reversed(spine):
        value = _apply_binary(binary.op, value, _interpret(binary.right, ctx, depth))
    return value


def _apply_binary(op: BinaryOp, left: float, right: float) -> float:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return ieee_divide(left, right)
    if op == BinaryOp.MOD:
        return ieee_remainder(left, right)
    if op == BinaryOp.POW:
        return ieee_pow(left, right)

    raise ValueError(f"Unknown binary op: {op}")


def _interpret_func_call(expr: FuncCall, ctx: EvaluationContext, depth: int) -> float:
    """Resolve a call against user-defined functions first, then built-ins."""
    user_fn = ctx.functions.get(expr.name)
    if user_fn is not None:
        return _call_user_function(user_fn, expr, ctx, depth)

    builtin = BUILTINS.get(expr.name)
    if builtin is None:
        raise UnresolvedReferenceError(f"unknown function: {expr.name}")

    if not builtin.accepts(len(expr.args)):
        raise ArityError(
            f"{expr.name}() takes {builtin.describe_arity()}, got {len(expr.args)}"
        )
    args = [_interpret(a, ctx, depth) for a in expr.args]
    return builtin.impl(args, ctx.angle_mode)


def _call_user_function(
    fn: UserFunction, expr: FuncCall, ctx: EvaluationContext, depth: int
) -> float:
    if len(expr.args) != fn.arity:
        raise ArityError(
            f"{fn.name}() takes {fn.arity} argument{'s' if fn.arity != 1 else ''}, "
            f"got {len(expr.args)}"
        )
    if depth >= ctx.max_call_depth:
        raise CallDepthError(
            f"Maximum call depth of {ctx.max_call_depth} exceeded in {fn.name}()"
        )

    # Arguments are evaluated in the caller's context before entering the body
    args = [_interpret(a, ctx, depth) for a in expr.args]
    logger.debug("Calling %s with %s", fn.name, args)
    child = ctx.child(dict(zip(fn.params, args, strict=True)))
    return _interpret(fn.body, child, depth + 1)
