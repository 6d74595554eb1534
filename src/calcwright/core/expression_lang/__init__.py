"""
calcwright expression language.

Tokenizer, parser, validator, pretty-printer, and evaluator for calculator
expressions with constants, variables, and built-in and user-defined functions.

Usage:
    from calcwright.core.expression_lang import EvaluationContext, evaluate, parse_expr

    expr = parse_expr("2x + sin(90)")
    result = evaluate(expr, EvaluationContext(angle_mode="degrees", variables={"x": 3}))
    # result == 7.0
"""

from calcwright.core.expression_lang.builtins import BUILTINS, CONSTANTS, AngleMode
from calcwright.core.expression_lang.context import EvaluationContext, create_default_context
from calcwright.core.expression_lang.evaluator import evaluate
from calcwright.core.expression_lang.parser import parse_expr
from calcwright.core.expression_lang.printer import pretty_print
from calcwright.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from calcwright.core.expression_lang.validator import (
    ValidationIssue,
    ValidationResult,
    validate,
)

__all__ = [
    "AngleMode",
    "BUILTINS",
    "CONSTANTS",
    "EvaluationContext",
    "Token",
    "TokenKind",
    "ValidationIssue",
    "ValidationResult",
    "create_default_context",
    "evaluate",
    "parse_expr",
    "pretty_print",
    "tokenize",
    "validate",
]
