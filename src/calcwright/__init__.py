"""
calcwright - a calculator expression engine.

Tokenizer, parser, validator, pretty-printer, and evaluator for calculator
expressions, plus caller-owned variable/function stores, result formatting,
and batch evaluation.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.batch import (
    BatchReport,
    BatchRow,
    evaluate_batch,
    export_results_csv,
    read_expressions_csv,
)
from .core.bindings import FunctionStore, VariableStore, build_context, parse_definition
from .core.errors import (
    ArityError,
    BindingError,
    CalculatorError,
    CallDepthError,
    DomainError,
    ErrorKind,
    EvalError,
    LexError,
    ParseError,
    SettingsError,
    UnresolvedReferenceError,
)
from .core.expression_lang import (
    AngleMode,
    EvaluationContext,
    Token,
    TokenKind,
    ValidationIssue,
    ValidationResult,
    create_default_context,
    evaluate,
    parse_expr,
    pretty_print,
    tokenize,
    validate,
)
from .core.formatting import CalculationResult, build_result, evaluate_expression, format_number
from .core.settings import CalculatorSettings, load_settings

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    # Expression language
    "AngleMode",
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
    # Bindings
    "FunctionStore",
    "VariableStore",
    "build_context",
    "parse_definition",
    # Results and batch
    "BatchReport",
    "BatchRow",
    "CalculationResult",
    "build_result",
    "evaluate_batch",
    "evaluate_expression",
    "export_results_csv",
    "format_number",
    "read_expressions_csv",
    # Settings
    "CalculatorSettings",
    "load_settings",
    # Errors
    "ArityError",
    "BindingError",
    "CalculatorError",
    "CallDepthError",
    "DomainError",
    "ErrorKind",
    "EvalError",
    "LexError",
    "ParseError",
    "SettingsError",
    "UnresolvedReferenceError",
]
