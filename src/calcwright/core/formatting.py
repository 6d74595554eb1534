"""
Calculation results and display formatting.

``evaluate`` returns a bare float; this module wraps it into an immutable
``CalculationResult`` with a display string for history, UI, and batch export.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from calcwright.core.expression_lang.context import (
    DEFAULT_PRECISION,
    EvaluationContext,
    create_default_context,
)
from calcwright.core.expression_lang.evaluator import evaluate
from calcwright.core.expression_lang.parser import parse_expr

# Decimal exponents outside [-7, precision) switch to exponential notation
_MIN_FIXED_EXPONENT = -6


class CalculationResult(BaseModel):
    """A formatted evaluation result."""

    value: float
    type: Literal["number"] = "number"
    formatted: str
    precision: int = Field(ge=1)

    model_config = ConfigDict(frozen=True)


def format_number(
    value: float,
    precision: int = DEFAULT_PRECISION,
    decimal_separator: str = ".",
    thousands_separator: str = "",
) -> str:
    """Format ``value`` to ``precision`` significant digits.

    Trailing zeros are dropped. Very large or very small magnitudes use
    exponential notation (``1.5e+21``, ``1e-7``); separators apply only to
    fixed notation.
    """
    if precision < 1:
        raise ValueError(f"precision must be a positive integer, got {precision}")
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    if value == 0:
        return "0"

    # Round first so the exponent reflects carries like 9.99 -> 10.0
    mantissa, _, exp_text = f"{value:.{precision - 1}e}".partition("e")
    exponent = int(exp_text)

    if exponent < _MIN_FIXED_EXPONENT or exponent >= precision:
        mantissa = _strip_zeros(mantissa)
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa.replace('.', decimal_separator)}e{sign}{abs(exponent)}"

    fixed = _strip_zeros(f"{value:.{max(precision - 1 - exponent, 0)}f}")
    return _apply_separators(fixed, decimal_separator, thousands_separator)


def _strip_zeros(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _apply_separators(text: str, decimal_separator: str, thousands_separator: str) -> str:
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    integer, dot, fraction = text.partition(".")
    if thousands_separator:
        groups = []
        while len(integer) > 3:
            groups.insert(0, integer[-3:])
            integer = integer[:-3]
        groups.insert(0, integer)
        integer = thousands_separator.join(groups)
    if dot:
        return f"{sign}{integer}{decimal_separator}{fraction}"
    return f"{sign}{integer}"


def build_result(
    value: float,
    precision: int = DEFAULT_PRECISION,
    decimal_separator: str = ".",
    thousands_separator: str = "",
) -> CalculationResult:
    """Wrap a numeric value with its display string."""
    formatted = format_number(value, precision, decimal_separator, thousands_separator)
    return CalculationResult(value=value, formatted=formatted, precision=precision)


def evaluate_expression(
    source: str,
    context: EvaluationContext | None = None,
    decimal_separator: str = ".",
    thousands_separator: str = "",
) -> CalculationResult:
    """Parse, evaluate, and format ``source`` in one step.

    Raises whatever ``parse_expr`` or ``evaluate`` raise.
    """
    ctx = context if context is not None else create_default_context()
    value = evaluate(parse_expr(source), ctx)
    return build_result(value, ctx.precision, decimal_separator, thousands_separator)
