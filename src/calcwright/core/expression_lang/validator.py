"""
Non-throwing pre-flight validation for expression text.

Live input feedback calls ``validate`` on every keystroke, so it must never
raise: lexer and parser failures come back as structured issues instead.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from calcwright.core.errors import ErrorKind, LexError, ParseError
from calcwright.core.expression_lang.parser import parse_expr


class ValidationIssue(BaseModel):
    """One problem found in an expression."""

    message: str
    position: int | None = None
    kind: ErrorKind = ErrorKind.PARSE

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Outcome of validating an expression."""

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def validate(source: str) -> ValidationResult:
    """Check that ``source`` tokenizes and parses, without evaluating it."""
    try:
        parse_expr(source)
    except (LexError, ParseError) as e:
        issue = ValidationIssue(message=e.message, position=e.position, kind=e.kind)
        return ValidationResult(valid=False, errors=[issue])
    return ValidationResult(valid=True)
