"""
Error types for calcwright tokenizing, parsing, and evaluation.

Every error carries a closed ``ErrorKind`` tag so callers (batch rows,
validation feedback, the CLI) can branch on the kind instead of comparing
message strings.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Closed set of error kinds raised by calcwright."""

    LEX = "lex"
    PARSE = "parse"
    REFERENCE = "reference"
    ARITY = "arity"
    DOMAIN = "domain"
    CALL_DEPTH = "call_depth"
    BINDING = "binding"
    SETTINGS = "settings"


class CalculatorError(Exception):
    """Base exception for all calcwright errors."""

    kind: ErrorKind

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, position={self.position})"


class LexError(CalculatorError):
    """
    Raised when the scanner meets a character it cannot classify.

    Examples:
    - ``2 # 3``
    - a lone ``.``
    """

    kind = ErrorKind.LEX


class ParseError(CalculatorError):
    """
    Raised when a token sequence is not a well-formed expression.

    Examples:
    - Empty input
    - Unmatched parentheses
    - Two operands with no operator between them
    - Malformed numeric literals
    """

    kind = ErrorKind.PARSE


class EvalError(CalculatorError):
    """Base class for failures while walking an AST."""


class UnresolvedReferenceError(EvalError):
    """Raised for an undefined variable or an unknown function name."""

    kind = ErrorKind.REFERENCE


class ArityError(EvalError):
    """Raised when a function is called with the wrong number of arguments."""

    kind = ErrorKind.ARITY


class DomainError(EvalError):
    """Raised when an argument lies outside a function's domain."""

    kind = ErrorKind.DOMAIN


class CallDepthError(EvalError):
    """Raised when user-defined functions recurse past the call depth limit."""

    kind = ErrorKind.CALL_DEPTH


class BindingError(CalculatorError):
    """
    Raised when a variable or function definition is rejected.

    Examples:
    - Invalid identifier
    - Shadowing a constant or built-in function
    - Duplicate parameter names
    """

    kind = ErrorKind.BINDING


class SettingsError(CalculatorError):
    """Raised when a settings file cannot be read or fails validation."""

    kind = ErrorKind.SETTINGS
