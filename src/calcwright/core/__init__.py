"""Core calcwright functionality: IR, expression language, bindings, formatting, batch, settings."""

from . import ir
from .errors import (
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

__all__ = [
    "ir",
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
