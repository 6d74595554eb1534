"""
Evaluation context for the expression language.

A context is built by the caller and passed into ``evaluate``. It is never
shared through module state, so concurrent callers each own their bindings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from calcwright.core.expression_lang.builtins import AngleMode
from calcwright.core.ir.expressions import UserFunction

DEFAULT_PRECISION = 10
DEFAULT_MAX_CALL_DEPTH = 64
# Several interpreter frames per user call must fit under sys.getrecursionlimit()
MAX_CALL_DEPTH_LIMIT = 100


@dataclass(frozen=True)
class EvaluationContext:
    """Angle mode, display precision, and name bindings for one evaluation."""

    angle_mode: AngleMode = AngleMode.RADIANS
    precision: int = DEFAULT_PRECISION
    variables: Mapping[str, float] = field(default_factory=dict)
    functions: Mapping[str, UserFunction] = field(default_factory=dict)
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH

    def __post_init__(self) -> None:
        if self.precision < 1:
            raise ValueError(f"precision must be a positive integer, got {self.precision}")
        if not 1 <= self.max_call_depth <= MAX_CALL_DEPTH_LIMIT:
            raise ValueError(
                f"max_call_depth must be between 1 and {MAX_CALL_DEPTH_LIMIT}, "
                f"got {self.max_call_depth}"
            )
        # Coerce plain strings ("degrees") to the enum
        object.__setattr__(self, "angle_mode", AngleMode(self.angle_mode))

    def child(self, bindings: Mapping[str, float]) -> EvaluationContext:
        """Return a new context with ``bindings`` layered over the variables."""
        merged = dict(self.variables)
        merged.update(bindings)
        return replace(self, variables=MappingProxyType(merged))


def create_default_context() -> EvaluationContext:
    """Radians, precision 10, no variables or functions."""
    return EvaluationContext()
