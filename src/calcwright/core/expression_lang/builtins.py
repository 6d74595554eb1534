"""
Built-in constant and function tables for the expression language.

Both tables are read-only module data. The tokenizer uses their names to
classify identifiers; the evaluator dispatches calls through ``BUILTINS``.

Numeric policy: results follow IEEE double semantics wherever the C math
library would signal instead (``ln(0)`` is ``-inf``, ``sqrt(-1)`` is ``nan``),
so that batch evaluation is never aborted by a pathological row. Only
``factorial`` and ``gamma`` raise ``DomainError``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from calcwright.core.errors import DomainError


class AngleMode(StrEnum):
    """How trigonometric functions interpret angles."""

    RADIANS = "radians"
    DEGREES = "degrees"


CONSTANTS: MappingProxyType[str, float] = MappingProxyType(
    {
        "pi": math.pi,
        "e": math.e,
        "phi": (1 + math.sqrt(5)) / 2,
        "tau": math.tau,
    }
)


@dataclass(frozen=True)
class Builtin:
    """A built-in numeric function.

    ``arity`` is the exact argument count, or None for variadic functions
    (which still need at least ``min_args``).
    """

    name: str
    impl: Callable[[Sequence[float], AngleMode], float]
    arity: int | None = 1
    min_args: int = 1

    def accepts(self, count: int) -> bool:
        if self.arity is None:
            return count >= self.min_args
        return count == self.arity

    def describe_arity(self) -> str:
        if self.arity is None:
            return f"at least {self.min_args} argument{'s' if self.min_args != 1 else ''}"
        return f"{self.arity} argument{'s' if self.arity != 1 else ''}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_radians(x: float, mode: AngleMode) -> float:
    return math.radians(x) if mode == AngleMode.DEGREES else x


def _from_radians(x: float, mode: AngleMode) -> float:
    return math.degrees(x) if mode == AngleMode.DEGREES else x


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y.is_integer() and int(y) % 2 == 1


def ieee_pow(x: float, y: float) -> float:
    """``x ** y`` with IEEE results instead of ValueError/OverflowError."""
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0 and _is_odd_integer(y):
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow raises for 0 ** negative and negative ** fractional
        if x == 0:
            if math.copysign(1.0, x) < 0 and _is_odd_integer(y):
                return -math.inf
            return math.inf
        return math.nan


def ieee_divide(x: float, y: float) -> float:
    """``x / y`` where a zero divisor yields ``±inf`` or ``nan``."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def ieee_remainder(x: float, y: float) -> float:
    """C ``fmod``: result takes the sign of the dividend; ``x % 0`` is nan."""
    if y == 0 or math.isinf(x) or math.isnan(x) or math.isnan(y):
        return math.nan
    return math.fmod(x, y)


def _guarded(
    fn: Callable[[float], float], overflow: Callable[[float], float]
) -> Callable[[float], float]:
    """Wrap a one-argument math function so domain errors yield nan."""

    def wrapper(x: float) -> float:
        try:
            return fn(x)
        except OverflowError:
            return overflow(x)
        except ValueError:
            return math.nan

    return wrapper


_sin = _guarded(math.sin, lambda x: math.nan)
_cos = _guarded(math.cos, lambda x: math.nan)
_tan = _guarded(math.tan, lambda x: math.nan)
_asin = _guarded(math.asin, lambda x: math.nan)
_acos = _guarded(math.acos, lambda x: math.nan)
_sinh = _guarded(math.sinh, lambda x: math.copysign(math.inf, x))
_cosh = _guarded(math.cosh, lambda x: math.inf)
_acosh = _guarded(math.acosh, lambda x: math.inf)
_exp = _guarded(math.exp, lambda x: math.inf)


def _log(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapper(x: float) -> float:
        if math.isnan(x) or x < 0:
            return math.nan
        if x == 0:
            return -math.inf
        return fn(x)

    return wrapper


_ln = _log(math.log)
_log10 = _log(math.log10)
_log2 = _log(math.log2)


def _sqrt(x: float) -> float:
    if x < 0:
        return math.nan
    return math.sqrt(x)


def _atanh(x: float) -> float:
    if abs(x) == 1:
        return math.copysign(math.inf, x)
    if abs(x) > 1:
        return math.nan
    return math.atanh(x)


def _root(x: float, n: float) -> float:
    if n == 0 or math.isnan(n):
        return math.nan
    if x < 0:
        if _is_odd_integer(n):
            return -ieee_pow(-x, 1 / n)
        return math.nan
    return ieee_pow(x, 1 / n)


def _round_half_up(x: float) -> float:
    if not math.isfinite(x):
        return x
    # x - floor(x) is exact; x + 0.5 can round up just below one half
    f = float(math.floor(x))
    return f + 1.0 if x - f >= 0.5 else f


def _floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x


def _ceil(x: float) -> float:
    return float(math.ceil(x)) if math.isfinite(x) else x


def factorial(n: float) -> float:
    """n! for non-negative integers; overflows to inf past 170!."""
    if math.isnan(n) or n < 0 or not float(n).is_integer():
        raise DomainError(f"factorial requires a non-negative integer, got {n!r}")
    if n > 170:
        return math.inf
    return float(math.factorial(int(n)))


def gamma(x: float) -> float:
    """Gamma function; undefined at zero and the negative integers."""
    if x <= 0 and float(x).is_integer():
        raise DomainError(f"gamma is undefined at non-positive integer {x!r}")
    try:
        return math.gamma(x)
    except OverflowError:
        return math.inf
    except ValueError as e:
        # -inf is the only remaining input math.gamma rejects
        raise DomainError(f"gamma is undefined at {x!r}") from e


def _extremum(
    pick: Callable[[Sequence[float]], float],
) -> Callable[[Sequence[float], AngleMode], float]:
    def impl(args: Sequence[float], mode: AngleMode) -> float:
        if any(math.isnan(a) for a in args):
            return math.nan
        return pick(args)

    return impl


def _unary(fn: Callable[[float], float]) -> Callable[[Sequence[float], AngleMode], float]:
    return lambda args, mode: fn(args[0])


# ---------------------------------------------------------------------------
# Function table
# ---------------------------------------------------------------------------

_TABLE: list[Builtin] = [
    # Trigonometric: argument in the current angle mode
    Builtin("sin", lambda a, m: _sin(_to_radians(a[0], m))),
    Builtin("cos", lambda a, m: _cos(_to_radians(a[0], m))),
    Builtin("tan", lambda a, m: _tan(_to_radians(a[0], m))),
    # Inverse trigonometric: result in the current angle mode
    Builtin("asin", lambda a, m: _from_radians(_asin(a[0]), m)),
    Builtin("acos", lambda a, m: _from_radians(_acos(a[0]), m)),
    Builtin("atan", lambda a, m: _from_radians(math.atan(a[0]), m)),
    # Hyperbolic: angle mode does not apply
    Builtin("sinh", _unary(_sinh)),
    Builtin("cosh", _unary(_cosh)),
    Builtin("tanh", _unary(math.tanh)),
    Builtin("asinh", _unary(math.asinh)),
    Builtin("acosh", _unary(_acosh)),
    Builtin("atanh", _unary(_atanh)),
    # Exponential and logarithmic
    Builtin("exp", _unary(_exp)),
    Builtin("ln", _unary(_ln)),
    Builtin("log", _unary(_log10)),
    Builtin("log10", _unary(_log10)),
    Builtin("log2", _unary(_log2)),
    # Powers and roots
    Builtin("sqrt", _unary(_sqrt)),
    Builtin("cbrt", _unary(math.cbrt)),
    Builtin("pow", lambda a, m: ieee_pow(a[0], a[1]), arity=2),
    Builtin("root", lambda a, m: _root(a[0], a[1]), arity=2),
    # Rounding and magnitude
    Builtin("abs", _unary(abs)),
    Builtin("floor", _unary(_floor)),
    Builtin("ceil", _unary(_ceil)),
    Builtin("round", _unary(_round_half_up)),
    # Special functions
    Builtin("factorial", _unary(factorial)),
    Builtin("gamma", _unary(gamma)),
    # Variadic
    Builtin("min", _extremum(min), arity=None),
    Builtin("max", _extremum(max), arity=None),
]

BUILTINS: MappingProxyType[str, Builtin] = MappingProxyType({b.name: b for b in _TABLE})

FUNCTION_NAMES: frozenset[str] = frozenset(BUILTINS)

RESERVED_NAMES: frozenset[str] = FUNCTION_NAMES | frozenset(CONSTANTS)
