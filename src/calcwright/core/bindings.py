"""
Caller-owned variable and function stores.

Each session or request creates its own stores and hands them to
``build_context``; nothing here is module-level state, so two evaluations
never observe each other's bindings.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from calcwright.core.errors import BindingError
from calcwright.core.expression_lang.builtins import CONSTANTS, FUNCTION_NAMES
from calcwright.core.expression_lang.context import EvaluationContext
from calcwright.core.expression_lang.parser import parse_expr
from calcwright.core.ir.expressions import UserFunction
from calcwright.core.settings import CalculatorSettings

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _check_name(name: str, what: str) -> None:
    if not _NAME_RE.fullmatch(name):
        raise BindingError(f"Invalid {what} name: {name!r}")
    lowered = name.lower()
    if lowered in CONSTANTS:
        raise BindingError(f"Cannot overwrite built-in constant: {name}")
    if lowered in FUNCTION_NAMES:
        raise BindingError(f"Cannot overwrite built-in function: {name}")


class VariableStore:
    """Named numeric variables for one session."""

    def __init__(self, initial: Mapping[str, float] | None = None) -> None:
        self._variables: dict[str, float] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def set(self, name: str, value: float) -> None:
        """Bind ``name`` to ``value``, replacing any previous binding."""
        _check_name(name, "variable")
        self._variables[name] = float(value)

    def get(self, name: str) -> float | None:
        return self._variables.get(name)

    def delete(self, name: str) -> bool:
        """Remove a binding; returns False if it did not exist."""
        return self._variables.pop(name, None) is not None

    def clear(self) -> None:
        self._variables.clear()

    def snapshot(self) -> dict[str, float]:
        """A detached copy of the current bindings."""
        return dict(self._variables)

    @property
    def variables(self) -> Mapping[str, float]:
        """Read-only live view of the bindings."""
        return MappingProxyType(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)


class FunctionStore:
    """User-defined functions for one session.

    Bodies are parsed once in ``define`` and the AST is cached on the
    resulting ``UserFunction``. Bodies may reference functions that are
    defined later; names are resolved when a call is evaluated.
    """

    def __init__(self) -> None:
        self._functions: dict[str, UserFunction] = {}

    def define(self, name: str, params: Iterable[str], body_text: str) -> UserFunction:
        """Define or replace a function.

        Raises:
            BindingError: Invalid or reserved names, duplicate parameters.
            ParseError: If the body does not parse.
            LexError: If the body does not tokenize.
        """
        _check_name(name, "function")
        param_names = tuple(params)
        for param in param_names:
            if not _NAME_RE.fullmatch(param):
                raise BindingError(f"Invalid parameter name: {param!r}")
            if param.lower() in CONSTANTS or param.lower() in FUNCTION_NAMES:
                raise BindingError(f"Parameter name shadows a built-in: {param}")
        if len(set(param_names)) != len(param_names):
            raise BindingError(f"Duplicate parameter names in {name}({', '.join(param_names)})")

        body = parse_expr(body_text)
        fn = UserFunction(name=name, params=param_names, body_text=body_text, body=body)
        self._functions[name] = fn
        logger.debug("Defined %s", fn)
        return fn

    def get(self, name: str) -> UserFunction | None:
        return self._functions.get(name)

    def delete(self, name: str) -> bool:
        """Remove a function; returns False if it did not exist."""
        return self._functions.pop(name, None) is not None

    def clear(self) -> None:
        self._functions.clear()

    def snapshot(self) -> dict[str, UserFunction]:
        return dict(self._functions)

    @property
    def functions(self) -> Mapping[str, UserFunction]:
        """Read-only live view of the definitions."""
        return MappingProxyType(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)


_DEFINITION_RE = re.compile(r"\s*([A-Za-z_]\w*)\s*\(([^)]*)\)\s*=(.*)", re.DOTALL)


def parse_definition(text: str) -> tuple[str, tuple[str, ...], str]:
    """Split ``"f(x, y) = x^2 + y"`` into name, parameters, and body text."""
    m = _DEFINITION_RE.fullmatch(text)
    if m is None:
        raise BindingError(f"Invalid function definition: {text!r}; expected 'name(params) = body'")
    name, raw_params, body = m.groups()
    params = tuple(p.strip() for p in raw_params.split(",") if p.strip())
    return name, params, body.strip()


def build_context(
    settings: CalculatorSettings | None = None,
    variables: VariableStore | Mapping[str, float] | None = None,
    functions: FunctionStore | Mapping[str, UserFunction] | None = None,
) -> EvaluationContext:
    """Build an evaluation context from settings and binding stores.

    The context snapshots the stores, so later store edits do not leak into
    a context that is already in use.
    """
    if isinstance(variables, VariableStore):
        var_map: Mapping[str, float] = variables.snapshot()
    else:
        var_map = dict(variables or {})

    if isinstance(functions, FunctionStore):
        fn_map: Mapping[str, UserFunction] = functions.snapshot()
    else:
        fn_map = dict(functions or {})

    if settings is None:
        return EvaluationContext(variables=var_map, functions=fn_map)
    return settings.to_context(var_map, fn_map)
