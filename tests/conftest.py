"""Shared pytest fixtures for calcwright tests."""

from pathlib import Path

import pytest

from calcwright.core.bindings import FunctionStore, VariableStore
from calcwright.core.expression_lang import AngleMode, EvaluationContext


@pytest.fixture
def degrees_context() -> EvaluationContext:
    """Return a context with trigonometry in degrees."""
    return EvaluationContext(angle_mode=AngleMode.DEGREES)


@pytest.fixture
def variables() -> VariableStore:
    """Return a variable store with a couple of bindings."""
    return VariableStore({"x": 3, "rate": 0.5})


@pytest.fixture
def functions() -> FunctionStore:
    """Return a function store with a few common definitions."""
    store = FunctionStore()
    store.define("square", ["x"], "x^2")
    store.define("hyp", ["a", "b"], "sqrt(a^2 + b^2)")
    store.define("fact", ["n"], "factorial(n)")
    return store


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Write a calcwright.toml with non-default settings."""
    path = tmp_path / "calcwright.toml"
    path.write_text(
        """
[calculator]
precision = 6
angle_mode = "degrees"
thousands_separator = ","
max_call_depth = 32
"""
    )
    return path
