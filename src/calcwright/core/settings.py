"""
Calculator settings and the ``calcwright.toml`` loader.

Example file:

    [calculator]
    precision = 12
    angle_mode = "degrees"
    decimal_separator = "."
    thousands_separator = ","
    max_call_depth = 64
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from calcwright.core.errors import SettingsError
from calcwright.core.expression_lang.builtins import AngleMode
from calcwright.core.expression_lang.context import (
    DEFAULT_MAX_CALL_DEPTH,
    DEFAULT_PRECISION,
    MAX_CALL_DEPTH_LIMIT,
    EvaluationContext,
)
from calcwright.core.ir.expressions import UserFunction

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "calcwright.toml"


class CalculatorSettings(BaseModel):
    """User-facing calculator preferences."""

    precision: int = Field(default=DEFAULT_PRECISION, ge=1, le=100)
    angle_mode: AngleMode = AngleMode.RADIANS
    decimal_separator: Literal[".", ","] = "."
    thousands_separator: Literal[",", ".", " ", ""] = ""
    max_call_depth: int = Field(default=DEFAULT_MAX_CALL_DEPTH, ge=1, le=MAX_CALL_DEPTH_LIMIT)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _separators_differ(self) -> CalculatorSettings:
        if self.thousands_separator == self.decimal_separator:
            raise ValueError(
                f"thousands_separator and decimal_separator are both {self.decimal_separator!r}"
            )
        return self

    def to_context(
        self,
        variables: Mapping[str, float] | None = None,
        functions: Mapping[str, UserFunction] | None = None,
    ) -> EvaluationContext:
        """An evaluation context carrying these settings and the given bindings."""
        return EvaluationContext(
            angle_mode=self.angle_mode,
            precision=self.precision,
            max_call_depth=self.max_call_depth,
            variables=dict(variables or {}),
            functions=dict(functions or {}),
        )


def load_settings(path: Path) -> CalculatorSettings:
    """Load settings from the ``[calculator]`` table of a TOML file.

    A missing file yields the defaults.

    Raises:
        SettingsError: If the file is not valid TOML or a value is invalid.
    """
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return CalculatorSettings()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML in {path}: {e}") from e

    section = data.get("calculator", {})
    if not isinstance(section, dict):
        raise SettingsError(f"[calculator] in {path} must be a table")

    try:
        settings = CalculatorSettings(**section)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'calculator'}: {err['msg']}"
            for err in e.errors()
        )
        raise SettingsError(f"Invalid settings in {path}: {problems}") from e

    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
