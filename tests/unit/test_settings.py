"""Tests for calculator settings and calcwright.toml loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from calcwright.core.errors import CallDepthError, ErrorKind, SettingsError
from calcwright.core.expression_lang import AngleMode, evaluate, parse_expr
from calcwright.core.expression_lang.context import MAX_CALL_DEPTH_LIMIT
from calcwright.core.ir.expressions import UserFunction
from calcwright.core.settings import CalculatorSettings, load_settings


class TestCalculatorSettings:
    def test_defaults(self) -> None:
        settings = CalculatorSettings()
        assert settings.precision == 10
        assert settings.angle_mode == AngleMode.RADIANS
        assert settings.decimal_separator == "."
        assert settings.thousands_separator == ""
        assert settings.max_call_depth == 64

    @pytest.mark.parametrize("precision", [0, 101])
    def test_precision_bounds(self, precision: int) -> None:
        with pytest.raises(ValidationError):
            CalculatorSettings(precision=precision)

    @pytest.mark.parametrize("depth", [0, MAX_CALL_DEPTH_LIMIT + 1])
    def test_max_call_depth_bounds(self, depth: int) -> None:
        with pytest.raises(ValidationError):
            CalculatorSettings(max_call_depth=depth)

    def test_largest_call_depth_is_reachable(self) -> None:
        body = "n + f(n - 1)"
        recursive = UserFunction(name="f", params=("n",), body_text=body, body=parse_expr(body))
        ctx = CalculatorSettings(max_call_depth=MAX_CALL_DEPTH_LIMIT).to_context(
            functions={"f": recursive}
        )
        with pytest.raises(CallDepthError, match=f"Maximum call depth of {MAX_CALL_DEPTH_LIMIT}"):
            evaluate(parse_expr("f(1)"), ctx)

    def test_unknown_angle_mode(self) -> None:
        with pytest.raises(ValidationError):
            CalculatorSettings(angle_mode="gradians")

    def test_separators_must_differ(self) -> None:
        with pytest.raises(ValidationError, match="both"):
            CalculatorSettings(decimal_separator=",", thousands_separator=",")

    def test_extra_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CalculatorSettings(colour="blue")

    def test_to_context(self) -> None:
        settings = CalculatorSettings(precision=5, angle_mode="degrees", max_call_depth=10)
        ctx = settings.to_context(variables={"x": 1})
        assert ctx.precision == 5
        assert ctx.angle_mode == AngleMode.DEGREES
        assert ctx.max_call_depth == 10
        assert dict(ctx.variables) == {"x": 1}
        assert dict(ctx.functions) == {}

    def test_frozen(self) -> None:
        settings = CalculatorSettings()
        with pytest.raises(ValidationError):
            settings.precision = 3  # type: ignore[misc]


class TestLoadSettings:
    """Reading the [calculator] table."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "absent.toml") == CalculatorSettings()

    def test_load(self, settings_file: Path) -> None:
        settings = load_settings(settings_file)
        assert settings.precision == 6
        assert settings.angle_mode == AngleMode.DEGREES
        assert settings.thousands_separator == ","
        assert settings.max_call_depth == 32

    def test_missing_section_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "calcwright.toml"
        path.write_text('[other]\nkey = "value"\n')
        assert load_settings(path) == CalculatorSettings()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "calcwright.toml"
        path.write_text("[calculator\nprecision = ")
        with pytest.raises(SettingsError, match="Invalid TOML") as exc:
            load_settings(path)
        assert exc.value.kind == ErrorKind.SETTINGS

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "calcwright.toml"
        path.write_text("calculator = 3\n")
        with pytest.raises(SettingsError, match="must be a table"):
            load_settings(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "calcwright.toml"
        path.write_text("[calculator]\nprecision = 0\n")
        with pytest.raises(SettingsError, match="precision"):
            load_settings(path)
