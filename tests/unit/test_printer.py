"""Tests for the pretty-printer and the non-throwing validator."""

from __future__ import annotations

import pytest

from calcwright.core.errors import ErrorKind
from calcwright.core.expression_lang import parse_expr, pretty_print, validate
from calcwright.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    Variable,
)

# ============================================================================
# Pretty-printer
# ============================================================================


class TestPrettyPrint:
    """Canonical rendering with minimal parentheses."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("1+2", "1 + 2"),
            ("2x", "2 * x"),
            ("3(4)", "3 * 4"),
            ("(1 + 2) * 3", "(1 + 2) * 3"),
            ("1 + (2 * 3)", "1 + 2 * 3"),
            ("(a - b) - c", "a - b - c"),
            ("a - (b - c)", "a - (b - c)"),
            ("a / (b * c)", "a / (b * c)"),
            ("2 ^ 3 ^ 4", "2 ^ 3 ^ 4"),
            ("(2 ^ 3) ^ 4", "(2 ^ 3) ^ 4"),
            ("-5^2", "-5 ^ 2"),
            ("(-5)^2", "(-5) ^ 2"),
            ("-(1 + 2)", "-(1 + 2)"),
            ("2^-1", "2 ^ (-1)"),
            ("SIN(PI / 2)", "sin(pi / 2)"),
            ("max(1,2 , 3)", "max(1, 2, 3)"),
            ("f()", "f()"),
            ("1.50e3", "1.50e3"),
        ],
    )
    def test_canonical_form(self, source: str, expected: str) -> None:
        assert pretty_print(parse_expr(source)) == expected

    def test_long_flat_chain(self) -> None:
        source = " + ".join(["1"] * 1000)
        assert pretty_print(parse_expr(source.replace(" ", ""))) == source

    def test_long_chain_with_grouped_prefix(self) -> None:
        source = "(1 + 2) * " + " * ".join(["x"] * 1000)
        assert pretty_print(parse_expr(source)) == source

    def test_round_trip_preserves_ast(self) -> None:
        ast = parse_expr("-(a + b) ^ 2 / (c - d) % 3 + hyp(x, 2y)")
        assert parse_expr(pretty_print(ast)) == ast

    def test_hand_built_negative_literal(self) -> None:
        ast = BinaryExpr(
            op=BinaryOp.POW,
            left=NumberLiteral(value=-2.0, raw="-2"),
            right=NumberLiteral(value=2.0, raw="2"),
        )
        assert pretty_print(ast) == "(-2) ^ 2"

    def test_literal_without_raw_text(self) -> None:
        assert pretty_print(NumberLiteral(value=0.5, raw="")) == "0.5"

    def test_unary_over_power(self) -> None:
        ast = UnaryExpr(
            op=UnaryOp.NEG,
            operand=BinaryExpr(op=BinaryOp.POW, left=Variable(name="x"), right=Variable(name="y")),
        )
        assert pretty_print(ast) == "-x ^ y"

    def test_unknown_node(self) -> None:
        with pytest.raises(TypeError):
            pretty_print("1 + 2")  # type: ignore[arg-type]


# ============================================================================
# Validator
# ============================================================================


class TestValidate:
    """validate() reports problems instead of raising."""

    def test_valid_expression(self) -> None:
        outcome = validate("2x + sin(pi)")
        assert outcome.valid
        assert outcome.errors == []

    def test_unknown_names_are_still_valid(self) -> None:
        # Resolution happens at evaluation time
        assert validate("foo(bar)").valid

    def test_parse_error(self) -> None:
        outcome = validate("(1 + 2")
        assert not outcome.valid
        assert len(outcome.errors) == 1
        issue = outcome.errors[0]
        assert issue.kind == ErrorKind.PARSE
        assert issue.position == 0
        assert "Unmatched opening parenthesis" in issue.message

    def test_lex_error(self) -> None:
        outcome = validate("1 # 2")
        assert not outcome.valid
        assert outcome.errors[0].kind == ErrorKind.LEX
        assert outcome.errors[0].position == 2

    def test_trailing_close_paren(self) -> None:
        outcome = validate("2 + 3)")
        assert not outcome.valid
        assert "parenthesis" in outcome.errors[0].message

    def test_calls_validate(self) -> None:
        outcome = validate("sin(pi/2) + cos(0)")
        assert outcome.valid
        assert outcome.errors == []

    def test_empty(self) -> None:
        outcome = validate("")
        assert not outcome.valid
        assert outcome.errors[0].message == "Empty expression"

    def test_never_raises_on_garbage(self) -> None:
        for source in ["((((", "))", "1..2", "+", "sin", ",", "2 3 4", "é"]:
            assert not validate(source).valid
