"""Tests for batch evaluation and CSV import/export."""

from __future__ import annotations

import logging

import pytest

from calcwright.core.batch import (
    BatchReport,
    evaluate_batch,
    export_results_csv,
    read_expressions_csv,
)
from calcwright.core.errors import ErrorKind
from calcwright.core.expression_lang import AngleMode, EvaluationContext


class TestEvaluateBatch:
    """Each row succeeds or fails independently."""

    def test_all_ok(self) -> None:
        report = evaluate_batch(["1 + 1", "2 * 3", "sqrt(16)"])
        assert report.success_count == 3
        assert report.error_count == 0
        assert [row.result.formatted for row in report.rows] == ["2", "6", "4"]

    def test_failures_do_not_abort(self) -> None:
        report = evaluate_batch(["1 + 1", "2 +", "y", "factorial(-1)", "3 * 3"])
        assert report.success_count == 2
        assert report.error_count == 3
        kinds = [row.error_kind for row in report.rows]
        assert kinds == [None, ErrorKind.PARSE, ErrorKind.REFERENCE, ErrorKind.DOMAIN, None]
        assert report.rows[-1].result.value == 9

    def test_row_indices(self) -> None:
        report = evaluate_batch(["1", "2", "3"])
        assert [row.row_index for row in report.rows] == [0, 1, 2]

    def test_blank_row(self) -> None:
        report = evaluate_batch(["   "])
        row = report.rows[0]
        assert not row.ok
        assert row.error == "Empty expression"
        assert row.error_kind == ErrorKind.PARSE

    def test_expressions_are_trimmed(self) -> None:
        report = evaluate_batch(["  2 + 2  "])
        assert report.rows[0].expression == "2 + 2"

    def test_inf_and_nan_are_successes(self) -> None:
        report = evaluate_batch(["1/0", "0/0"])
        assert report.success_count == 2
        assert [row.result.formatted for row in report.rows] == ["∞", "NaN"]

    def test_shared_context(self) -> None:
        ctx = EvaluationContext(angle_mode=AngleMode.DEGREES, variables={"r": 2})
        report = evaluate_batch(["sin(90)", "pi * r^2"], ctx)
        assert report.rows[0].result.formatted == "1"
        assert report.rows[1].result.formatted == "12.56637061"

    def test_long_sum_row(self) -> None:
        report = evaluate_batch(["+".join(["1"] * 1000)])
        row = report.rows[0]
        assert row.ok
        assert row.result.value == 1000

    def test_empty_input(self) -> None:
        report = evaluate_batch([])
        assert report == BatchReport()

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="calcwright.core.batch"):
            evaluate_batch(["1", "x"])
        assert "1 ok, 1 failed" in caplog.text


class TestReadExpressionsCsv:
    """Extracting an expression column from CSV text."""

    def test_first_column(self) -> None:
        content = "1 + 1\n2 * 3\n"
        assert read_expressions_csv(content) == ["1 + 1", "2 * 3"]

    def test_header_skipped(self) -> None:
        content = "expr,note\nsqrt(4),root\n"
        assert read_expressions_csv(content, has_header=True) == ["sqrt(4)"]

    def test_other_column(self) -> None:
        content = "a,1+1\nb,2+2\n"
        assert read_expressions_csv(content, column=1) == ["1+1", "2+2"]

    def test_quoted_commas(self) -> None:
        content = 'id,expr\n1,"max(1, 2, 3)"\n'
        assert read_expressions_csv(content, column=1, has_header=True) == ["max(1, 2, 3)"]

    def test_blank_lines_skipped(self) -> None:
        content = "1\n\n   \n2\n"
        assert read_expressions_csv(content) == ["1", "2"]

    def test_short_rows_yield_empty(self) -> None:
        content = "a,1\nb\n"
        assert read_expressions_csv(content, column=1) == ["1", ""]

    def test_negative_column(self) -> None:
        with pytest.raises(ValueError):
            read_expressions_csv("1\n", column=-1)


class TestExportResultsCsv:
    """Rendering a report as CSV text."""

    def test_export(self) -> None:
        report = evaluate_batch(["1 + 1", "2 +"])
        lines = export_results_csv(report).splitlines()
        assert lines[0] == "Expression,Result,Error"
        assert lines[1] == "1 + 1,2,"
        assert lines[2] == "2 +,,Unexpected end of expression"

    def test_without_errors(self) -> None:
        report = evaluate_batch(["2 +"])
        lines = export_results_csv(report, include_errors=False).splitlines()
        assert lines[1] == "2 +,,"

    def test_commas_are_quoted(self) -> None:
        report = evaluate_batch(["max(1, 2)"])
        lines = export_results_csv(report).splitlines()
        assert lines[1] == '"max(1, 2)",2,'

    def test_round_trip_through_reader(self) -> None:
        report = evaluate_batch(["min(4, 5)", "2^10"])
        exported = export_results_csv(report)
        assert read_expressions_csv(exported, has_header=True) == ["min(4, 5)", "2^10"]
