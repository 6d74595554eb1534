"""
Batch evaluation of independent expressions.

Rows are evaluated in order against one shared context. A failing row is
recorded with its error kind and the loop moves on; one bad row never aborts
the rest of the batch.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from calcwright.core.errors import CalculatorError, ErrorKind
from calcwright.core.expression_lang.context import EvaluationContext, create_default_context
from calcwright.core.formatting import CalculationResult, evaluate_expression

logger = logging.getLogger(__name__)


class BatchRow(BaseModel):
    """Outcome of one expression in a batch."""

    row_index: int
    expression: str
    result: CalculationResult | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchReport(BaseModel):
    """All rows of a batch plus success/error tallies."""

    rows: list[BatchRow] = Field(default_factory=list)
    success_count: int = 0
    error_count: int = 0


def evaluate_batch(
    expressions: Iterable[str],
    context: EvaluationContext | None = None,
    decimal_separator: str = ".",
    thousands_separator: str = "",
) -> BatchReport:
    """Evaluate each expression, capturing per-row failures."""
    ctx = context if context is not None else create_default_context()
    report = BatchReport()

    for index, raw in enumerate(expressions):
        expression = (raw or "").strip()
        if not expression:
            row = BatchRow(
                row_index=index,
                expression="",
                error="Empty expression",
                error_kind=ErrorKind.PARSE,
            )
        else:
            try:
                result = evaluate_expression(
                    expression, ctx, decimal_separator, thousands_separator
                )
            except CalculatorError as e:
                logger.debug("Row %d (%r) failed: %s", index, expression, e.message)
                row = BatchRow(
                    row_index=index,
                    expression=expression,
                    error=e.message,
                    error_kind=e.kind,
                )
            else:
                row = BatchRow(row_index=index, expression=expression, result=result)

        report.rows.append(row)
        if row.ok:
            report.success_count += 1
        else:
            report.error_count += 1

    logger.info(
        "Batch finished: %d ok, %d failed", report.success_count, report.error_count
    )
    return report


def read_expressions_csv(content: str, column: int = 0, has_header: bool = False) -> list[str]:
    """Pull one column of expressions out of CSV text.

    Blank lines are skipped; rows too short for ``column`` yield an empty
    expression so row numbering still lines up with the file.
    """
    if column < 0:
        raise ValueError(f"column must be non-negative, got {column}")
    rows = [row for row in csv.reader(io.StringIO(content)) if any(cell.strip() for cell in row)]
    if has_header:
        rows = rows[1:]
    return [row[column].strip() if column < len(row) else "" for row in rows]


def export_results_csv(report: BatchReport, include_errors: bool = True) -> str:
    """Render a batch report as ``Expression,Result,Error`` CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Expression", "Result", "Error"])
    for row in report.rows:
        formatted = row.result.formatted if row.result is not None else ""
        error = row.error if include_errors and row.error else ""
        writer.writerow([row.expression, formatted, error])
    return buffer.getvalue()
