"""
calcwright command-line interface.

Commands:
- eval: evaluate one expression
- validate: check an expression without evaluating it
- format: print the canonical form of an expression
- batch: evaluate a CSV column of expressions
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from calcwright._version import get_version
from calcwright.core.batch import evaluate_batch, export_results_csv, read_expressions_csv
from calcwright.core.bindings import FunctionStore, VariableStore, build_context, parse_definition
from calcwright.core.errors import CalculatorError
from calcwright.core.expression_lang import parse_expr, pretty_print, validate
from calcwright.core.formatting import evaluate_expression
from calcwright.core.settings import SETTINGS_FILENAME, CalculatorSettings, load_settings

app = typer.Typer(
    help="calcwright - evaluate calculator expressions",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"calcwright {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable debug logging")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and environment information",
        ),
    ] = None,
) -> None:
    """calcwright CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_settings(config: Path | None) -> CalculatorSettings:
    path = config or Path.cwd() / SETTINGS_FILENAME
    try:
        return load_settings(path)
    except CalculatorError as e:
        err_console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(code=1) from e


def _fail(error: CalculatorError) -> typer.Exit:
    where = f" (position {error.position})" if error.position is not None else ""
    err_console.print(f"[red]{error.kind.value} error{where}: {escape(error.message)}[/red]")
    return typer.Exit(code=1)


@app.command(name="eval")
def eval_command(
    expression: Annotated[str, typer.Argument(help="Expression to evaluate")],
    degrees: Annotated[
        bool | None,
        typer.Option("--degrees/--radians", help="Angle mode for trigonometric functions"),
    ] = None,
    precision: Annotated[
        int | None,
        typer.Option("--precision", "-p", min=1, max=100, help="Significant digits to display"),
    ] = None,
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="Variable binding NAME=VALUE (repeatable)"),
    ] = None,
    define: Annotated[
        list[str] | None,
        typer.Option("--define", "-d", help="Function definition 'f(x) = body' (repeatable)"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Settings file (default: ./{SETTINGS_FILENAME})"),
    ] = None,
) -> None:
    """Evaluate an expression and print the formatted result."""
    settings = _load_settings(config)
    overrides: dict[str, object] = {}
    if degrees is not None:
        overrides["angle_mode"] = "degrees" if degrees else "radians"
    if precision is not None:
        overrides["precision"] = precision
    if overrides:
        settings = CalculatorSettings(**{**settings.model_dump(), **overrides})

    variables = VariableStore()
    functions = FunctionStore()
    try:
        for binding in var or []:
            name, sep, value = binding.partition("=")
            if not sep:
                err_console.print(
                    f"[red]Invalid --var {escape(repr(binding))}; expected NAME=VALUE[/red]"
                )
                raise typer.Exit(code=1)
            try:
                number = float(value)
            except ValueError:
                err_console.print(
                    f"[red]Invalid number for {escape(name.strip())}: {escape(repr(value))}[/red]"
                )
                raise typer.Exit(code=1) from None
            variables.set(name.strip(), number)
        for definition in define or []:
            functions.define(*parse_definition(definition))

        context = build_context(settings, variables, functions)
        result = evaluate_expression(
            expression,
            context,
            settings.decimal_separator,
            settings.thousands_separator,
        )
    except CalculatorError as e:
        raise _fail(e) from e

    console.print(result.formatted)


@app.command(name="validate")
def validate_command(
    expression: Annotated[str, typer.Argument(help="Expression to check")],
) -> None:
    """Check that an expression parses, without evaluating it."""
    outcome = validate(expression)
    if outcome.valid:
        console.print("[green]valid[/green]")
        return

    for issue in outcome.errors:
        where = f" at position {issue.position}" if issue.position is not None else ""
        console.print(f"[red]{issue.kind.value}{where}: {escape(issue.message)}[/red]")
        if issue.position is not None:
            console.print(f"  {expression}", markup=False, highlight=False)
            console.print("  " + " " * issue.position + "^", markup=False, highlight=False)
    raise typer.Exit(code=1)


@app.command(name="format")
def format_command(
    expression: Annotated[str, typer.Argument(help="Expression to normalise")],
) -> None:
    """Print the canonical, minimally parenthesised form of an expression."""
    try:
        ast = parse_expr(expression)
    except CalculatorError as e:
        raise _fail(e) from e
    console.print(pretty_print(ast), markup=False, highlight=False)


@app.command(name="batch")
def batch_command(
    csv_path: Annotated[Path, typer.Argument(help="CSV file with one expression per row")],
    column: Annotated[
        int, typer.Option("--column", min=0, help="Zero-based column holding expressions")
    ] = 0,
    header: Annotated[bool, typer.Option("--header", help="Skip the first row")] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write result CSV here")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Settings file (default: ./{SETTINGS_FILENAME})"),
    ] = None,
) -> None:
    """Evaluate every expression in a CSV column and export the results."""
    if not csv_path.exists():
        err_console.print(f"[red]File not found: {escape(str(csv_path))}[/red]")
        raise typer.Exit(code=1)

    settings = _load_settings(config)
    expressions = read_expressions_csv(
        csv_path.read_text(encoding="utf-8"), column=column, has_header=header
    )
    report = evaluate_batch(
        expressions,
        build_context(settings),
        settings.decimal_separator,
        settings.thousands_separator,
    )
    exported = export_results_csv(report)

    if output is not None:
        output.write_text(exported, encoding="utf-8")
        console.print(f"✓ Wrote {len(report.rows)} rows to {escape(str(output))}")
    else:
        console.print(exported, end="", markup=False, highlight=False)

    table = Table(title="Batch summary")
    table.add_column("Rows", justify="right")
    table.add_column("Succeeded", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_row(str(len(report.rows)), str(report.success_count), str(report.error_count))
    err_console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
