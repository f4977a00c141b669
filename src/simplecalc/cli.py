"""
simplecalc command line interface.

Commands:
    eval       Evaluate one expression and print the result
    operators  List the supported operators in precedence order
    repl       Read expressions from the console until ``exit``
"""

from __future__ import annotations

import json
import logging
import platform
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simplecalc._version import get_version
from simplecalc.core.config import CalcConfig, load_config
from simplecalc.core.engine import ExpressionEngine, get_engine, list_engines
from simplecalc.core.errors import CalcError, ConfigurationError
from simplecalc.core.operators import OPERATORS, format_number

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

app = typer.Typer(
    help="simplecalc - evaluate arithmetic expressions with ^ / * - + and parentheses.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"simplecalc {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        typer.echo(f"Engines: {', '.join(list_engines())}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("simplecalc").setLevel(level)


@app.callback()
def main_callback(
    ctx: typer.Context,
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
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every reduction step to stderr"),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a simplecalc.toml file"),
    ] = None,
) -> None:
    """simplecalc CLI main callback for global options."""
    try:
        config = load_config(config_file)
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    _configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = config


def _config(ctx: typer.Context) -> CalcConfig:
    if isinstance(ctx.obj, CalcConfig):
        return ctx.obj
    return load_config()


def _engine(ctx: typer.Context, name: str | None) -> ExpressionEngine:
    config = _config(ctx)
    try:
        return get_engine(name or config.engine)
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e


EngineOption = Annotated[
    str | None,
    typer.Option("--engine", "-e", help="Evaluation engine: reduce or precedence"),
]


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Expression, e.g. '(2+3)*4'")],
    engine: EngineOption = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Evaluate one expression and print the result.

    An expression starting with '-' looks like an option, so separate it
    with '--': simplecalc eval -- -2+3
    """
    calculator = _engine(ctx, engine)
    try:
        result = calculator.compute(expression)
    except CalcError as e:
        if output_json:
            payload = {"expression": expression, "error": type(e).__name__, "message": e.message}
            console.print_json(json.dumps(payload))
        else:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if output_json:
        console.print_json(
            json.dumps({"expression": expression, "result": result, "engine": calculator.name})
        )
        return
    console.print(format_number(result), markup=False)


@app.command(name="operators")
def operators_command() -> None:
    """List the supported operators, highest precedence first."""
    table = Table(title="Operators")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")

    for op in OPERATORS:
        table.add_row(str(op.rank), escape(op.symbol), op.name)

    console.print(table)


@app.command(name="repl")
def repl_command(
    ctx: typer.Context,
    engine: EngineOption = None,
) -> None:
    """Read expressions line by line and print their values until exit."""
    config = _config(ctx)
    calculator = _engine(ctx, engine)
    exit_hint = " or ".join(config.exit_commands) or "Ctrl-D"

    console.print(f"[bold]simplecalc[/bold] {get_version()} ({calculator.name} engine)")
    console.print(
        "Operators: " + escape(" ".join(f"{op.name}({op.symbol})" for op in OPERATORS))
    )
    console.print(f"[dim]Type {escape(exit_hint)} to leave.[/dim]")

    evaluated = 0
    while True:
        try:
            line = console.input(escape(config.prompt))
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        line = line.strip()
        if not line:
            continue
        if line.lower() in config.exit_commands:
            break

        try:
            result = calculator.compute(line)
        except CalcError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue

        evaluated += 1
        console.print(format_number(result), markup=False)

    logger.debug("REPL finished after %d expressions", evaluated)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
