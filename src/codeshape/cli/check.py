"""Check command: run the analyzers over files and directories."""

import json
from pathlib import Path
from typing import Optional

import click
import typer

from ..api import analyze
from ..exceptions import CodeshapeError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import Severity
from . import app
from ._common import console, err_console, resolve_config


@app.command()
def check(
    paths: list[Path] = typer.Argument(
        ...,
        help="Files or directories to analyze",
        exists=True,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    fail_on: Optional[str] = typer.Option(
        None,
        "--fail-on",
        help="Lowest severity that fails the run",
        click_type=click.Choice([s.value for s in Severity], case_sensitive=False),
    ),
    disable: Optional[list[str]] = typer.Option(
        None,
        "--disable",
        "-d",
        help="Analyzer id to skip (repeatable)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Analyzers run in parallel",
        min=1,
        max=32,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show recommendations and debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
):
    """
    Analyze source files and report structural quality issues.

    Exits with status 1 when a blocking analyzer reports an issue at or
    above the --fail-on severity.

    [bold cyan]Examples:[/bold cyan]

      codeshape check src

      codeshape check src tests --json

      codeshape check app.py --fail-on high --disable todo-comment
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config,
            fail_on=fail_on.lower() if fail_on else None,
            workers=workers,
            disable=disable,
        )
        report = analyze(paths, config=settings)

        if json_output:
            get_formatter("json").render(report)
        else:
            get_formatter("rich", console=console, verbose=verbose).render(report)

    except CodeshapeError as e:
        logger.debug(f"{e.code} {e.__class__.__name__}: {e}")
        if json_output:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            err_console.print(f"[red]Error {e.code}:[/red] {e}")
        raise typer.Exit(2)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    raise typer.Exit(report.exit_code)
