"""CLI entry point: registers all subcommands."""

import typer

from ._common import console

app = typer.Typer(
    name="codeshape",
    help="codeshape - structural code-quality checks",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """Structural code-quality checks over syntax trees."""
    if ctx.invoked_subcommand is not None:
        return

    from .. import __version__

    if version:
        from ..scanning import get_supported_languages

        console.print(f"[bold cyan]codeshape[/bold cyan] version [green]{__version__}[/green]")
        grammars = ", ".join(get_supported_languages()) or "none"
        console.print(f"[dim]grammars: {grammars}[/dim]")
        raise typer.Exit(0)

    typer.echo(ctx.get_help())


# Import subcommands to register them
from .check import check as _check  # noqa: F401, E402
from .rules import rules as _rules  # noqa: F401, E402


def main() -> None:
    app()
