"""Rules command: list the registered analyzers."""

import json

import typer
from rich.table import Table

from ..analyzers import get_analyzer_classes
from . import app
from ._common import console


@app.command()
def rules(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List every analyzer with its id, default severity and thresholds.
    """
    classes = get_analyzer_classes()

    if json_output:
        data = [{**cls.describe(), "defaults": dict(cls.defaults)} for cls in classes]
        print(json.dumps(data, indent=2))
        return

    table = Table(title="Analyzers", expand=True)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Severity", width=8)
    table.add_column("Blocking", width=8)
    table.add_column("Description", ratio=3)
    table.add_column("Defaults", style="dim", ratio=2)
    for cls in classes:
        defaults = ", ".join(f"{k}={v}" for k, v in cls.defaults.items())
        table.add_row(
            cls.id,
            cls.severity.value,
            "yes" if cls.blocking else "no",
            cls.description,
            defaults,
        )
    console.print(table)
