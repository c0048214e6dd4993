"""Rich terminal formatter for codeshape."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..api import Report
from ..models import AnalyzerResult, Severity, Status
from .base import BaseFormatter

_SEVERITY_STYLE = {
    Severity.LOW: "green",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "red",
    Severity.CRITICAL: "red bold",
}

_STATUS_LABEL = {
    Status.PASSED: "[green]PASS[/green]",
    Status.WARNING: "[yellow]WARN[/yellow]",
    Status.FAILED: "[red]FAIL[/red]",
}


def _severity_label(severity: Severity) -> str:
    style = _SEVERITY_STYLE[severity]
    return f"[{style}]{severity.value}[/{style}]"


class RichFormatter(BaseFormatter):
    """Summary panel, one status line per analyzer and an issue table per failing analyzer."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose

    def render(self, report: Report) -> None:
        self._print_summary(report)
        for result in report.results:
            self._print_result(result, muted=not report.config.is_reported(result.analyzer_id))

    def format(self, report: Report) -> str:
        with self.console.capture() as capture:
            self.render(report)
        return capture.get()

    # -- private helpers --

    def _print_summary(self, report: Report) -> None:
        counts = report.count_by_status()
        summary_text = (
            f"Analyzed [bold]{report.files_analyzed}[/bold] files  |  "
            f"[green]{counts['passed']}[/green] passed  "
            f"[yellow]{counts['warning']}[/yellow] warnings  "
            f"[red]{counts['failed']}[/red] failed  |  "
            f"[bold]{len(report.issues)}[/bold] issues"
        )
        if report.parse_failures:
            summary_text += f"\n[dim]{len(report.parse_failures)} file(s) could not be parsed[/dim]"
        if report.analyzer_failures:
            summary_text += (
                f"\n[red]Analyzers that crashed: {', '.join(report.analyzer_failures)}[/red]"
            )
        title = "[bold red]Failed[/bold red]" if report.failed else "[bold cyan]Summary[/bold cyan]"
        self.console.print(Panel(summary_text, title=title, expand=False))
        self.console.print()

    def _print_result(self, result: AnalyzerResult, muted: bool) -> None:
        label = _STATUS_LABEL[result.status]
        suffix = " [dim](not reported)[/dim]" if muted else ""
        self.console.print(f"{label} [bold]{result.name}[/bold]: {result.message}{suffix}")
        if not result.issues:
            return

        table = Table(show_header=True, expand=True, box=None, padding=(0, 1))
        table.add_column("Location", style="cyan", no_wrap=True)
        table.add_column("Severity", width=8)
        table.add_column("Message", ratio=3)
        for issue in result.issues:
            table.add_row(str(issue.location), _severity_label(issue.severity), issue.message)
            if self.verbose and issue.recommendation:
                table.add_row("", "", f"[dim]{issue.recommendation}[/dim]")
        self.console.print(table)
        self.console.print()
