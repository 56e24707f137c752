"""Rich terminal formatter for affected-tests."""

from collections import Counter
from io import StringIO
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AffectedResult
from .base import BaseFormatter, display_path

_KIND_LABELS = {
    "unresolved_specifier": "[red]unresolved[/red]",
    "unreadable_file": "[red]unreadable[/red]",
    "dynamic_specifier": "[yellow]dynamic[/yellow]",
    "malformed_source": "[yellow]syntax[/yellow]",
    "cyclic_but_handled": "[dim]cycle[/dim]",
}


class RichFormatter(BaseFormatter):
    """Table of affected tests followed by a panel of collected errors."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console

    def render(self, result: AffectedResult, root: Optional[str] = None) -> None:
        self._print(self.console or Console(), result, root)

    def format(self, result: AffectedResult, root: Optional[str] = None) -> str:
        buffer = StringIO()
        self._print(Console(file=buffer, width=120, no_color=True), result, root)
        return buffer.getvalue()

    def _print(self, console: Console, result: AffectedResult, root: Optional[str]) -> None:
        if result.files:
            table = Table(title=f"Affected tests ({len(result.files)})", title_justify="left")
            table.add_column("#", justify="right", style="dim")
            table.add_column("Test file", style="cyan")
            for i, path in enumerate(sorted(display_path(f, root) for f in result.files), 1):
                table.add_row(str(i), escape(path))
            console.print(table)
        else:
            console.print("[green]No affected tests.[/green]")

        if not result.errors:
            return

        counts = Counter(e.kind for e in result.errors)
        summary = ", ".join(f"{n} {kind.replace('_', ' ')}" for kind, n in sorted(counts.items()))
        lines = []
        for error in result.errors:
            label = _KIND_LABELS.get(error.kind, error.kind)
            lines.append(f"{label} [dim]{error.code.value}[/dim] {escape(error.message)}")
        console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold yellow]{len(result.errors)} error(s)[/bold yellow] ({summary})",
                title_align="left",
                expand=False,
            )
        )
