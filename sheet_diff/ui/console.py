"""
Rich rendering of comparison results.
Single responsibility: show a session's verdict, summary and diffs in the terminal.
"""

from typing import Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.markup import escape
from rich import box

from ..core.key_validator import KeyValidationResult
from ..core.session import ComparisonSession
from ..core.suppression import CellOutcome


CELL_STYLES = {
    "significant": "black on yellow",
    "type_mismatch": "black on dark_orange",
    "missing": "white on red",
    "suppressed": "dim strike",
}


class ResultsView:
    """
    Terminal view of a comparison session.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize view.

        Args:
            console: Rich console (a new stdout console by default)
        """
        self.console = console or Console()

    def show_header(self, title: str = "Sheet Diff"):
        header = Panel(
            Text(title, style="bold cyan", justify="center"),
            box=box.DOUBLE,
            expand=True
        )
        self.console.print(header)

    def show_sources(self, session: ComparisonSession):
        for side, dataset in (("Left", session.left), ("Right", session.right)):
            if dataset is None:
                self.console.print(f"{side}: [dim]not loaded[/dim]")
            else:
                self.console.print(f"{side}: [bold]{escape(dataset.name)}[/bold]  rows: {len(dataset):,}")
        criteria = escape(", ".join(str(c) for c in session.sort_spec)) or "—"
        self.console.print(f"Sort: {criteria}   Locale: {session.locale}   "
                           f"Type check: {'on' if session.type_check else 'off'}")

    def show_verdict(self, session: ComparisonSession):
        equal = session.is_equal()
        columns = escape(", ".join(session.sort_spec.columns))
        if equal is None:
            self.console.print("[yellow]Load both files and choose a sort column to compare.[/yellow]")
        elif equal:
            self.console.print(f"[green]✓ The files are equal after sorting by \"{columns}\"[/green]")
        else:
            self.console.print(f"[red]✗ The files differ after sorting by \"{columns}\"[/red]")

    def show_summary(self, session: ComparisonSession):
        """
        Display comparison counts in a formatted table.
        """
        result = session.result()
        table = Table(title="Comparison Results", box=box.ROUNDED)

        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", style="magenta")
        table.add_column("Percentage", style="green")

        compared = min(result.total_left, result.total_right)
        metrics = [
            ("Total Left Dataset", result.total_left, None),
            ("Total Right Dataset", result.total_right, None),
            ("Matched Rows", result.matched_rows,
             100 * result.matched_rows / compared if compared else None),
            ("Only in Left", result.only_in_left, None),
            ("Only in Right", result.only_in_right, None),
            ("Value Differences", result.value_differences,
             100 * result.value_differences / compared if compared else None),
            ("Effective Differences", result.effective_differences, None),
            ("Suppressed Cells", result.suppressed_cells, None),
        ]

        for metric, value, percentage in metrics:
            if percentage is not None:
                table.add_row(metric, f"{value:,}", f"{percentage:.1f}%")
            else:
                table.add_row(metric, f"{value:,}", "—")

        self.console.print()
        self.console.print(table)
        self.console.print()

    @staticmethod
    def _cell_text(cell: Optional[CellOutcome], presence: bool) -> Text:
        if cell is None:
            return Text("")
        text = Text(cell.left_value)
        text.append("\n")
        text.append(cell.right_value, style="dim" if not cell.differs else "")

        if presence:
            text.stylize(CELL_STYLES["missing"])
        elif cell.suppressed and cell.differs:
            text.stylize(CELL_STYLES["suppressed"])
        elif cell.type_mismatch:
            text.stylize(CELL_STYLES["type_mismatch"])
        elif cell.significant:
            text.stylize(CELL_STYLES["significant"])
        return text

    def show_differences(self, session: ComparisonSession, limit: int = 50):
        """
        Display effective diffs with left value above right value per cell.

        Args:
            session: Ready comparison session
            limit: Maximum diff rows to render
        """
        effective = session.effective_diffs()
        if not effective:
            return

        headers = session.headers
        table = Table(title=f"Differences ({len(effective):,})", box=box.SIMPLE_HEAD,
                      show_lines=True)
        table.add_column("#", style="cyan", no_wrap=True)
        for header in headers:
            table.add_column(escape(header))

        for diff in effective[:limit]:
            table.add_row(
                str(diff.index + 1),
                *[self._cell_text(diff.cell(h), diff.is_row_presence_mismatch) for h in headers]
            )

        self.console.print(table)
        if len(effective) > limit:
            self.console.print(f"[dim]… {len(effective) - limit:,} more not shown[/dim]")

    def show_key_warnings(self, results: Dict[str, KeyValidationResult]):
        for side, result in results.items():
            if not result.is_valid:
                self.log_warning(f"{side}: {result.error_message}")

    def log_error(self, message: str, details: Optional[Dict] = None):
        """
        Display error message.

        Args:
            message: Error message
            details: Additional error details
        """
        error_text = Text(f"✗ {message}", style="bold red")

        if details:
            panel = Panel(
                error_text,
                title="Error",
                border_style="red",
                expand=False
            )
            self.console.print(panel)

            for key, value in details.items():
                self.console.print(f"  {key}: {escape(str(value))}", style="dim")
        else:
            self.console.print(error_text)

    def log_warning(self, message: str):
        self.console.print(f"⚠ {escape(message)}", style="yellow")

    def log_success(self, message: str):
        self.console.print(f"✓ {escape(message)}", style="green")

    def render(self, session: ComparisonSession, limit: int = 50):
        """Sources, verdict, summary and diff table in one go."""
        self.show_sources(session)
        self.show_verdict(session)
        if session.is_ready:
            self.show_summary(session)
            self.show_differences(session, limit=limit)
