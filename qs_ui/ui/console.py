"""Rich-based console adapter used for all TTY output."""

from __future__ import annotations

import shutil
import sys
from typing import IO, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "success": "green",
        "accent": "#3ea6ff",
    }
)


class ConsoleUI:
    """ANSI-friendly output with Rich tables and rules."""

    def __init__(self, stream: IO[str] | None = None):
        self.console = Console(
            theme=THEME,
            file=stream or sys.stdout,
            highlight=False,
            soft_wrap=True,
        )

    def show_info(self, message: str) -> None:
        self.console.print(message, style="info")

    def show_warning(self, message: str) -> None:
        self.console.print(message, style="warning")

    def show_error(self, message: str) -> None:
        self.console.print(message, style="error")

    def show_success(self, message: str) -> None:
        self.console.print(message, style="success")

    def show_rule(self, title: str) -> None:
        self.console.rule(f"[b]{title}[/b]", style="accent")

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        # Keep tables within the visible console width and fold long cells.
        term_width = self.console.size.width or shutil.get_terminal_size(fallback=(100, 24)).columns
        table_width = max(60, term_width - 2) if term_width and term_width > 0 else None

        table = Table(
            title=f"[b]{title}[/b]",
            border_style="accent",
            header_style="bold white",
            row_styles=("", "dim"),
            expand=table_width is None,
            width=table_width,
        )
        for column in columns:
            table.add_column(column, overflow="fold")
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        self.console.print(table)
