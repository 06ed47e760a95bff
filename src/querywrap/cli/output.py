"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from querywrap.exceptions import QuerywrapError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_rows(self, title: str, rows: list[dict[str, Any]]) -> None:
        """Print rows as a Rich table or a JSON array.

        Args:
            title: Table title
            rows: Row dictionaries; columns are taken from the first row
        """
        if self.json_mode:
            print(json.dumps(rows, default=str, indent=2))
            return

        if not rows:
            console.print(f"{title}: no rows", style="dim")
            return

        table = Table(title=title, show_header=True, header_style="bold magenta")
        columns = list(rows[0])
        for col in columns:
            table.add_column(col)
        for row in rows:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        console.print(table)

    def print_value(self, key: str, value: Any) -> None:
        """Print a single named value ({"key": value} in JSON mode)."""
        if self.json_mode:
            print(json.dumps({key: value}, default=str, indent=2))
        else:
            print(value)

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, QuerywrapError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # For QuerywrapError, include context if available
            if isinstance(error, QuerywrapError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
