"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from quarry.core.types import TableSpec
from quarry.exceptions import QuarryError, QueryValidationError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print rows as a Rich table.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for col in columns:
            table.add_column(col)
        for row in data:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        console.print(table)

    def print_table_info(self, table: TableSpec, related: list[str], terminal: bool) -> None:
        """Print a catalog table with its columns and joinable tables."""
        if self.json_mode:
            output = table.model_dump()
            output["related_tables"] = related
            output["terminal"] = terminal
            print(json.dumps(output, indent=2))
            return

        console.print(f"\n[bold]Table:[/bold] {table.name}")
        if terminal:
            console.print("Terminal table (no outgoing relationships)", style="dim")

        columns_table = Table(show_header=True, header_style="bold cyan")
        columns_table.add_column("#")
        columns_table.add_column("Column")
        for position, column in enumerate(table.columns, 1):
            columns_table.add_row(str(position), column)
        console.print(columns_table)

        if related:
            console.print(f"\n[bold]Joins to ({len(related)}):[/bold] {', '.join(related)}")

    def print_sql(self, sql: str) -> None:
        """Print a generated query.

        An empty query means the state validated but no join connects its
        tables, so there is nothing to show.
        """
        if self.json_mode:
            print(json.dumps({"valid": True, "sql": sql}, indent=2))
        elif sql:
            console.print("[bold]Generated SQL Query:[/bold]")
            # Plain echo keeps the statement on one copyable line
            print(sql)
        else:
            console.print("No query generated: complete a join for the selected tables.", style="yellow")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, QuarryError):
                print(json.dumps(error.to_dict(), indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # For QuarryError, include context if available
            if isinstance(error, QuarryError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            title = "[red]Error[/red]"
            if isinstance(error, QueryValidationError):
                title = f"[red]{error.code}[/red]"

            panel = Panel(
                error_text,
                title=title,
                border_style="red",
            )
            console.print(panel)

    def print_json(self, data: Any) -> None:
        """Print a JSON document for --json mode."""
        print(json.dumps(data, default=str, indent=2))
