"""Schema catalog commands."""

from typing import Annotated

import typer

from quarry.cli.context import CLIContext
from quarry.cli.output import OutputFormatter
from quarry.exceptions import TableNotFoundError

# Create catalog subcommand group
app = typer.Typer(help="Inspect the tables available to the builder")


@app.command("list")
def catalog_list(ctx: typer.Context) -> None:
    """List all tables in the catalog."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        catalog = cli_ctx.get_catalog()
        table_data = [
            {
                "Name": table.name,
                "Columns": len(table.columns),
                "Joins To": ", ".join(catalog.related_tables_ordered(table.name)),
            }
            for table in catalog.list_tables()
        ]

        if cli_ctx.json_output:
            formatter.print_json(catalog.to_dict())
        else:
            formatter.print_table(
                f"Tables ({len(table_data)} total)",
                table_data,
                ["Name", "Columns", "Joins To"],
            )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


@app.command("describe")
def catalog_describe(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
) -> None:
    """Show the columns and joinable tables of a table."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        catalog = cli_ctx.get_catalog()
        table = catalog.get_table(table_name)
        if table is None:
            raise TableNotFoundError(table_name, catalog.table_names)

        formatter.print_table_info(
            table,
            catalog.related_tables_ordered(table_name),
            catalog.is_terminal(table_name),
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
