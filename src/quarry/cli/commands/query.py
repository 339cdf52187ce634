"""Query building commands."""

import logging
from typing import Annotated

import typer

from quarry.cli.context import CLIContext
from quarry.cli.output import OutputFormatter
from quarry.cli.parsing import (
    JOIN_FORMAT,
    ORDER_FORMAT,
    TABLE_FORMAT,
    WHERE_FORMAT,
    build_state,
    load_state_file,
)
from quarry.core.types import BuilderState

logger = logging.getLogger(__name__)

TablesOption = Annotated[
    list[str] | None,
    typer.Option("--table", "-t", help=f"Table row: {TABLE_FORMAT}. Can be repeated."),
]
JoinsOption = Annotated[
    list[str] | None,
    typer.Option("--join", help=f"Join row: {JOIN_FORMAT}. Can be repeated."),
]
WhereOption = Annotated[
    list[str] | None,
    typer.Option("--where", "-w", help=f"Where condition: {WHERE_FORMAT}. Can be repeated."),
]
GroupByOption = Annotated[
    str | None,
    typer.Option("--group-by", "-g", help="Qualified column to group by"),
]
OrderByOption = Annotated[
    str | None,
    typer.Option("--order-by", "-o", help=f"Ordering: {ORDER_FORMAT}"),
]
LimitOption = Annotated[
    int | None,
    typer.Option("--limit", "-l", help="Maximum number of rows (greater than 0)"),
]
OffsetOption = Annotated[
    int | None,
    typer.Option("--offset", help="Rows to skip (0 to limit, requires --limit)"),
]
StateFileOption = Annotated[
    str | None,
    typer.Option("--state-file", "-s", help="Load the builder state from a JSON file"),
]


def _resolve_state(
    cli_ctx: CLIContext,
    state_file: str | None,
    tables: list[str] | None,
    joins: list[str] | None,
    where: list[str] | None,
    group_by: str | None,
    order_by: str | None,
    limit: int | None,
    offset: int | None,
) -> BuilderState:
    if state_file:
        logger.debug(f"Loading builder state from {state_file}")
        return load_state_file(state_file, cli_ctx.get_catalog())
    return build_state(
        cli_ctx.get_catalog(),
        tables=tables,
        joins=joins,
        where=where,
        group_by=group_by,
        order_by=order_by,
        limit=limit,
        offset=offset,
    )


def build_command(
    ctx: typer.Context,
    tables: TablesOption = None,
    joins: JoinsOption = None,
    where: WhereOption = None,
    group_by: GroupByOption = None,
    order_by: OrderByOption = None,
    limit: LimitOption = None,
    offset: OffsetOption = None,
    state_file: StateFileOption = None,
) -> None:
    """Generate a SQL query from table, join and filter selections.

    Examples:

        quarry build -t "Categories:CategoryID,CategoryName"
        quarry build -t Categories -t Products --join "Categories.CategoryID=Products.CategoryID"
        quarry build -t Products -w "Products.Price > 100" --limit 10 --offset 0
        quarry build --state-file state.json
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        state = _resolve_state(
            cli_ctx, state_file, tables, joins, where, group_by, order_by, limit, offset
        )
        sql = cli_ctx.get_assembler().build(state)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)

    formatter.print_sql(sql)


def options_command(
    ctx: typer.Context,
    tables: TablesOption = None,
    joins: JoinsOption = None,
    where: WhereOption = None,
    group_by: GroupByOption = None,
    order_by: OrderByOption = None,
    limit: LimitOption = None,
    offset: OffsetOption = None,
    state_file: StateFileOption = None,
) -> None:
    """Show the choices the builder offers for a set of selections.

    Examples:

        quarry options
        quarry options -t Categories -t Products
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        state = _resolve_state(
            cli_ctx, state_file, tables, joins, where, group_by, order_by, limit, offset
        )
        assembler = cli_ctx.get_assembler()
        options = {
            "tables": assembler.table_options(state),
            "max_table_rows": assembler.max_table_rows(state),
            "join_endpoints": assembler.join_endpoint_options(state),
            "columns": assembler.qualified_columns(state),
        }
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)

    if cli_ctx.json_output:
        formatter.print_json(options)
        return

    formatter.print_table(
        "Builder Options",
        [
            {"Picker": "Table", "Choices": ", ".join(options["tables"]) or "-"},
            {"Picker": "Join endpoint", "Choices": ", ".join(options["join_endpoints"]) or "-"},
            {"Picker": "Column", "Choices": ", ".join(options["columns"]) or "-"},
        ],
        ["Picker", "Choices"],
    )
    typer.echo(f"Table rows allowed: {options['max_table_rows']}")
