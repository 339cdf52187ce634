"""Input parsing utilities for CLI commands.

Selections typed on the command line are turned into builder actions and
replayed in the order a user would fill the form: tables and columns, joins,
where-conditions, group-by, order-by, limit, offset.
"""

import json
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quarry.core.types import BuilderState, JoinType, SortDirection, WhereOperator
from quarry.exceptions import InvalidSelectionError, InvalidStateError, TableNotFoundError
from quarry.query import actions
from quarry.schema.catalog import SchemaCatalog

TABLE_FORMAT = "Table[:column1,column2]"
JOIN_FORMAT = "table1.column1=table2.column2[:INNER|LEFT|RIGHT|FULL]"
WHERE_FORMAT = "table.column OPERATOR [value]"
ORDER_FORMAT = "table.column[:ASC|DESC]"

# Longer operators first so ">=" is not read as ">"
_WHERE_PATTERN = re.compile(
    r"^\s*(?P<column>\S+?)\s*(?P<operator>IS\s+NOT\s+NULL|IS\s+NULL|>=|<=|!=|=|>|<)\s*(?P<value>.*?)\s*$",
    re.IGNORECASE,
)


def parse_table_selection(spec: str) -> tuple[str, list[str]]:
    """Parse a table row specification.

    Examples:
        "Categories" → ("Categories", [])
        "Categories:CategoryID,CategoryName" → ("Categories", ["CategoryID", "CategoryName"])

    Raises:
        InvalidSelectionError: If the table name is empty
    """
    table, _, columns = spec.partition(":")
    table = table.strip()
    if not table:
        raise InvalidSelectionError("table", spec, TABLE_FORMAT)
    return table, [c.strip() for c in columns.split(",") if c.strip()]


def parse_join(spec: str) -> tuple[str, str, JoinType]:
    """Parse a join specification.

    Examples:
        "Categories.CategoryID=Products.CategoryID" → (..., ..., JoinType.INNER)
        "Products.ProductID=Orders.ProductID:left" → (..., ..., JoinType.LEFT)

    Raises:
        InvalidSelectionError: If the spec is malformed or the join type unknown
    """
    condition, sep, join_type = spec.rpartition(":")
    if not sep:
        condition, join_type = spec, JoinType.INNER.value

    left, eq, right = condition.partition("=")
    if not eq or "." not in left or "." not in right:
        raise InvalidSelectionError("join", spec, JOIN_FORMAT)

    normalized = join_type.strip().upper()
    if normalized not in JoinType.values():
        raise InvalidSelectionError("join type", join_type, ", ".join(JoinType.values()))

    return left.strip(), right.strip(), JoinType(normalized)


def parse_where(spec: str) -> tuple[str, WhereOperator, str]:
    """Parse a where-condition.

    Examples:
        "Products.Price > 100" → ("Products.Price", WhereOperator.GT, "100")
        "Orders.Quantity IS NOT NULL" → ("Orders.Quantity", WhereOperator.IS_NOT_NULL, "")

    Raises:
        InvalidSelectionError: If no operator is found, or a NULL check carries a value
    """
    match = _WHERE_PATTERN.match(spec)
    if not match:
        raise InvalidSelectionError("where condition", spec, WHERE_FORMAT)

    operator = WhereOperator(" ".join(match.group("operator").upper().split()))
    value = match.group("value")
    if operator.is_null_check and value:
        raise InvalidSelectionError("where condition", spec, f"table.column {operator}")
    return match.group("column"), operator, value


def parse_order(spec: str) -> tuple[str, SortDirection]:
    """Parse an ORDER BY specification.

    Raises:
        InvalidSelectionError: If the direction is unknown
    """
    column, sep, direction = spec.rpartition(":")
    if not sep:
        column, direction = spec, SortDirection.ASC.value

    normalized = direction.strip().upper()
    if not column.strip() or normalized not in SortDirection.values():
        raise InvalidSelectionError("order", spec, ORDER_FORMAT)
    return column.strip(), SortDirection(normalized)


def build_state(
    catalog: SchemaCatalog,
    tables: list[str] | None = None,
    joins: list[str] | None = None,
    where: list[str] | None = None,
    group_by: str | None = None,
    order_by: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> BuilderState:
    """Replay command-line selections as builder actions.

    Raises:
        TableNotFoundError: If a table is not in the catalog
        QuarryInputError: If a selection is malformed or rejected by an action
    """
    state = actions.new_state()

    for index, spec in enumerate(tables or []):
        table, columns = parse_table_selection(spec)
        if catalog.get_table(table) is None:
            raise TableNotFoundError(table, catalog.table_names)
        if index > 0:
            state = actions.add_table_row(state)
        state = actions.select_table(state, index, table)
        if columns:
            state = actions.select_columns(state, index, columns, catalog)

    for index, spec in enumerate(joins or []):
        left, right, join_type = parse_join(spec)
        if index > 0:
            state = actions.add_join_row(state)
        state = actions.set_join_endpoint(state, index, 1, left)
        state = actions.set_join_endpoint(state, index, 2, right)
        state = actions.set_join_type(state, index, join_type)

    for index, spec in enumerate(where or []):
        column, operator, value = parse_where(spec)
        if index > 0:
            state = actions.add_where_condition(state)
        state = actions.set_where_column(state, index, column)
        state = actions.set_where_operator(state, index, operator)
        if value:
            state = actions.set_where_value(state, index, value)

    if group_by:
        state = actions.set_group_by(state, group_by)

    if order_by:
        column, direction = parse_order(order_by)
        state = actions.set_order(state, column, direction)

    if limit is not None:
        state = actions.set_limit(state, limit)
    if offset is not None:
        state = actions.set_offset(state, offset)

    return state


def read_json_file(path: str) -> dict[str, Any]:
    """Read single JSON object from file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with file_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_state_file(path: str, catalog: SchemaCatalog) -> BuilderState:
    """Load a builder state from a JSON document (``BuilderState.model_dump`` layout).

    Raises:
        InvalidStateError: If the document is not a valid builder state
        TableNotFoundError: If a row picks a table that is not in the catalog
        InvalidColumnError: If a row picks a column its table does not have
    """
    try:
        state = BuilderState.model_validate(read_json_file(path))
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'state'}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidStateError(path, errors) from e

    for table in state.selected_table_names:
        if catalog.get_table(table) is None:
            raise TableNotFoundError(table, catalog.table_names)
    actions.check_columns(state, catalog)
    return state
