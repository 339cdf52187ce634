"""Named builder actions.

Each action takes a :class:`BuilderState` and returns a new one; the state
passed in is never modified. Rejected input raises a
:class:`~quarry.exceptions.QuarryInputError` instead of returning a state.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Literal

from quarry.core.types import (
    BuilderState,
    JoinSpec,
    JoinType,
    OrderSpec,
    SortDirection,
    TableSelection,
    WhereCondition,
    WhereOperator,
)
from quarry.exceptions import (
    InvalidColumnError,
    InvalidLimitError,
    InvalidOffsetError,
    InvalidSelectionError,
    RowIndexError,
)
from quarry.schema.catalog import SchemaCatalog

JoinSide = Literal[1, 2]

# ASCII digits only, like a browser number parse
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def new_state() -> BuilderState:
    """A fresh form: one empty table row, join row and where row."""
    return BuilderState()


def _check_index(section: str, rows: tuple[object, ...], index: int) -> None:
    if not 0 <= index < len(rows):
        raise RowIndexError(section, index, len(rows))


def _replace(rows: tuple, index: int, row: object) -> tuple:
    return rows[:index] + (row,) + rows[index + 1 :]


def split_qualified(value: str) -> tuple[str, str]:
    """Split ``table.column`` into its two parts.

    Raises:
        InvalidSelectionError: If the value is not a qualified column
    """
    table, sep, column = value.partition(".")
    if not sep or not table or not column:
        raise InvalidSelectionError("qualified column", value, "table.column")
    return table, column


# === Table rows ===


def add_table_row(state: BuilderState) -> BuilderState:
    return state.model_copy(update={"tables": state.tables + (TableSelection(),)})


def select_table(state: BuilderState, index: int, table: str) -> BuilderState:
    """Pick (or clear, with ``""``) the table of a row.

    The row's columns are cleared, and because every downstream choice may
    reference the old table, joins, where-conditions, group-by and order-by
    all go back to their defaults.
    """
    _check_index("table", state.tables, index)
    defaults = BuilderState()
    return state.model_copy(
        update={
            "tables": _replace(state.tables, index, TableSelection(table=table)),
            "joins": defaults.joins,
            "where": defaults.where,
            "group_by": defaults.group_by,
            "order_by": defaults.order_by,
        }
    )


def select_columns(
    state: BuilderState,
    index: int,
    columns: Iterable[str],
    catalog: SchemaCatalog,
) -> BuilderState:
    """Replace the columns picked on a table row.

    Raises:
        InvalidColumnError: If a column is not part of the row's table
    """
    _check_index("table", state.tables, index)
    row = state.tables[index]
    available = catalog.columns_of(row.table)
    picked = list(columns)
    for column in picked:
        if column not in available:
            raise InvalidColumnError(column, row.table or "<no table>", available)

    updated = row.model_copy(update={"columns": tuple(dict.fromkeys(picked))})
    return state.model_copy(update={"tables": _replace(state.tables, index, updated)})


def check_columns(state: BuilderState, catalog: SchemaCatalog) -> None:
    """Check that every row only picks columns of its own table.

    Raises:
        InvalidColumnError: If a row holds a column its table does not have
    """
    for row in state.tables:
        available = catalog.columns_of(row.table)
        for column in row.columns:
            if column not in available:
                raise InvalidColumnError(column, row.table or "<no table>", available)


# === Join rows ===


def add_join_row(state: BuilderState) -> BuilderState:
    return state.model_copy(update={"joins": state.joins + (JoinSpec(),)})


def set_join_endpoint(state: BuilderState, index: int, side: JoinSide, qualified: str) -> BuilderState:
    """Set one side of a join's ON clause from a ``table.column`` value.

    An empty value clears that side.
    """
    _check_index("join", state.joins, index)
    if side not in (1, 2):
        raise InvalidSelectionError("join side", str(side), "1 or 2")

    table, column = split_qualified(qualified) if qualified else ("", "")
    fields = {f"table{side}": table, f"column{side}": column}
    updated = state.joins[index].model_copy(update=fields)
    return state.model_copy(update={"joins": _replace(state.joins, index, updated)})


def set_join_type(state: BuilderState, index: int, join_type: JoinType | str | None) -> BuilderState:
    _check_index("join", state.joins, index)
    value = JoinType(join_type) if join_type else None
    updated = state.joins[index].model_copy(update={"type": value})
    return state.model_copy(update={"joins": _replace(state.joins, index, updated)})


# === Where rows ===


def add_where_condition(state: BuilderState) -> BuilderState:
    return state.model_copy(update={"where": state.where + (WhereCondition(),)})


def _update_where(state: BuilderState, index: int, **fields: object) -> BuilderState:
    _check_index("where", state.where, index)
    updated = state.where[index].model_copy(update=fields)
    return state.model_copy(update={"where": _replace(state.where, index, updated)})


def set_where_column(state: BuilderState, index: int, column: str) -> BuilderState:
    return _update_where(state, index, column1=column)


def set_where_operator(state: BuilderState, index: int, operator: WhereOperator | str) -> BuilderState:
    """Change a condition's operator; NULL checks drop any typed value."""
    op = WhereOperator(operator)
    if op.is_null_check:
        return _update_where(state, index, operator=op, column2="")
    return _update_where(state, index, operator=op)


def set_where_value(state: BuilderState, index: int, value: str) -> BuilderState:
    """Set a condition's literal value.

    A value whose leading integer is negative is discarded.
    """
    if (number := _leading_int(value)) is not None and number < 0:
        value = ""
    return _update_where(state, index, column2=value)


def _leading_int(value: str) -> int | None:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


# === Grouping, ordering, paging ===


def set_group_by(state: BuilderState, column: str) -> BuilderState:
    return state.model_copy(update={"group_by": column})


def set_order_by(state: BuilderState, column: str) -> BuilderState:
    order = state.order_by.model_copy(update={"column": column})
    return state.model_copy(update={"order_by": order})


def set_order_direction(state: BuilderState, direction: SortDirection | str) -> BuilderState:
    order = state.order_by.model_copy(update={"direction": SortDirection(direction)})
    return state.model_copy(update={"order_by": order})


def set_order(state: BuilderState, column: str, direction: SortDirection | str) -> BuilderState:
    return state.model_copy(
        update={"order_by": OrderSpec(column=column, direction=SortDirection(direction))}
    )


def set_limit(state: BuilderState, limit: int | None) -> BuilderState:
    """Set or clear the row limit.

    Clearing the limit, or lowering it below the current offset, clears the
    offset as well.

    Raises:
        InvalidLimitError: If the limit is not greater than zero
    """
    if limit is not None and limit <= 0:
        raise InvalidLimitError(limit)

    offset = state.offset
    if offset is not None and (limit is None or offset > limit):
        offset = None
    return state.model_copy(update={"limit": limit, "offset": offset})


def set_offset(state: BuilderState, offset: int | None) -> BuilderState:
    """Set or clear the offset.

    Raises:
        InvalidOffsetError: If no limit is set or the offset is outside ``0..limit``
    """
    if offset is not None and (state.limit is None or not 0 <= offset <= state.limit):
        raise InvalidOffsetError(offset, state.limit)
    return state.model_copy(update={"offset": offset})
