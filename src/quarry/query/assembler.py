"""Query assembler: turns a builder state into SQL text.

The assembler answers two kinds of questions about a state:
- Which choices are legal next (table, join endpoint and column pickers)
- Whether the state forms a valid query, and if so its SQL text

Values are inserted verbatim. No quoting, escaping or type coercion is done.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from quarry.core.types import BuilderState, WhereCondition
from quarry.exceptions import (
    JoinsRequiredError,
    MissingWhereValueError,
    NoTableSelectedError,
    QueryValidationError,
    SecondTableMissingError,
)
from quarry.schema.catalog import SchemaCatalog

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of the generate action."""

    valid: bool
    """Whether the state passed validation."""

    sql: str = ""
    """Rendered query. Empty when validation failed or the final join check did not pass."""

    error: str | None = None
    """User-facing message of the failed rule."""

    code: str | None = None
    """Name of the failed rule (``NoTableSelected``, ``JoinsRequired``, ...)."""


class QueryAssembler:
    """Computes picker options and renders builder states against a catalog."""

    def __init__(self, catalog: SchemaCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> SchemaCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Picker options
    # ------------------------------------------------------------------

    def max_table_rows(self, state: BuilderState) -> int:
        """Number of table rows that still get table options.

        One more than the widest fan-out in the relationship map, and one
        fewer than that when the first row holds a terminal table.
        """
        cap = self._catalog.max_fan_out() + 1
        first = state.tables[0].table if state.tables else ""
        if self._catalog.is_terminal(first):
            cap -= 1
        return cap

    def table_options(self, state: BuilderState) -> list[str]:
        """Tables that can be picked on a table row."""
        row_names = state.row_table_names
        if len(row_names) > self.max_table_rows(state):
            return []

        all_tables = self._catalog.table_names
        if len(row_names) == 1:
            return all_tables

        related: set[str] = set()
        for name in row_names:
            related |= self._catalog.related_tables(name)

        unchosen = [name for name in all_tables if name not in row_names]
        linked = [name for name in unchosen if name in related]
        return linked or unchosen

    def column_options(self, table_name: str) -> list[str]:
        return self._catalog.columns_of(table_name)

    def join_endpoint_options(self, state: BuilderState) -> list[str]:
        """Qualified columns usable on either side of a join.

        For every selected table and each selected table related to it, each
        column name present in both tables is offered for both of them.
        """
        selected = state.row_table_names
        options: dict[str, None] = {}
        for name in selected:
            for related in self._catalog.related_tables_ordered(name):
                if related not in selected:
                    continue
                related_columns = self._catalog.columns_of(related)
                for column in self._catalog.columns_of(name):
                    if column in related_columns:
                        options[f"{name}.{column}"] = None
                        options[f"{related}.{column}"] = None
        return list(options)

    def qualified_columns(self, state: BuilderState) -> list[str]:
        """Every ``table.column`` of the selected tables, in row then column order."""
        seen: set[str] = set()
        columns: list[str] = []
        for name in state.selected_table_names:
            if name in seen:
                continue
            seen.add(name)
            columns.extend(f"{name}.{column}" for column in self._catalog.columns_of(name))
        return columns

    # ------------------------------------------------------------------
    # Validation and rendering
    # ------------------------------------------------------------------

    def validate(self, state: BuilderState) -> None:
        """Check the state against the builder rules.

        Raises:
            NoTableSelectedError: The first row has no table
            SecondTableMissingError: A second row exists without a table
            JoinsRequiredError: Several tables are selected and no join has both endpoints
            MissingWhereValueError: A condition needs a value and has none
        """
        if not state.tables or not state.tables[0].is_set:
            raise NoTableSelectedError()

        if len(state.tables) > 1 and not state.tables[1].is_set:
            raise SecondTableMissingError()

        selected = state.selected_table_names
        if len(selected) > 1 and not any(join.has_endpoints for join in state.joins):
            raise JoinsRequiredError(selected)

        for index, condition in enumerate(state.where):
            if condition.needs_value:
                raise MissingWhereValueError(index, condition.column1, condition.operator.value)

    def render(self, state: BuilderState) -> str:
        """Render the state as SQL without validating it."""
        columns = [f"{row.table}.{column}" for row in state.tables for column in row.columns]
        sql = f"SELECT {', '.join(columns) or '*'}"

        if state.tables and state.tables[0].is_set:
            sql += f" FROM {state.tables[0].table}"

        for join in state.joins:
            if join.is_complete:
                sql += (
                    f" {join.type} JOIN {join.table2}"
                    f" ON {join.table1}.{join.column1} = {join.table2}.{join.column2}"
                )

        conditions = [self._render_condition(c) for c in state.where if c.is_set]
        if conditions:
            sql += f" WHERE {' AND '.join(conditions)}"

        if state.group_by:
            sql += f" GROUP BY {state.group_by}"

        if state.order_by.column:
            sql += f" ORDER BY {state.order_by.column} {state.order_by.direction}"

        if state.limit is not None:
            sql += f" LIMIT {state.limit}"
        if state.offset is not None:
            sql += f" OFFSET {state.offset}"

        return sql

    def build(self, state: BuilderState) -> str:
        """Validate and render the state.

        Returns an empty string when several tables are selected but no join
        is complete (endpoints and join type), even though validation passed.

        Raises:
            QueryValidationError: If a builder rule fails
        """
        self.validate(state)
        sql = self.render(state)

        selected = state.selected_table_names
        if len(selected) == 1:
            return sql
        if len(selected) > 1 and any(join.is_complete for join in state.joins):
            return sql
        logger.debug("Rendered query withheld: no complete join for multiple tables")
        return ""

    def generate(self, state: BuilderState) -> GenerationResult:
        """Run the generate action, reporting failures instead of raising them."""
        try:
            sql = self.build(state)
        except QueryValidationError as e:
            logger.info(f"Query generation failed: {e.code}")
            return GenerationResult(valid=False, error=e.message, code=e.code)

        logger.debug(f"Generated query: {sql}")
        return GenerationResult(valid=True, sql=sql)

    @staticmethod
    def _render_condition(condition: WhereCondition) -> str:
        if condition.operator.is_null_check:
            return f"{condition.column1} {condition.operator}"
        return f"{condition.column1} {condition.operator} {condition.column2}"


def generate_query(state: BuilderState, catalog: SchemaCatalog) -> GenerationResult:
    """Convenience function to run the generate action once.

    Args:
        state: Builder state to render
        catalog: Catalog the state was built against

    Returns:
        GenerationResult
    """
    return QueryAssembler(catalog).generate(state)
