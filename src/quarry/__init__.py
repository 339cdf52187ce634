"""Quarry - form-driven SQL query builder.

Users pick tables, columns, joins, conditions, grouping, ordering and paging;
Quarry checks the selections against a schema catalog and assembles them into
a SQL SELECT statement. Nothing is executed.

Example:
    from quarry import QueryAssembler, actions, default_catalog

    catalog = default_catalog()
    state = actions.new_state()
    state = actions.select_table(state, 0, "Products")
    state = actions.set_where_column(state, 0, "Products.Price")
    state = actions.set_where_operator(state, 0, ">")
    state = actions.set_where_value(state, 0, "100")
    state = actions.set_limit(state, 10)

    result = QueryAssembler(catalog).generate(state)
    print(result.sql)  # SELECT * FROM Products WHERE Products.Price > 100 LIMIT 10
"""

from quarry.core.types import (
    BuilderState,
    JoinSpec,
    JoinType,
    OrderSpec,
    SortDirection,
    TableSelection,
    TableSpec,
    WhereCondition,
    WhereOperator,
)
from quarry.exceptions import (
    CatalogError,
    InvalidColumnError,
    InvalidLimitError,
    InvalidOffsetError,
    InvalidSelectionError,
    InvalidStateError,
    JoinsRequiredError,
    MissingWhereValueError,
    NoTableSelectedError,
    QuarryError,
    QuarryInputError,
    QueryValidationError,
    RowIndexError,
    SecondTableMissingError,
    TableNotFoundError,
)
from quarry.query import GenerationResult, QueryAssembler, actions, generate_query
from quarry.schema import SchemaCatalog, default_catalog

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "SchemaCatalog",
    "QueryAssembler",
    "GenerationResult",
    "default_catalog",
    "generate_query",
    "actions",
    # Types
    "TableSpec",
    "TableSelection",
    "JoinType",
    "JoinSpec",
    "WhereOperator",
    "WhereCondition",
    "SortDirection",
    "OrderSpec",
    "BuilderState",
    # Exceptions
    "QuarryError",
    "CatalogError",
    "TableNotFoundError",
    "QueryValidationError",
    "NoTableSelectedError",
    "SecondTableMissingError",
    "JoinsRequiredError",
    "MissingWhereValueError",
    "QuarryInputError",
    "RowIndexError",
    "InvalidColumnError",
    "InvalidLimitError",
    "InvalidOffsetError",
    "InvalidSelectionError",
    "InvalidStateError",
]
