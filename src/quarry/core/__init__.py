"""Core types for Quarry."""

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

__all__ = [
    "BuilderState",
    "JoinSpec",
    "JoinType",
    "OrderSpec",
    "SortDirection",
    "TableSelection",
    "TableSpec",
    "WhereCondition",
    "WhereOperator",
]
