"""Core types for Quarry.

Every model is frozen: builder actions never mutate a state, they return an
updated copy. All types are JSON-serializable through ``model_dump``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator


class JoinType(StrEnum):
    """Supported join kinds."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid join type values."""
        return [t.value for t in cls]


class WhereOperator(StrEnum):
    """Comparison operators offered for where-conditions."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

    @property
    def is_null_check(self) -> bool:
        """Whether the operator takes no value."""
        return self in (WhereOperator.IS_NULL, WhereOperator.IS_NOT_NULL)

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid operator values."""
        return [o.value for o in cls]


class SortDirection(StrEnum):
    """Ordering directions."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid direction values."""
        return [d.value for d in cls]


class TableSpec(BaseModel):
    """A catalog table and its ordered columns."""

    name: str = Field(..., description="Table name")
    columns: tuple[str, ...] = Field(default=(), description="Column names in display order")

    model_config = {"frozen": True}


class TableSelection(BaseModel):
    """One table row of the builder form.

    An empty ``table`` means nothing has been picked on the row yet.
    """

    table: str = ""
    columns: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @field_validator("columns")
    @classmethod
    def dedupe_columns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @property
    def is_set(self) -> bool:
        return bool(self.table)


class JoinSpec(BaseModel):
    """One join row: ``<type> JOIN table2 ON table1.column1 = table2.column2``."""

    table1: str = ""
    column1: str = ""
    table2: str = ""
    column2: str = ""
    type: JoinType | None = JoinType.INNER

    model_config = {"frozen": True}

    @property
    def has_endpoints(self) -> bool:
        """Both sides of the ON clause are picked."""
        return bool(self.table1 and self.column1 and self.table2 and self.column2)

    @property
    def is_complete(self) -> bool:
        """Endpoints and join type are all set, so the join can be rendered."""
        return self.has_endpoints and self.type is not None


class WhereCondition(BaseModel):
    """One where row. ``column1`` is a qualified column, ``column2`` a literal value."""

    column1: str = ""
    operator: WhereOperator = WhereOperator.EQ
    column2: str = ""

    model_config = {"frozen": True}

    @property
    def is_set(self) -> bool:
        return bool(self.column1)

    @property
    def needs_value(self) -> bool:
        """The condition has a column and an operator that requires a value, but no value."""
        return self.is_set and not self.operator.is_null_check and self.column2 == ""


class OrderSpec(BaseModel):
    """ORDER BY selection."""

    column: str = ""
    direction: SortDirection = SortDirection.ASC

    model_config = {"frozen": True}


class BuilderState(BaseModel):
    """Every selection currently made in the builder.

    A fresh state holds one empty table row, one empty join row and one
    empty where-condition. An offset needs a limit and lies in ``0..limit``.
    """

    tables: tuple[TableSelection, ...] = Field(default_factory=lambda: (TableSelection(),))
    joins: tuple[JoinSpec, ...] = Field(default_factory=lambda: (JoinSpec(),))
    where: tuple[WhereCondition, ...] = Field(default_factory=lambda: (WhereCondition(),))
    group_by: str = ""
    order_by: OrderSpec = Field(default_factory=OrderSpec)
    limit: int | None = None
    offset: int | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_paging(self) -> BuilderState:
        if self.limit is not None and self.limit <= 0:
            raise ValueError(f"limit must be greater than 0, got {self.limit}")
        if self.offset is not None:
            if self.limit is None:
                raise ValueError("offset requires a limit")
            if not 0 <= self.offset <= self.limit:
                raise ValueError(f"offset must be between 0 and {self.limit}, got {self.offset}")
        return self

    @property
    def selected_table_names(self) -> list[str]:
        """Names picked on the table rows, in row order, skipping unset rows."""
        return [row.table for row in self.tables if row.is_set]

    @property
    def row_table_names(self) -> list[str]:
        """Table value of every row, including ``""`` for unset rows."""
        return [row.table for row in self.tables]
