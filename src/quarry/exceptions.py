"""Custom exceptions for Quarry.

All exceptions follow the same conventions:
- Messages tell the user what went wrong AND which field to fix
- Context carries the offending values and, where relevant, the valid options
"""

from __future__ import annotations

from typing import Any


class QuarryError(Exception):
    """Base exception for all Quarry errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class CatalogError(QuarryError):
    """Schema catalog data is malformed or inconsistent."""

    pass


class TableNotFoundError(QuarryError):
    """Table is not part of the schema catalog."""

    def __init__(self, table_name: str, available_tables: list[str] | None = None) -> None:
        available = available_tables or []
        if available:
            message = f"Table '{table_name}' not found. Available tables: {', '.join(available)}"
        else:
            message = f"Table '{table_name}' not found. The catalog has no tables."

        super().__init__(message, {"table": table_name, "available_tables": available})
        self.table_name = table_name
        self.available_tables = available


# === Query validation failures ===


class QueryValidationError(QuarryError):
    """The builder state cannot be rendered into a query.

    Each subclass carries a stable ``code`` naming the failed rule.
    """

    code = "ValidationFailed"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["code"] = self.code
        return data


class NoTableSelectedError(QueryValidationError):
    """The first table row has no table."""

    code = "NoTableSelected"

    def __init__(self) -> None:
        super().__init__("Select at least one table!")


class SecondTableMissingError(QueryValidationError):
    """A second table row exists but no table was picked for it."""

    code = "SecondTableMissing"

    def __init__(self) -> None:
        super().__init__("Select Second table!", {"row": 1})


class JoinsRequiredError(QueryValidationError):
    """Several tables are selected but no join connects them."""

    code = "JoinsRequired"

    def __init__(self, tables: list[str]) -> None:
        super().__init__(
            "Joins are required when selecting multiple tables!",
            {"tables": tables},
        )
        self.tables = tables


class MissingWhereValueError(QueryValidationError):
    """A where-condition needs a value for its operator."""

    code = "MissingWhereValue"

    def __init__(self, index: int, column: str, operator: str) -> None:
        super().__init__(
            "Enter Value Of Where Condition!",
            {"condition": index, "column": column, "operator": operator},
        )
        self.index = index
        self.column = column
        self.operator = operator


# === Rejected user input ===


class QuarryInputError(QuarryError):
    """A builder action received input it does not accept.

    The state the action was applied to is left unchanged.
    """

    pass


class RowIndexError(QuarryInputError):
    """Row index is outside the rows of a builder section."""

    def __init__(self, section: str, index: int, size: int) -> None:
        message = f"No {section} row at index {index}. The section has {size} row(s)."
        super().__init__(message, {"section": section, "index": index, "size": size})
        self.section = section
        self.index = index
        self.size = size


class InvalidColumnError(QuarryInputError):
    """Column does not belong to the table picked on the row."""

    def __init__(self, column: str, table: str, available_columns: list[str] | None = None) -> None:
        available = available_columns or []
        if available:
            message = (
                f"Column '{column}' not found on '{table}'. "
                f"Available columns: {', '.join(available)}"
            )
        else:
            message = f"Column '{column}' not found on '{table}'. Select a table first."

        super().__init__(
            message,
            {"column": column, "table": table, "available_columns": available},
        )
        self.column = column
        self.table = table
        self.available_columns = available


class InvalidLimitError(QuarryInputError):
    """Limit must be a positive integer."""

    def __init__(self, limit: int) -> None:
        message = f"Invalid limit {limit}. Limit must be greater than 0."
        super().__init__(message, {"limit": limit})
        self.limit = limit


class InvalidOffsetError(QuarryInputError):
    """Offset must lie between 0 and the current limit."""

    def __init__(self, offset: int, limit: int | None) -> None:
        if limit is None:
            message = f"Invalid offset {offset}. Set a limit before setting an offset."
        else:
            message = f"Invalid offset {offset}. Offset must be between 0 and {limit}."
        super().__init__(message, {"offset": offset, "limit": limit})
        self.offset = offset
        self.limit = limit


class InvalidSelectionError(QuarryInputError):
    """A textual selection (table, join, condition, ordering) could not be parsed."""

    def __init__(self, kind: str, value: str, expected: str) -> None:
        message = f"Invalid {kind} '{value}'. Expected format: {expected}"
        super().__init__(message, {"kind": kind, "value": value, "expected": expected})
        self.kind = kind
        self.value = value
        self.expected = expected


class InvalidStateError(QuarryInputError):
    """A builder state document does not describe a valid state."""

    def __init__(self, source: str, errors: list[str]) -> None:
        message = f"Invalid builder state in {source}: {'; '.join(errors)}"
        super().__init__(message, {"source": source, "errors": errors})
        self.source = source
        self.errors = errors
