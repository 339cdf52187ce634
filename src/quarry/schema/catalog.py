"""Schema catalog: the tables a user may pick and how they relate.

The catalog is immutable once built. Lookups never raise: an unknown table
simply has no columns and no related tables, which is how "nothing picked
yet" is represented throughout the builder.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quarry.core.types import TableSpec
from quarry.exceptions import CatalogError

logger = logging.getLogger(__name__)

# Tables and relationships of the sample store schema
DEFAULT_TABLES: list[dict[str, Any]] = [
    {"name": "Categories", "columns": ["CategoryID", "CategoryName"]},
    {"name": "Products", "columns": ["ProductID", "ProductName", "Price", "CategoryID"]},
    {"name": "Orders", "columns": ["OrderID", "ProductID", "Quantity", "OrderDate"]},
]

DEFAULT_RELATIONSHIPS: dict[str, list[str]] = {
    "Categories": ["Products"],
    "Products": ["Orders"],
    "Orders": [],
}


class SchemaCatalog:
    """Static description of tables, columns and joinable table pairs."""

    def __init__(
        self,
        tables: Iterable[TableSpec],
        relationships: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        """Build a catalog.

        Args:
            tables: Tables in display order
            relationships: Table name -> names of tables it may be joined with

        Raises:
            CatalogError: If a table is declared twice or a relationship
                references a table that is not in the catalog
        """
        self._tables: dict[str, TableSpec] = {}
        for table in tables:
            if table.name in self._tables:
                raise CatalogError(
                    f"Table '{table.name}' is declared more than once.",
                    {"table": table.name},
                )
            self._tables[table.name] = table

        self._relationships: dict[str, tuple[str, ...]] = {}
        for source, targets in (relationships or {}).items():
            members = tuple(dict.fromkeys(targets))
            unknown = [name for name in (source, *members) if name not in self._tables]
            if unknown:
                raise CatalogError(
                    f"Relationship for '{source}' references unknown tables: "
                    f"{', '.join(map(str, unknown))}. Known tables: {', '.join(self._tables)}",
                    {"source": source, "unknown_tables": unknown},
                )
            self._relationships[source] = members

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchemaCatalog:
        """Build a catalog from a ``{"tables": [...], "relationships": {...}}`` document.

        Raises:
            CatalogError: If the document does not have the expected shape
        """
        raw_tables = data.get("tables")
        if not isinstance(raw_tables, list):
            raise CatalogError("Catalog document needs a 'tables' list.", {"keys": list(data)})

        raw_relationships = data.get("relationships", {})
        if not isinstance(raw_relationships, dict):
            raise CatalogError("Catalog 'relationships' must be an object of table -> tables.")

        try:
            tables = [TableSpec.model_validate(item) for item in raw_tables]
        except ValidationError as e:
            raise CatalogError(f"Invalid table definition: {e}") from e

        for source, targets in raw_relationships.items():
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                raise CatalogError(
                    f"Relationship for '{source}' must be a list of table names.",
                    {"source": source},
                )

        return cls(tables, raw_relationships)

    @classmethod
    def from_file(cls, path: str | Path) -> SchemaCatalog:
        """Load a catalog from a JSON file.

        Raises:
            CatalogError: If the file is missing, not JSON, or malformed
        """
        file_path = Path(path)
        if not file_path.exists():
            raise CatalogError(f"Catalog file not found: {path}", {"path": str(path)})

        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Catalog file {path} is not valid JSON: {e.msg}") from e
        except UnicodeDecodeError as e:
            raise CatalogError(f"Catalog file {path} is not UTF-8 text: {e.reason}") from e

        if not isinstance(data, dict):
            raise CatalogError(f"Catalog file {path} must contain a JSON object.")

        catalog = cls.from_dict(data)
        logger.debug(f"Loaded catalog with {len(catalog.table_names)} tables from {file_path}")
        return catalog

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def table_names(self) -> list[str]:
        return list(self._tables)

    def list_tables(self) -> list[TableSpec]:
        """All tables, in catalog order."""
        return list(self._tables.values())

    def get_table(self, table_name: str) -> TableSpec | None:
        return self._tables.get(table_name)

    def columns_of(self, table_name: str) -> list[str]:
        """Columns of a table, or an empty list if the table is unknown."""
        table = self._tables.get(table_name)
        return list(table.columns) if table else []

    def related_tables(self, table_name: str) -> set[str]:
        """Tables reachable from ``table_name`` in one join."""
        return set(self._relationships.get(table_name, ()))

    def related_tables_ordered(self, table_name: str) -> list[str]:
        """Same as :meth:`related_tables`, in declaration order."""
        return list(self._relationships.get(table_name, ()))

    def max_fan_out(self) -> int:
        """Largest number of related tables declared for a single table."""
        return max((len(targets) for targets in self._relationships.values()), default=0)

    def is_terminal(self, table_name: str) -> bool:
        """A known table with no outgoing relationships (a leaf of the join chain)."""
        return table_name in self._tables and not self._relationships.get(table_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables": [table.model_dump() for table in self._tables.values()],
            "relationships": {k: list(v) for k, v in self._relationships.items()},
        }


def default_catalog() -> SchemaCatalog:
    """The built-in Categories / Products / Orders catalog."""
    return SchemaCatalog.from_dict(
        {"tables": DEFAULT_TABLES, "relationships": DEFAULT_RELATIONSHIPS}
    )
