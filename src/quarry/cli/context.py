"""CLI context management for the schema catalog and shared state."""

import os
from dataclasses import dataclass, field

from quarry.query.assembler import QueryAssembler
from quarry.schema.catalog import SchemaCatalog, default_catalog

CATALOG_ENV_VAR = "QUARRY_CATALOG"


def get_catalog_path(path: str | None) -> str | None:
    """Resolve the catalog file from CLI arg, environment variable, or default.

    Priority:
    1. Explicit path argument
    2. QUARRY_CATALOG environment variable
    3. None: use the built-in catalog
    """
    if path:
        return path
    if env_path := os.getenv(CATALOG_ENV_VAR):
        return env_path
    return None


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Loads the catalog on first use and holds output preferences.
    """

    catalog_path: str | None
    json_output: bool
    _catalog: SchemaCatalog | None = field(default=None, init=False, repr=False)

    def get_catalog(self) -> SchemaCatalog:
        """Get or load the schema catalog (lazy initialization).

        Returns:
            SchemaCatalog instance
        """
        if self._catalog is None:
            if self.catalog_path:
                self._catalog = SchemaCatalog.from_file(self.catalog_path)
            else:
                self._catalog = default_catalog()
        return self._catalog

    def get_assembler(self) -> QueryAssembler:
        return QueryAssembler(self.get_catalog())
