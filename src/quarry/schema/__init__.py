"""Schema catalog for Quarry."""

from quarry.schema.catalog import SchemaCatalog, default_catalog

__all__ = ["SchemaCatalog", "default_catalog"]
