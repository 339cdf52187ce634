"""Shared test fixtures for Quarry."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from quarry import BuilderState, QueryAssembler, SchemaCatalog, actions, default_catalog


@pytest.fixture
def catalog() -> SchemaCatalog:
    """The built-in Categories / Products / Orders catalog."""
    return default_catalog()


@pytest.fixture
def assembler(catalog: SchemaCatalog) -> QueryAssembler:
    return QueryAssembler(catalog)


@pytest.fixture
def pick_tables(catalog: SchemaCatalog) -> Callable[..., BuilderState]:
    """Build a state with one table row per name, in order."""

    def _pick(*names: str) -> BuilderState:
        state = actions.new_state()
        for index, name in enumerate(names):
            if index > 0:
                state = actions.add_table_row(state)
            state = actions.select_table(state, index, name)
        return state

    return _pick


@pytest.fixture
def joined_state(pick_tables: Callable[..., BuilderState]) -> BuilderState:
    """Categories and Products joined on CategoryID."""
    state = pick_tables("Categories", "Products")
    state = actions.set_join_endpoint(state, 0, 1, "Categories.CategoryID")
    return actions.set_join_endpoint(state, 0, 2, "Products.CategoryID")


@pytest.fixture
def catalog_file(tmp_path: Path) -> str:
    """A users / orders / products catalog written to a JSON file."""
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "tables": [
                    {"name": "users", "columns": ["id", "name", "email", "age"]},
                    {"name": "orders", "columns": ["order_id", "user_id", "product", "amount"]},
                    {"name": "products", "columns": ["product_id", "product_name", "price"]},
                ],
                "relationships": {"users": ["orders"], "orders": ["products"]},
            }
        )
    )
    return str(path)
