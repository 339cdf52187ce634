"""Query building for Quarry.

This package turns form selections into SQL text:
    1. Actions - named handlers producing updated builder states
    2. Query Assembler - picker options, validation and rendering

Example:
    state = actions.select_table(actions.new_state(), 0, "Categories")
    state = actions.select_columns(state, 0, ["CategoryName"], catalog)
    result = QueryAssembler(catalog).generate(state)
"""

from quarry.query import actions
from quarry.query.assembler import GenerationResult, QueryAssembler, generate_query

__all__ = [
    "actions",
    "GenerationResult",
    "QueryAssembler",
    "generate_query",
]
