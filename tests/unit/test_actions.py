"""Tests for builder actions."""

import pytest

from quarry import (
    BuilderState,
    InvalidColumnError,
    InvalidLimitError,
    InvalidOffsetError,
    InvalidSelectionError,
    JoinType,
    RowIndexError,
    SchemaCatalog,
    SortDirection,
    TableSelection,
    WhereOperator,
    actions,
)


class TestNewState:
    """Defaults of a fresh builder."""

    def test_single_empty_rows(self) -> None:
        state = actions.new_state()
        assert len(state.tables) == 1
        assert state.tables[0].table == ""
        assert state.tables[0].columns == ()
        assert len(state.joins) == 1
        assert state.joins[0].type == JoinType.INNER
        assert len(state.where) == 1
        assert state.where[0].operator == WhereOperator.EQ
        assert state.group_by == ""
        assert state.order_by.column == ""
        assert state.order_by.direction == SortDirection.ASC
        assert state.limit is None
        assert state.offset is None


class TestTableActions:
    """Picking tables and columns."""

    def test_check_columns_accepts_catalog_columns(self, catalog: SchemaCatalog) -> None:
        state = BuilderState(tables=(TableSelection(table="Orders", columns=("OrderID", "Quantity")),))
        actions.check_columns(state, catalog)

    def test_check_columns_rejects_foreign_column(self, catalog: SchemaCatalog) -> None:
        state = BuilderState(
            tables=(
                TableSelection(table="Categories", columns=("CategoryID",)),
                TableSelection(table="Orders", columns=("Price",)),
            )
        )
        with pytest.raises(InvalidColumnError) as exc_info:
            actions.check_columns(state, catalog)
        assert exc_info.value.table == "Orders"
        assert exc_info.value.column == "Price"

    def test_add_table_row(self) -> None:
        state = actions.add_table_row(actions.new_state())
        assert len(state.tables) == 2

    def test_actions_do_not_mutate_input(self) -> None:
        original = actions.new_state()
        updated = actions.select_table(original, 0, "Products")
        assert original.tables[0].table == ""
        assert updated.tables[0].table == "Products"

    def test_select_columns(self, catalog: SchemaCatalog) -> None:
        state = actions.select_table(actions.new_state(), 0, "Categories")
        state = actions.select_columns(state, 0, ["CategoryName", "CategoryID"], catalog)
        assert state.tables[0].columns == ("CategoryName", "CategoryID")

    def test_select_columns_drops_duplicates(self, catalog: SchemaCatalog) -> None:
        state = actions.select_table(actions.new_state(), 0, "Categories")
        state = actions.select_columns(state, 0, ["CategoryID", "CategoryID"], catalog)
        assert state.tables[0].columns == ("CategoryID",)

    def test_select_columns_rejects_foreign_column(self, catalog: SchemaCatalog) -> None:
        state = actions.select_table(actions.new_state(), 0, "Categories")
        with pytest.raises(InvalidColumnError) as exc_info:
            actions.select_columns(state, 0, ["Price"], catalog)
        assert exc_info.value.available_columns == ["CategoryID", "CategoryName"]

    def test_select_columns_without_table(self, catalog: SchemaCatalog) -> None:
        with pytest.raises(InvalidColumnError, match="Select a table first"):
            actions.select_columns(actions.new_state(), 0, ["CategoryID"], catalog)

    def test_changing_table_clears_row_columns(self, catalog: SchemaCatalog) -> None:
        state = actions.select_table(actions.new_state(), 0, "Categories")
        state = actions.select_columns(state, 0, ["CategoryID"], catalog)
        state = actions.select_table(state, 0, "Products")
        assert state.tables[0].columns == ()

    def test_changing_table_resets_downstream_selections(
        self, joined_state: BuilderState, catalog: SchemaCatalog
    ) -> None:
        """Joins, where, group-by and order-by go back to one empty default entry."""
        state = actions.select_columns(joined_state, 0, ["CategoryName"], catalog)
        state = actions.add_join_row(state)
        state = actions.set_where_column(state, 0, "Products.Price")
        state = actions.set_where_value(state, 0, "5")
        state = actions.add_where_condition(state)
        state = actions.set_group_by(state, "Categories.CategoryName")
        state = actions.set_order(state, "Products.Price", "DESC")
        state = actions.set_limit(state, 10)

        state = actions.select_table(state, 1, "Orders")

        defaults = BuilderState()
        assert state.joins == defaults.joins
        assert state.where == defaults.where
        assert state.group_by == ""
        assert state.order_by == defaults.order_by
        # Other rows and paging survive
        assert state.tables[0].columns == ("CategoryName",)
        assert state.limit == 10

    def test_row_index_out_of_range(self) -> None:
        with pytest.raises(RowIndexError) as exc_info:
            actions.select_table(actions.new_state(), 3, "Orders")
        assert exc_info.value.size == 1


class TestJoinActions:
    """Editing join rows."""

    def test_set_endpoints(self, joined_state: BuilderState) -> None:
        join = joined_state.joins[0]
        assert (join.table1, join.column1) == ("Categories", "CategoryID")
        assert (join.table2, join.column2) == ("Products", "CategoryID")
        assert join.is_complete

    def test_clear_endpoint(self, joined_state: BuilderState) -> None:
        state = actions.set_join_endpoint(joined_state, 0, 2, "")
        assert state.joins[0].table2 == ""
        assert state.joins[0].column2 == ""
        assert not state.joins[0].has_endpoints

    def test_endpoint_must_be_qualified(self, joined_state: BuilderState) -> None:
        with pytest.raises(InvalidSelectionError):
            actions.set_join_endpoint(joined_state, 0, 1, "CategoryID")

    def test_set_join_type(self, joined_state: BuilderState) -> None:
        state = actions.set_join_type(joined_state, 0, "LEFT")
        assert state.joins[0].type == JoinType.LEFT

    def test_clear_join_type(self, joined_state: BuilderState) -> None:
        state = actions.set_join_type(joined_state, 0, None)
        assert state.joins[0].type is None
        assert state.joins[0].has_endpoints
        assert not state.joins[0].is_complete

    def test_add_join_row(self) -> None:
        state = actions.add_join_row(actions.new_state())
        assert len(state.joins) == 2
        with pytest.raises(RowIndexError):
            actions.set_join_type(state, 2, "FULL")


class TestWhereActions:
    """Editing where-conditions."""

    def test_null_operator_clears_value(self) -> None:
        state = actions.set_where_column(actions.new_state(), 0, "Orders.Quantity")
        state = actions.set_where_value(state, 0, "3")
        state = actions.set_where_operator(state, 0, "IS NULL")
        assert state.where[0].column2 == ""
        assert state.where[0].operator == WhereOperator.IS_NULL

    def test_non_null_operator_keeps_value(self) -> None:
        state = actions.set_where_value(actions.new_state(), 0, "3")
        state = actions.set_where_operator(state, 0, ">=")
        assert state.where[0].column2 == "3"

    def test_unknown_operator_rejected(self) -> None:
        with pytest.raises(ValueError):
            actions.set_where_operator(actions.new_state(), 0, "LIKE")

    @pytest.mark.parametrize("value", ["-1", "-20abc", " -3", "-7²"])
    def test_negative_number_value_discarded(self, value: str) -> None:
        state = actions.set_where_value(actions.new_state(), 0, value)
        assert state.where[0].column2 == ""

    @pytest.mark.parametrize("value", ["0", "42", "abc", "'-1'", "2024-01-01", "²", "-²", "-٣"])
    def test_other_values_kept(self, value: str) -> None:
        state = actions.set_where_value(actions.new_state(), 0, value)
        assert state.where[0].column2 == value


class TestPagingActions:
    """Limit and offset input rules."""

    def test_set_limit(self) -> None:
        assert actions.set_limit(actions.new_state(), 10).limit == 10

    @pytest.mark.parametrize("limit", [0, -5])
    def test_non_positive_limit_rejected(self, limit: int) -> None:
        with pytest.raises(InvalidLimitError):
            actions.set_limit(actions.new_state(), limit)

    def test_offset_within_limit(self) -> None:
        state = actions.set_limit(actions.new_state(), 10)
        assert actions.set_offset(state, 0).offset == 0
        assert actions.set_offset(state, 10).offset == 10

    def test_offset_above_limit_rejected(self) -> None:
        state = actions.set_limit(actions.new_state(), 10)
        with pytest.raises(InvalidOffsetError):
            actions.set_offset(state, 11)

    def test_negative_offset_rejected(self) -> None:
        state = actions.set_limit(actions.new_state(), 10)
        with pytest.raises(InvalidOffsetError):
            actions.set_offset(state, -1)

    def test_offset_requires_limit(self) -> None:
        with pytest.raises(InvalidOffsetError, match="Set a limit"):
            actions.set_offset(actions.new_state(), 0)

    def test_lowering_limit_below_offset_clears_offset(self) -> None:
        state = actions.set_offset(actions.set_limit(actions.new_state(), 10), 8)
        state = actions.set_limit(state, 5)
        assert state.limit == 5
        assert state.offset is None

    def test_clearing_limit_clears_offset(self) -> None:
        state = actions.set_offset(actions.set_limit(actions.new_state(), 10), 3)
        state = actions.set_limit(state, None)
        assert state.offset is None

    def test_order_direction(self) -> None:
        state = actions.set_order_by(actions.new_state(), "Products.Price")
        state = actions.set_order_direction(state, "DESC")
        assert state.order_by.column == "Products.Price"
        assert state.order_by.direction == SortDirection.DESC
