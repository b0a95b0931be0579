import copy

import pytest

from datatable.columns import TableColumn
from datatable.filter_engine import compile_query, filter_rows
from datatable.matcher import GlobalToken, ScopedToken


def test_compile_query_parses_every_token():
    assert compile_query("foo 'Index times ten':20") == [
        GlobalToken("foo"), ScopedToken(key="index times ten", value="20")]


def test_empty_query_returns_a_copy(columns, fake_data):
    data = fake_data(3)
    result = filter_rows(data, "  ,, ", columns)
    assert result == data
    assert result is not data


def test_input_is_not_modified(columns, fake_data):
    data = fake_data(10)
    before = copy.deepcopy(data)
    filter_rows(data, "5", columns)
    assert data == before


def test_all_tokens_must_match(columns, fake_data):
    assert filter_rows(fake_data(10), "2 20 false", columns) == [{"a": 2, "b": 20, "c": False}]
    assert filter_rows(fake_data(10), "2 true", columns) == []


class TestControllerSearch:
    """Searching through TableController.update_filter."""

    def expect_search(self, controller, keyword, expected):
        controller.search = keyword
        controller.update_filter()
        assert controller.rows == expected
        controller.update_filter(True)

    def test_should_find_a_particular_number(self, controller):
        self.expect_search(controller, "5", [{"a": 5, "b": 50, "c": True}])
        self.expect_search(controller, "9", [{"a": 9, "b": 90, "c": True}])

    def test_should_find_boolean_values(self, controller, fake_data):
        rows = fake_data(10)
        self.expect_search(controller, "true", [r for r in rows if r["c"]])
        self.expect_search(controller, "false", [r for r in rows if not r["c"]])

    def test_should_search_for_multiple_values(self, controller):
        self.expect_search(controller, "2 20 false", [{"a": 2, "b": 20, "c": False}])
        self.expect_search(controller, "false 2", [{"a": 2, "b": 20, "c": False}])

    def test_should_filter_by_column(self, controller, fake_data):
        self.expect_search(controller, "index:5", [{"a": 5, "b": 50, "c": True}])
        self.expect_search(controller, "times:50", [{"a": 5, "b": 50, "c": True}])
        self.expect_search(controller, "times:50 index:5", [{"a": 5, "b": 50, "c": True}])
        self.expect_search(controller, "Odd?:true", [r for r in fake_data(10) if r["c"]])
        controller.data = fake_data(100)
        self.expect_search(controller, "index:1 odd:true times:110", [{"a": 11, "b": 110, "c": True}])

    def test_should_search_through_arrays(self, qapp, store):
        from datatable.table_controller import TableController
        controller = TableController([TableColumn("a", "Index"), TableColumn("b", "ArrayColumn")], store=store)
        controller.data = [{"a": 1, "b": ["foo", "bar"]}, {"a": 2, "b": ["baz", "bazinga"]}]
        self.expect_search(controller, "bar", [{"a": 1, "b": ["foo", "bar"]}])
        self.expect_search(controller, "arraycolumn:bar arraycolumn:foo", [{"a": 1, "b": ["foo", "bar"]}])
        self.expect_search(controller, "arraycolumn:baz arraycolumn:inga", [{"a": 2, "b": ["baz", "bazinga"]}])
        controller.data = [{"a": 1, "b": [1, 2]}, {"a": 2, "b": [3, 4]}]
        self.expect_search(controller, "arraycolumn:1 arraycolumn:2", [{"a": 1, "b": [1, 2]}])

    def test_should_search_with_spaces(self, controller):
        expected = [{"a": 2, "b": 20, "c": False}]
        self.expect_search(controller, "'Index times ten':20", expected)
        self.expect_search(controller, "index+times+ten:20", expected)
        self.expect_search(controller, '"Index times ten":20', expected)

    def test_should_filter_results_although_column_name_is_incomplete(self, controller, fake_data):
        controller.data = fake_data(3)
        self.expect_search(controller, "'Index times ten'", [])
        self.expect_search(controller, "'Ind'", [])
        self.expect_search(controller, "'Ind:'", fake_data(3))

    def test_should_search_if_column_name_is_incomplete(self, controller, fake_data):
        controller.data = fake_data(3)
        self.expect_search(controller, "inde", [])
        self.expect_search(controller, "index:", fake_data(3))
        self.expect_search(controller, "index times te", [])

    def test_should_restore_full_table_after_search(self, controller):
        controller.use_data()
        assert len(controller.rows) == 10
        controller.search = "3"
        controller.update_filter()
        assert len(controller.rows) == 1
        controller.update_filter(True)
        assert len(controller.rows) == 10
        assert controller.search == ""

    def test_restore_is_idempotent_and_keeps_data(self, controller, fake_data):
        controller.update_filter(True)
        controller.update_filter(True)
        assert controller.rows == fake_data(10)
        assert controller.data == fake_data(10)
        assert controller.rows is not controller.data

    def test_search_only_looks_at_visible_columns(self, controller):
        controller.initialize()
        assert controller.toggle_column("b", False)
        controller.set_search("50")
        assert controller.rows == []
        controller.set_search("5")
        assert controller.rows == [{"a": 5, "b": 50, "c": True}]

    def test_rows_changed_is_emitted(self, controller, qtbot):
        with qtbot.waitSignal(controller.rowsChanged, timeout=1000):
            controller.set_search("5")

    def test_search_is_persisted(self, controller, store):
        controller.initialize()
        controller.set_search("odd:true")
        assert controller.user_config.search == "odd:true"
        assert store.get(controller.table_name) == controller.user_config.to_json()
        controller.clear_search()
        assert controller.user_config.search == ""
