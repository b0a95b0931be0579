import numpy as np
import pytest

from datatable.columns import TableColumn
from datatable.matcher import GlobalToken, ScopedToken, candidate_columns, matches, parse_token


@pytest.fixture
def row():
    return {"a": 5, "b": 50, "c": True}


class TestParseToken:
    def test_global_token_is_lower_cased(self):
        assert parse_token("FoO") == GlobalToken("foo")

    def test_scoped_token_splits_on_first_colon(self):
        assert parse_token("Time:12:30") == ScopedToken(key="time", value="12:30")

    def test_plus_decodes_to_space(self):
        assert parse_token("index+times+ten:20") == ScopedToken(key="index times ten", value="20")
        assert parse_token("two+words") == GlobalToken("two words")


class TestGlobalTokens:
    def test_number_matches_substring_of_any_column(self, columns, row):
        assert matches("5", row, columns)
        assert matches("50", row, columns)
        assert not matches("7", row, columns)

    def test_booleans_are_lower_case_words(self, columns, row):
        assert matches("true", row, columns)
        assert matches("TRUE", row, columns)
        assert not matches("false", row, columns)

    def test_missing_values_never_match(self, columns):
        row = {"a": None, "b": float("nan"), "c": False}
        assert not matches("none", row, columns)
        assert not matches("nan", row, columns)

    def test_numpy_scalars_stringify_like_python_values(self, columns):
        row = {"a": np.int64(7), "b": np.float64(70.0), "c": np.bool_(True)}
        assert matches("7", row, columns)
        assert matches("70", row, columns)
        assert not matches("70.0", row, columns)
        assert matches("true", row, columns)

    def test_only_given_columns_are_searched(self, columns):
        row = {"a": 1, "b": 10, "c": False, "hidden": "secret"}
        assert not matches("secret", row, columns)


class TestScopedTokens:
    def test_column_name_substring_selects_candidates(self, columns):
        assert [c.prop for c in candidate_columns("index", columns)] == ["a", "b"]
        assert [c.prop for c in candidate_columns("times", columns)] == ["b"]
        assert [c.prop for c in candidate_columns("DEX", columns)] == ["a", "b"]

    def test_value_is_matched_in_candidate_columns_only(self, columns, row):
        assert matches("times:50", row, columns)
        assert not matches("odd?:5", row, columns)
        assert matches("odd?:true", row, columns)

    def test_empty_value_always_matches(self, columns, row):
        assert matches("index:", row, columns)
        assert matches("nosuchcolumn:", row, columns)

    def test_unknown_column_does_not_match(self, columns, row):
        assert not matches("unknown:5", row, columns)


class TestArrayCells:
    @pytest.fixture
    def array_columns(self):
        return [TableColumn(prop="a", name="Index"), TableColumn(prop="b", name="ArrayColumn")]

    def test_elements_are_compared_independently(self, array_columns):
        row = {"a": 1, "b": ["foo", "bar"]}
        assert matches("bar", row, array_columns)
        assert matches("arraycolumn:foo", row, array_columns)
        assert not matches("arraycolumn:foo,bar", row, array_columns)
        assert not matches("arraycolumn:o+b", row, array_columns)

    def test_numeric_arrays_and_numpy_arrays(self, array_columns):
        assert matches("arraycolumn:2", {"a": 1, "b": [1, 2]}, array_columns)
        assert matches("arraycolumn:4", {"a": 2, "b": np.array([3, 4])}, array_columns)
        assert not matches("arraycolumn:5", {"a": 2, "b": np.array([3, 4])}, array_columns)


class TestColumnExtras:
    def test_pipe_is_applied_before_matching(self):
        columns = [TableColumn(prop="size", name="Size", pipe=lambda v: f"{v // 1024} KiB")]
        row = {"size": 4096}
        assert matches("kib", row, columns)
        assert matches("size:4+kib", row, columns)
        assert not matches("4096", row, columns)

    def test_dotted_prop_reads_nested_values(self):
        columns = [TableColumn(prop="owner.name", name="Owner")]
        assert matches("owner:alice", {"owner": {"name": "Alice"}}, columns)
        assert not matches("owner:bob", {"owner": {"name": "Alice"}}, columns)
