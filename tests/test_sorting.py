import numpy as np
import pytest

from datatable.sorting import SortDirection, SortEntry, create_sorting_definition, sort_rows


def test_create_sorting_definition():
    assert create_sorting_definition("a") == [SortEntry(prop="a", dir=SortDirection.ASC)]


def test_sort_entry_dict_form():
    entry = SortEntry("b", SortDirection.DESC)
    assert entry.to_dict() == {"prop": "b", "dir": "desc"}
    assert SortEntry.from_dict({"prop": "b", "dir": "desc"}) == entry
    assert SortEntry.from_dict({"prop": "b"}).dir is SortDirection.ASC


class TestSortRows:
    def test_ascending_and_descending(self, fake_data):
        rows = list(reversed(fake_data(5)))
        assert [r["a"] for r in sort_rows(rows, create_sorting_definition("a"))] == [0, 1, 2, 3, 4]
        assert [r["a"] for r in sort_rows(rows, [SortEntry("a", SortDirection.DESC)])] == [4, 3, 2, 1, 0]

    def test_missing_values_go_last(self):
        rows = [{"v": None}, {"v": 2}, {"v": float("nan")}, {"v": 1}]
        result = sort_rows(rows, [SortEntry("v", SortDirection.DESC)])
        assert [r["v"] for r in result[:2]] == [2, 1]
        assert result[2]["v"] is None

    def test_multiple_keys_are_stable(self, fake_data):
        rows = fake_data(6)
        result = sort_rows(rows, [SortEntry("c", SortDirection.DESC), SortEntry("a", SortDirection.DESC)])
        assert [r["a"] for r in result] == [5, 3, 1, 4, 2, 0]

    def test_text_is_case_insensitive_and_after_numbers(self):
        rows = [{"v": "beta"}, {"v": "Alpha"}, {"v": 3}, {"v": np.int64(1)}]
        assert [r["v"] for r in sort_rows(rows, create_sorting_definition("v"))] == [1, 3, "Alpha", "beta"]

    def test_input_is_not_modified(self, fake_data):
        rows = list(reversed(fake_data(3)))
        sort_rows(rows, create_sorting_definition("a"))
        assert [r["a"] for r in rows] == [2, 1, 0]

    def test_empty_definition_keeps_order(self, fake_data):
        rows = list(reversed(fake_data(3)))
        assert sort_rows(rows, []) == rows
