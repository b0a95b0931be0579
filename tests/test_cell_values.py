import math

import numpy as np
import pandas as pd
import pytest

from datatable.cell_values import cell_texts, cell_to_text, display_text, get_cell, is_missing


@pytest.mark.parametrize("value, expected", [
    (True, "true"),
    (False, "false"),
    (5, "5"),
    (50.0, "50"),
    (0.5, "0.5"),
    (-0.0, "0"),
    (1e21, "1e+21"),
    (math.inf, "Infinity"),
    ("Some Text", "Some Text"),
    (np.int32(7), "7"),
    (np.float64(2.5), "2.5"),
    (np.bool_(False), "false"),
    (pd.Timestamp("2024-01-02 03:04:05"), "2024-01-02 03:04:05"),
])
def test_cell_to_text(value, expected):
    assert cell_to_text(value) == expected


@pytest.mark.parametrize("value", [None, float("nan"), np.nan, pd.NA, pd.NaT])
def test_missing_values_have_no_text(value):
    assert is_missing(value)
    assert cell_to_text(value) is None
    assert cell_texts(value) == []


def test_sequences_yield_one_text_per_element():
    assert cell_texts(["foo", None, 2]) == ["foo", "2"]
    assert cell_texts(np.array([1.0, 2.5])) == ["1", "2.5"]
    assert cell_texts(("x",)) == ["x"]


def test_sequences_are_not_missing():
    assert not is_missing([None])
    assert not is_missing(np.array([1, 2]))


def test_pipe_runs_first():
    assert cell_texts(3, pipe=lambda v: [v, v * 2]) == ["3", "6"]


def test_display_text_joins_elements():
    assert display_text(["foo", "bar"]) == "foo, bar"
    assert display_text(None) == ""


class TestGetCell:
    def test_direct_key_wins(self):
        assert get_cell({"a.b": 1, "a": {"b": 2}}, "a.b") == 1

    def test_nested_path(self):
        assert get_cell({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_missing_path_gives_default(self):
        assert get_cell({"a": {"b": 2}}, "a.x") is None
        assert get_cell({"a": 1}, "a.b", default="-") == "-"
        assert get_cell(None, "a") is None
