import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from datatable.columns import TableColumn
from datatable.config_store import MemoryConfigStore
from datatable.table_controller import TableController


def create_fake_data(n):
    return [{"a": i, "b": i * 10, "c": bool(i % 2)} for i in range(n)]


@pytest.fixture
def fake_data():
    """Factory for rows {a: i, b: 10 * i, c: i is odd}."""
    return create_fake_data


@pytest.fixture
def columns():
    return [
        TableColumn(prop="a", name="Index"),
        TableColumn(prop="b", name="Index times ten"),
        TableColumn(prop="c", name="Odd?"),
    ]


@pytest.fixture
def store():
    return MemoryConfigStore()


@pytest.fixture
def controller(qapp, columns, store, fake_data):
    ctrl = TableController(columns, data=fake_data(10), store=store)
    yield ctrl
    ctrl.stop_auto_reload()
