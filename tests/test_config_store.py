import pytest
from PyQt5.QtCore import QSettings

from datatable.config_store import MemoryConfigStore, QSettingsConfigStore


@pytest.fixture
def qsettings_store(qapp, tmp_path):
    settings = QSettings(str(tmp_path / "tables.ini"), QSettings.IniFormat)
    return QSettingsConfigStore(settings=settings)


@pytest.fixture(params=["memory", "qsettings"])
def any_store(request):
    if request.param == "memory":
        return MemoryConfigStore()
    return request.getfixturevalue("qsettings_store")


def test_get_missing_key(any_store):
    assert any_store.get("hosts") is None


def test_set_get_remove(any_store):
    any_store.set("hosts", '{"limit": 5}')
    assert any_store.get("hosts") == '{"limit": 5}'
    any_store.remove("hosts")
    assert any_store.get("hosts") is None


def test_last_write_wins(any_store):
    any_store.set("hosts", "1")
    any_store.set("hosts", "2")
    assert any_store.get("hosts") == "2"


def test_clear(any_store):
    any_store.set("hosts", "1")
    any_store.set("pools", "2")
    any_store.clear()
    assert any_store.get("hosts") is None
    assert any_store.get("pools") is None


def test_qsettings_store_survives_reopening(qapp, tmp_path):
    path = str(tmp_path / "tables.ini")
    QSettingsConfigStore(settings=QSettings(path, QSettings.IniFormat)).set("hosts", '{"limit": 5}')
    reopened = QSettingsConfigStore(settings=QSettings(path, QSettings.IniFormat))
    assert reopened.get("hosts") == '{"limit": 5}'


def test_qsettings_store_keeps_other_groups(qapp, tmp_path):
    settings = QSettings(str(tmp_path / "tables.ini"), QSettings.IniFormat)
    settings.setValue("window/geometry", "x")
    store = QSettingsConfigStore(settings=settings)
    store.set("hosts", "1")
    store.clear()
    assert settings.value("window/geometry") == "x"


def test_qsettings_store_keeps_json_with_commas_intact(qsettings_store):
    snapshot = '{"sorts": [{"prop": "a", "dir": "asc"}], "columns": [], "search": "a, b", "limit": 10}'
    qsettings_store.set("hosts", snapshot)
    assert qsettings_store.get("hosts") == snapshot
