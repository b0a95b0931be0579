# datatable/config_store.py
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from PyQt5.QtCore import QSettings

logger = logging.getLogger(__name__)


class ConfigStore(ABC):
    """Key/value store for serialized table configurations."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class MemoryConfigStore(ConfigStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class QSettingsConfigStore(ConfigStore):
    """
    Stores table configurations in a QSettings group so they survive restarts.
    Pass an existing QSettings (e.g. an INI file) or an organization/application pair.
    """

    def __init__(self, organization: str = "DataTable", application: str = "TableConfig",
                 group: str = "tables", settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings(organization, application)
        self._group = group

    def _key(self, key: str) -> str:
        return f"{self._group}/{key}"

    def get(self, key: str) -> Optional[str]:
        value = self._settings.value(self._key(key), None)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(self._key(key), value)
        self._settings.sync()

    def remove(self, key: str) -> None:
        self._settings.remove(self._key(key))
        self._settings.sync()

    def clear(self) -> None:
        logger.info(f"Clearing all stored table configurations in group '{self._group}'.")
        self._settings.remove(self._group)
        self._settings.sync()
