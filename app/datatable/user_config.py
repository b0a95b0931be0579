# datatable/user_config.py
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .columns import TableColumn
from .config_store import ConfigStore
from .errors import InvalidSnapshotError
from .sorting import SortEntry

logger = logging.getLogger(__name__)


@dataclass
class ColumnState:
    prop: str
    is_hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"prop": self.prop, "isHidden": self.is_hidden}


@dataclass
class UserConfig:
    sorts: List[SortEntry] = field(default_factory=list)
    columns: List[ColumnState] = field(default_factory=list)
    search: str = ""
    limit: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sorts": [s.to_dict() for s in self.sorts],
            "columns": [c.to_dict() for c in self.columns],
            "search": self.search,
            "limit": self.limit,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: Optional["UserConfig"] = None) -> "UserConfig":
        """Builds a config from a decoded snapshot; absent keys fall back to `defaults`."""
        if not isinstance(data, dict):
            raise InvalidSnapshotError(f"Expected a JSON object, got {type(data).__name__}")
        base = defaults or cls()
        try:
            if "sorts" in data and data["sorts"] is not None:
                sorts = [SortEntry.from_dict(s) for s in data["sorts"]]
            else:
                sorts = list(base.sorts)
            if "columns" in data and data["columns"] is not None:
                columns = [ColumnState(prop=str(c["prop"]), is_hidden=bool(c.get("isHidden", False)))
                           for c in data["columns"]]
            else:
                columns = [ColumnState(c.prop, c.is_hidden) for c in base.columns]
            search = base.search if data.get("search") is None else str(data["search"])
            limit = int(data["limit"]) if data.get("limit") else base.limit
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidSnapshotError(f"Malformed table configuration: {e}") from e
        return cls(sorts=sorts, columns=columns, search=search, limit=max(1, limit))

    @classmethod
    def from_json(cls, text: str, defaults: Optional["UserConfig"] = None) -> "UserConfig":
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise InvalidSnapshotError(f"Stored table configuration is not valid JSON: {e}") from e
        return cls.from_dict(data, defaults)


def column_states(columns: Sequence[TableColumn]) -> List[ColumnState]:
    return [ColumnState(prop=c.prop, is_hidden=bool(c.is_hidden)) for c in columns]


def apply_column_states(columns: Sequence[TableColumn], states: Sequence[ColumnState]) -> None:
    """Copies stored hidden flags onto columns; props are matched exactly."""
    hidden_by_prop = {s.prop: s.is_hidden for s in states}
    for column in columns:
        if column.prop in hidden_by_prop:
            column.is_hidden = hidden_by_prop[column.prop]


class UserConfigPersistence:
    """Reads and writes the configuration of one table under its table name."""

    def __init__(self, store: ConfigStore, table_name: str):
        self.store = store
        self.table_name = table_name

    def load(self, defaults: UserConfig) -> Optional[UserConfig]:
        stored = self.store.get(self.table_name)
        if not stored:
            return None
        try:
            config = UserConfig.from_json(stored, defaults)
            logger.info(f"Restored user configuration for table '{self.table_name}'.")
            return config
        except InvalidSnapshotError as e:
            logger.warning(f"Ignoring stored configuration for table '{self.table_name}': {e}")
            return None

    def save(self, config: UserConfig) -> None:
        self.store.set(self.table_name, config.to_json())
        logger.debug(f"Saved user configuration for table '{self.table_name}': {config.to_dict()}")

    def forget(self) -> None:
        self.store.remove(self.table_name)
