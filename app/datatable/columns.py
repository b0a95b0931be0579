# datatable/columns.py
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class TableColumn:
    prop: str
    name: str
    flex_grow: Optional[int] = None
    resizeable: Optional[bool] = None
    is_hidden: bool = False
    pipe: Optional[Callable[[Any], Any]] = None
    cell_transformation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableColumn":
        return cls(
            prop=str(data["prop"]),
            name=str(data.get("name", data["prop"])),
            flex_grow=data.get("flexGrow", data.get("flex_grow")),
            resizeable=data.get("resizeable"),
            is_hidden=bool(data.get("isHidden", data.get("is_hidden", False))),
            pipe=data.get("pipe"),
            cell_transformation=data.get("cellTransformation", data.get("cell_transformation")),
        )


def init_column_layout(columns: Sequence[TableColumn], identifier: str) -> None:
    # The identifier column is usually narrow, everything else gets twice the room.
    for column in columns:
        if not column.flex_grow:
            column.flex_grow = 1 if column.prop == identifier else 2
        if not column.resizeable:
            column.resizeable = False
    logger.debug(f"Column layout initialised: {[(c.prop, c.flex_grow) for c in columns]}")


def visible_columns(columns: Sequence[TableColumn]) -> List[TableColumn]:
    return [c for c in columns if not c.is_hidden]


def find_column(columns: Sequence[TableColumn], prop: str) -> Optional[TableColumn]:
    for column in columns:
        if column.prop == prop:
            return column
    return None
