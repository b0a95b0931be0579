# datatable/selection.py
import copy
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class UpdateSelectionPolicy(Enum):
    ON_CHANGE = "onChange"
    ALWAYS = "always"
    NEVER = "never"


class TableSelection:
    def __init__(self, selected: Optional[List[Dict[str, Any]]] = None):
        self.selected: List[Dict[str, Any]] = list(selected or [])
        self.has_selection = False
        self.has_single_selection = False
        self.has_multi_selection = False
        self.update()

    def update(self) -> None:
        count = len(self.selected)
        self.has_selection = count > 0
        self.has_single_selection = count == 1
        self.has_multi_selection = count > 1

    def first(self) -> Optional[Dict[str, Any]]:
        return self.selected[0] if self.selected else None

    def clone(self) -> "TableSelection":
        return TableSelection(copy.deepcopy(self.selected))

    def __repr__(self) -> str:
        return f"TableSelection(selected={len(self.selected)})"


def reselect_rows(selected: Sequence[Dict[str, Any]], data: Sequence[Dict[str, Any]],
                  identifier: str) -> List[Dict[str, Any]]:
    """Current rows carrying the same identifier value as each selected row."""
    result = []
    for item in selected:
        key = item.get(identifier)
        for row in data:
            if row.get(identifier) == key:
                result.append(row)
    return result
