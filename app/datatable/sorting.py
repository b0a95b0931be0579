# datatable/sorting.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

import numpy as np

from .cell_values import is_missing, get_cell, is_sequence_cell


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortEntry:
    prop: str
    dir: SortDirection = SortDirection.ASC

    def to_dict(self) -> Dict[str, str]:
        return {"prop": self.prop, "dir": self.dir.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SortEntry":
        return cls(prop=str(data["prop"]), dir=SortDirection(data.get("dir", "asc")))


SortDefinition = List[SortEntry]


def create_sorting_definition(prop: str) -> SortDefinition:
    return [SortEntry(prop=prop, dir=SortDirection.ASC)]


def _sort_key(value: Any):
    if isinstance(value, np.generic):
        value = value.item()
    # Numbers before text so mixed columns still compare; bools count as numbers.
    if is_sequence_cell(value):
        value = ", ".join(str(v) for v in value)
    if isinstance(value, (bool, int, float)):
        return (0, value, "")
    return (1, 0, str(value).lower())


def sort_rows(rows: Sequence[Dict[str, Any]], sorts: Sequence[SortEntry]) -> List[Dict[str, Any]]:
    """Stable multi-key sort; missing values always end up last."""
    result = list(rows)
    for entry in reversed(list(sorts)):
        present = [r for r in result if not is_missing(get_cell(r, entry.prop))]
        missing = [r for r in result if is_missing(get_cell(r, entry.prop))]
        present.sort(key=lambda r: _sort_key(get_cell(r, entry.prop)),
                     reverse=entry.dir == SortDirection.DESC)
        result = present + missing
    return result
