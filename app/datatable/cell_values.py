# datatable/cell_values.py
import math
from typing import Any, Callable, List, Mapping, Optional

import numpy as np
import pandas as pd

_MISSING = object()


def get_cell(row: Mapping[str, Any], prop: str, default: Any = None) -> Any:
    """
    Looks up `prop` in a row. A direct key wins; otherwise a dotted prop is
    walked as a nested path ("owner.name" -> row["owner"]["name"]).
    """
    if not isinstance(row, Mapping):
        return default
    value = row.get(prop, _MISSING)
    if value is not _MISSING:
        return value
    if "." not in prop:
        return default
    current: Any = row
    for part in prop.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if is_sequence_cell(value) or isinstance(value, Mapping):
        return False
    try:
        return bool(pd.isna(value))
    except (ValueError, TypeError):
        return False


def _format_float(value: float) -> str:
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def cell_to_text(value: Any) -> Optional[str]:
    """Canonical text of a scalar cell, or None for missing values."""
    if isinstance(value, np.generic):
        value = value.item()
    if is_missing(value):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, pd.Timestamp):
        return value.strftime('%Y-%m-%d %H:%M:%S')
    return str(value)


def is_sequence_cell(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray, pd.Series))


def cell_texts(value: Any, pipe: Optional[Callable[[Any], Any]] = None) -> List[str]:
    """
    All searchable texts of a cell. Array cells yield one text per element so
    that each element is compared on its own.
    """
    if pipe is not None:
        value = pipe(value)
    if is_sequence_cell(value):
        items = value.tolist() if isinstance(value, (np.ndarray, pd.Series)) else value
        texts = []
        for item in items:
            text = cell_to_text(item)
            if text is not None:
                texts.append(text)
        return texts
    text = cell_to_text(value)
    return [] if text is None else [text]


def display_text(value: Any, pipe: Optional[Callable[[Any], Any]] = None) -> str:
    """Text shown in the grid; array cells are joined with ', '."""
    texts = cell_texts(value, pipe)
    return ", ".join(texts)
