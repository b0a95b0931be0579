# datatable/matcher.py
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Union

from .cell_values import cell_texts, get_cell
from .columns import TableColumn


@dataclass(frozen=True)
class GlobalToken:
    text: str


@dataclass(frozen=True)
class ScopedToken:
    key: str
    value: str


QueryToken = Union[GlobalToken, ScopedToken]


def _decode(fragment: str) -> str:
    # '+' is how the tokenizer keeps quoted whitespace inside one token.
    return fragment.replace("+", " ").lower()


def parse_token(token: str) -> QueryToken:
    if ":" in token:
        key, value = token.split(":", 1)
        return ScopedToken(key=_decode(key), value=_decode(value))
    return GlobalToken(text=_decode(token))


def _column_contains(row: Mapping[str, Any], column: TableColumn, needle: str) -> bool:
    for text in cell_texts(get_cell(row, column.prop), column.pipe):
        if needle in text.lower():
            return True
    return False


def candidate_columns(key: str, columns: Sequence[TableColumn]) -> List[TableColumn]:
    """Columns whose display name contains `key` anywhere, ignoring case."""
    key = key.lower()
    return [c for c in columns if key in c.name.lower()]


def token_matches(token: QueryToken, row: Mapping[str, Any], columns: Sequence[TableColumn]) -> bool:
    if isinstance(token, ScopedToken):
        if not token.value:
            return True
        return any(_column_contains(row, c, token.value) for c in candidate_columns(token.key, columns))
    return any(_column_contains(row, c, token.text) for c in columns)


def matches(token: str, row: Mapping[str, Any], columns: Sequence[TableColumn]) -> bool:
    """True if `row` satisfies a single raw search token."""
    return token_matches(parse_token(token), row, columns)
