# datatable/filter_engine.py
import logging
from typing import Any, Dict, List, Sequence

from .columns import TableColumn
from .matcher import QueryToken, parse_token, token_matches
from .tokenizer import prepare_search

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def compile_query(search: str) -> List[QueryToken]:
    return [parse_token(token) for token in prepare_search(search)]


def filter_rows(data: Sequence[Row], search: str, columns: Sequence[TableColumn]) -> List[Row]:
    """
    Returns the rows of `data` matching every token of `search`. The input
    sequence is never modified; an empty query returns a copy of all rows.
    """
    tokens = compile_query(search)
    if not tokens:
        return list(data)
    result = [row for row in data if all(token_matches(t, row, columns) for t in tokens)]
    logger.debug(f"Filter '{search}' ({len(tokens)} tokens) matched {len(result)} of {len(data)} rows.")
    return result
