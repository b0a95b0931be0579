# datatable/tokenizer.py
import re
from typing import List

QUOTED_SPAN_RE = re.compile(r"""['"]([^'"]+)['"]""")
WHITESPACE_RE = re.compile(r"\s")


def _encode_quoted_span(match: "re.Match") -> str:
    inner = match.group(1).replace(",", "")
    return WHITESPACE_RE.sub("+", inner)


def prepare_search(raw: str) -> List[str]:
    """
    Splits a search string into query tokens.

    Quoted spans ('...' or "...") keep their words together: the quotes are
    dropped and every whitespace character inside becomes a '+'. Outside of
    quotes commas are simply deleted and runs of whitespace separate tokens.

    >>> prepare_search('a,,,+++b,,,     c')
    ['a+++b', 'c']
    >>> prepare_search('"a b c"   "d e  f", "g, h i"')
    ['a+b+c', 'd+e++f', 'g+h+i']
    """
    if not raw:
        return []
    encoded = QUOTED_SPAN_RE.sub(_encode_quoted_span, raw)
    encoded = encoded.replace(",", "")
    return [token for token in encoded.split() if token]
