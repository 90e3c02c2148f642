\
from __future__ import annotations

import re
from typing import Union

from .errors import AppError, BAD_COLUMN


_COL_RE = re.compile(r"^[A-Z]+$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_COLUMN, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise AppError(BAD_COLUMN, f"Bad column index: {n!r}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def parse_column_ref(ref: Union[int, str]) -> int:
    """
    Accept a 1-based int or column letters ('C', ' aa ') and return the 1-based index.
    """
    if isinstance(ref, bool):
        raise AppError(BAD_COLUMN, f"Bad column reference: {ref!r}")
    if isinstance(ref, int):
        if ref <= 0:
            raise AppError(BAD_COLUMN, f"Column index must be >= 1: {ref!r}")
        return ref
    if isinstance(ref, str):
        return col_letters_to_index(ref)
    raise AppError(BAD_COLUMN, f"Bad column reference: {ref!r}")
