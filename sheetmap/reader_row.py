"""
sheetmap/reader_row.py — The row view handed to read resolvers.

A ReaderRow wraps one row of already-loaded cell values plus the header texts
of the sheet. Columns are addressed three ways:

  index    : one-based int, like the mapping record's index fields.
  letters  : Excel column letters ("A", "AC").
  name     : header text; first matching header wins.

Rows may be ragged (shorter than the header row). Reading a column inside the
header width but past the end of the row yields None, not an error.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Union

from .errors import AppError, BAD_COLUMN, COLUMN_NOT_FOUND
from .parsing import parse_column_ref


def is_occupied(value: Any) -> bool:
    """
    Single definition of a present cell value: None and "" are absent.
    """
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def _header_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class ReaderRow:
    def __init__(
        self,
        values: Sequence[Any],
        headers: Optional[Sequence[Any]] = None,
        row_number: Optional[int] = None,
    ):
        self._values: List[Any] = list(values)
        self._headers: List[str] = [_header_text(h) for h in (headers or [])]
        self.row_number = row_number

    @classmethod
    def from_cells(
        cls,
        cells: Iterable[Any],
        headers: Optional[Sequence[Any]] = None,
    ) -> "ReaderRow":
        """
        Build a row from openpyxl cells (ws.iter_rows()) or plain values
        (ws.iter_rows(values_only=True)). row_number comes from the first cell.
        """
        values = []
        row_number = None
        for cell in cells:
            if hasattr(cell, "value") and hasattr(cell, "row"):
                if row_number is None:
                    row_number = cell.row
                values.append(cell.value)
            else:
                values.append(cell)
        return cls(values, headers=headers, row_number=row_number)

    # ---------- Introspection ----------

    @property
    def values(self) -> List[Any]:
        return list(self._values)

    @property
    def headers(self) -> List[str]:
        return list(self._headers)

    @property
    def width(self) -> int:
        return max(len(self._values), len(self._headers))

    def __len__(self) -> int:
        return self.width

    def __repr__(self) -> str:
        return f"ReaderRow(row_number={self.row_number!r}, values={self._values!r})"

    def has_header(self, name: str) -> bool:
        return _header_text(name) in self._headers

    # ---------- Lookups ----------

    def get_value(self, index: int) -> Any:
        """One-based column index."""
        if isinstance(index, bool) or not isinstance(index, int) or index <= 0:
            raise AppError(BAD_COLUMN, f"Column index must be >= 1: {index!r}")
        if index > self.width:
            raise AppError(
                COLUMN_NOT_FOUND,
                f"Column {index} is past the end of the row",
                {"index": index, "width": self.width, "row": self.row_number},
            )
        pos = index - 1
        return self._values[pos] if pos < len(self._values) else None

    def get_value_by_letter(self, letters: str) -> Any:
        return self.get_value(parse_column_ref(letters))

    def get_value_by_name(self, name: str) -> Any:
        key = _header_text(name)
        try:
            pos = self._headers.index(key)
        except ValueError:
            raise AppError(
                COLUMN_NOT_FOUND,
                f"No column with header {name!r}",
                {"name": name, "row": self.row_number},
            )
        return self.get_value(pos + 1)

    def __getitem__(self, key: Union[int, str]) -> Any:
        """
        int -> one-based index; str -> header name, else column letters.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            return self.get_value(key)
        if isinstance(key, str):
            if self.has_header(key):
                return self.get_value_by_name(key)
            try:
                return self.get_value_by_letter(key)
            except AppError as e:
                if e.code != BAD_COLUMN:
                    raise
            raise AppError(
                COLUMN_NOT_FOUND,
                f"No column with header {key!r}",
                {"name": key, "row": self.row_number},
            )
        raise AppError(BAD_COLUMN, f"Bad column key: {key!r}")
