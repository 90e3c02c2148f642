"""Tests for sheetmap.reader_row — lookups by index, letters and header name."""
from __future__ import annotations

import pytest
from openpyxl import Workbook

from sheetmap.errors import AppError, BAD_COLUMN, COLUMN_NOT_FOUND
from sheetmap.reader_row import ReaderRow, is_occupied


HEADERS = ["Name", " Age ", "City"]


def _row(values=None):
    return ReaderRow(values if values is not None else ["Ann", 31, "Oslo"], headers=HEADERS, row_number=2)


def test_is_occupied():
    assert is_occupied(0)
    assert is_occupied(False)
    assert is_occupied(" ")
    assert not is_occupied(None)
    assert not is_occupied("")


def test_get_value_one_based():
    row = _row()
    assert row.get_value(1) == "Ann"
    assert row.get_value(3) == "Oslo"


@pytest.mark.parametrize("bad", [0, -1, True, "1"])
def test_get_value_rejects_bad_index(bad):
    with pytest.raises(AppError) as ei:
        _row().get_value(bad)
    assert ei.value.code == BAD_COLUMN


def test_get_value_past_width_is_not_found():
    with pytest.raises(AppError) as ei:
        _row().get_value(4)
    assert ei.value.code == COLUMN_NOT_FOUND
    assert ei.value.details["row"] == 2


def test_ragged_row_reads_none_inside_header_width():
    row = _row(["Bob"])
    assert row.get_value(3) is None
    assert row.get_value_by_name("City") is None
    assert len(row) == 3


def test_get_value_by_name_strips_headers():
    row = _row()
    assert row.get_value_by_name("Age") == 31
    assert row.get_value_by_name(" Age") == 31


def test_get_value_by_name_missing():
    with pytest.raises(AppError) as ei:
        _row().get_value_by_name("Email")
    assert ei.value.code == COLUMN_NOT_FOUND


def test_duplicate_header_first_wins():
    row = ReaderRow(["a", "b"], headers=["X", "X"])
    assert row.get_value_by_name("X") == "a"


def test_get_value_by_letter():
    assert _row().get_value_by_letter("c") == "Oslo"


def test_getitem_dispatch():
    row = _row()
    assert row[2] == 31
    assert row["City"] == "Oslo"
    assert row["A"] == "Ann"


def test_getitem_header_takes_priority_over_letters():
    row = ReaderRow([1, 2], headers=["B", "A"])
    assert row["A"] == 2
    assert row["B"] == 1


def test_getitem_unknown_name_is_not_found():
    row = _row()
    with pytest.raises(AppError) as ei:
        row["Post code"]
    assert ei.value.code == COLUMN_NOT_FOUND
    with pytest.raises(AppError) as ei:
        row["ZZ"]
    assert ei.value.code == COLUMN_NOT_FOUND


def test_values_and_headers_are_copies():
    row = _row()
    row.values.append("x")
    row.headers.append("y")
    assert row.values == ["Ann", 31, "Oslo"]
    assert row.headers == ["Name", "Age", "City"]


def test_from_cells_uses_openpyxl_cells():
    wb = Workbook()
    ws = wb.active
    ws.append(["Name", "Age"])
    ws.append(["Cy", 40])

    header_cells, data_cells = list(ws.iter_rows(min_row=1, max_row=2))
    headers = [c.value for c in header_cells]
    row = ReaderRow.from_cells(data_cells, headers=headers)

    assert row.row_number == 2
    assert row["Age"] == 40
    assert row.get_value(1) == "Cy"


def test_from_cells_accepts_plain_values():
    row = ReaderRow.from_cells(("x", None, 3))
    assert row.row_number is None
    assert row.values == ["x", None, 3]
    assert row.get_value(3) == 3
