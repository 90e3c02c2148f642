"""
sheetmap/resolution.py — Decides the value of one mapped column per direction.

Precedence, highest first, identical for read and write:

  ignored   : ignore_read / ignore_write set: nothing is read or written.
  resolver  : read_using(row) / write_using(owner).
  constant  : constant_read / constant_write, whatever the live value is.
  default   : live value absent (None or "") and a default is set.
  value     : the live value as-is.

The live value is the cell for reads (index first, then header name, then the
attribute name as header) and the attribute for writes. A read whose column is
missing from the row raises COLUMN_NOT_FOUND unless default_read is set, in
which case the default is used. A resolver set together with a constant or
default is not a conflict; the resolver wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional, Union

from .errors import AppError, COLUMN_NOT_FOUND
from .models import PropertyMapData
from .reader_row import ReaderRow, is_occupied

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    READ = "read"
    WRITE = "write"


ResolutionSource = Literal["ignored", "resolver", "constant", "default", "value"]


@dataclass
class Resolution:
    source: ResolutionSource
    value: Any = None

    @property
    def skipped(self) -> bool:
        return self.source == "ignored"


def _with_default(live: Any, default: Any) -> Resolution:
    if not is_occupied(live) and default is not None:
        return Resolution("default", default)
    return Resolution("value", live)


# ---- Column targeting ----

def read_column_key(data: PropertyMapData) -> Optional[Union[int, str]]:
    """
    The column a read looks at: index_read, else name_read, else the attribute
    name used as header. None when nothing identifies a column.
    """
    if data.index_read is not None:
        return data.index_read
    if data.name_read is not None:
        return data.name_read
    return data.property_name


def write_header(data: PropertyMapData) -> Optional[str]:
    """Header text emitted for the column: name_write, else the attribute name."""
    if data.name_write is not None:
        return data.name_write
    return data.property_name


def write_index(data: PropertyMapData) -> Optional[int]:
    return data.index_write


def is_ignored(data: PropertyMapData, direction: Direction) -> bool:
    return data.ignore_read if Direction(direction) is Direction.READ else data.ignore_write


# ---- Resolution ----

def _read_cell(data: PropertyMapData, row: ReaderRow) -> Any:
    if data.index_read is not None:
        return row.get_value(data.index_read)
    key = read_column_key(data)
    if key is None:
        return None
    return row.get_value_by_name(key)


def resolve_read(data: PropertyMapData, row: ReaderRow) -> Resolution:
    if data.ignore_read:
        result = Resolution("ignored")
    elif data.read_using is not None:
        result = Resolution("resolver", data.read_using(row))
    elif data.constant_read is not None:
        result = Resolution("constant", data.constant_read)
    else:
        try:
            live = _read_cell(data, row)
        except AppError as e:
            # a missing column counts as an absent value when a default exists
            if e.code != COLUMN_NOT_FOUND or data.default_read is None:
                raise
            live = None
        result = _with_default(live, data.default_read)

    logger.debug("read %s row=%s -> %s", data.property_name, row.row_number, result.source)
    return result


def resolve_write(data: PropertyMapData, owner: Any) -> Resolution:
    if data.ignore_write:
        result = Resolution("ignored")
    elif data.write_using is not None:
        result = Resolution("resolver", data.write_using(owner))
    elif data.constant_write is not None:
        result = Resolution("constant", data.constant_write)
    else:
        live = data.property_info.get(owner) if data.property_info else None
        result = _with_default(live, data.default_write)

    logger.debug("write %s -> %s", data.property_name, result.source)
    return result


def resolve(data: PropertyMapData, direction: Direction, source: Any) -> Resolution:
    """Dispatch on direction: source is a ReaderRow for READ, the owner for WRITE."""
    if Direction(direction) is Direction.READ:
        return resolve_read(data, source)
    return resolve_write(data, source)
