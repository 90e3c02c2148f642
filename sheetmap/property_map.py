"""
sheetmap/property_map.py — Fluent builder for one attribute-to-column mapping.

Every call mutates the underlying PropertyMapData and returns the same builder,
so calls chain:

    PropertyMap(accessor).name("Age").default_read(0).ignore_write()

Unified calls (constant, default, ignore, index, name) write the unified field
and both direction fields. Direction calls (*_read / *_write) write only their
own field, so the last call for a direction wins and the unified field keeps
whatever the last unified call set.

Validation happens before any field is touched: a rejected call leaves the
record exactly as it was.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from .errors import (
    AppError,
    BAD_COLUMN,
    BAD_FLAG,
    BAD_INDEX,
    BAD_NAME,
    BAD_RESOLVER,
    BAD_STYLE,
    BAD_COLUMN_TYPE,
)
from .models import ColumnStyle, ColumnType, PropertyAccessor, PropertyMapData
from .parsing import parse_column_ref
from .reader_row import ReaderRow

logger = logging.getLogger(__name__)


class PropertyMap:
    def __init__(self, property_info: Optional[PropertyAccessor] = None):
        self.property_data = PropertyMapData(property_info=property_info)

    def __repr__(self) -> str:
        return f"PropertyMap({self.property_data.property_name!r})"

    # ---------- Validation helpers ----------

    def _details(self, **extra: Any):
        details = {"property": self.property_data.property_name}
        details.update(extra)
        return details

    def _checked_index(self, index: Union[int, str]) -> int:
        if isinstance(index, bool) or not isinstance(index, (int, str)):
            raise AppError(BAD_INDEX, f"Column index must be an int: {index!r}", self._details(value=index))
        try:
            return parse_column_ref(index)
        except AppError as e:
            if e.code != BAD_COLUMN:
                raise
            raise AppError(BAD_INDEX, e.message, self._details(value=index))

    def _checked_name(self, name: str) -> str:
        if not isinstance(name, str) or not name.strip():
            raise AppError(BAD_NAME, f"Column name must be non-empty text: {name!r}", self._details(value=name))
        return name

    def _checked_flag(self, value: Any) -> bool:
        # "false" would be truthy
        if not isinstance(value, bool):
            raise AppError(BAD_FLAG, f"Ignore flag must be True or False: {value!r}", self._details(value=value))
        return value

    def _checked_resolver(self, fn: Any, which: str) -> Callable[[Any], Any]:
        if not callable(fn):
            raise AppError(BAD_RESOLVER, f"{which} needs a callable, got {type(fn).__name__}", self._details())
        return fn

    def _log(self, field: str, value: Any) -> None:
        logger.debug("map %s: %s=%r", self.property_data.property_name, field, value)

    # ---------- Column type / style ----------

    def column_type(self, column_type: Union[ColumnType, str]) -> "PropertyMap":
        """Set the column type for both read and write operations."""
        try:
            value = ColumnType.coerce(column_type)
        except AppError as e:
            raise AppError(BAD_COLUMN_TYPE, e.message, self._details(value=column_type))
        self.property_data.column_type = value
        self._log("column_type", value)
        return self

    def style(self, column_style: ColumnStyle) -> "PropertyMap":
        """Set the column style used when writing."""
        if not isinstance(column_style, ColumnStyle):
            raise AppError(BAD_STYLE, f"Expected ColumnStyle, got {type(column_style).__name__}", self._details())
        self.property_data.style = column_style
        self._log("style", column_style)
        return self

    # ---------- Constants ----------

    def constant(self, value: Any) -> "PropertyMap":
        """
        Use a fixed value for both directions. When reading, the value should
        match the attribute's type; a mismatch shows up later as a conversion
        error in the engine, not here.
        """
        data = self.property_data
        data.constant = value
        data.constant_read = value
        data.constant_write = value
        self._log("constant", value)
        return self

    def constant_read(self, value: Any) -> "PropertyMap":
        self.property_data.constant_read = value
        self._log("constant_read", value)
        return self

    def constant_write(self, value: Any) -> "PropertyMap":
        self.property_data.constant_write = value
        self._log("constant_write", value)
        return self

    # ---------- Defaults ----------

    def default(self, value: Any) -> "PropertyMap":
        """Value substituted when the source value is absent, for both directions."""
        data = self.property_data
        data.default = value
        data.default_read = value
        data.default_write = value
        self._log("default", value)
        return self

    def default_read(self, value: Any) -> "PropertyMap":
        self.property_data.default_read = value
        self._log("default_read", value)
        return self

    def default_write(self, value: Any) -> "PropertyMap":
        self.property_data.default_write = value
        self._log("default_write", value)
        return self

    # ---------- Ignore flags ----------

    def ignore(self, value: bool = True) -> "PropertyMap":
        """Skip the attribute in both directions. Only True/False are accepted."""
        flag = self._checked_flag(value)
        data = self.property_data
        data.ignore = flag
        data.ignore_read = flag
        data.ignore_write = flag
        self._log("ignore", flag)
        return self

    def ignore_read(self, value: bool = True) -> "PropertyMap":
        flag = self._checked_flag(value)
        self.property_data.ignore_read = flag
        self._log("ignore_read", flag)
        return self

    def ignore_write(self, value: bool = True) -> "PropertyMap":
        flag = self._checked_flag(value)
        self.property_data.ignore_write = flag
        self._log("ignore_write", flag)
        return self

    # ---------- Column index (one-based) ----------

    def index(self, index: Union[int, str]) -> "PropertyMap":
        """Set the one-based column index ("C" is accepted as 3) for both directions."""
        n = self._checked_index(index)
        data = self.property_data
        data.index = n
        data.index_read = n
        data.index_write = n
        self._log("index", n)
        return self

    def index_read(self, index: Union[int, str]) -> "PropertyMap":
        n = self._checked_index(index)
        self.property_data.index_read = n
        self._log("index_read", n)
        return self

    def index_write(self, index: Union[int, str]) -> "PropertyMap":
        n = self._checked_index(index)
        self.property_data.index_write = n
        self._log("index_write", n)
        return self

    # ---------- Column header name ----------

    def name(self, name: str) -> "PropertyMap":
        """Set the column header text for both directions."""
        text = self._checked_name(name)
        data = self.property_data
        data.name = text
        data.name_read = text
        data.name_write = text
        self._log("name", text)
        return self

    def name_read(self, name: str) -> "PropertyMap":
        text = self._checked_name(name)
        self.property_data.name_read = text
        self._log("name_read", text)
        return self

    def name_write(self, name: str) -> "PropertyMap":
        text = self._checked_name(name)
        self.property_data.name_write = text
        self._log("name_write", text)
        return self

    # ---------- Custom resolvers ----------

    def read_using(self, resolver: Callable[[ReaderRow], Any]) -> "PropertyMap":
        """resolver(row) returns the value assigned to the attribute when reading."""
        self.property_data.read_using = self._checked_resolver(resolver, "read_using")
        self._log("read_using", resolver)
        return self

    def write_using(self, resolver: Callable[[Any], Any]) -> "PropertyMap":
        """resolver(owner) returns the value written to the cell."""
        self.property_data.write_using = self._checked_resolver(resolver, "write_using")
        self._log("write_using", resolver)
        return self
