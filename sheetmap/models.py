\
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Dict, Optional, Union

from openpyxl.cell.cell import (
    TYPE_BOOL,
    TYPE_ERROR,
    TYPE_FORMULA,
    TYPE_INLINE,
    TYPE_NUMERIC,
    TYPE_STRING,
)
from openpyxl.styles import Alignment, Border, Font, NamedStyle, PatternFill, Protection

from .errors import AppError, BAD_COLUMN_TYPE, READ_ONLY_PROPERTY, UNKNOWN_PROPERTY


# ---- Column descriptors ----

class ColumnType(str, Enum):
    """
    Declared data type of a column. Values are openpyxl cell data_type codes,
    so an engine can compare them with cell.data_type directly.
    """
    BOOLEAN = TYPE_BOOL
    DATE = "d"                    # openpyxl stores datetimes with data_type "d"
    ERROR = TYPE_ERROR
    FORMULA = TYPE_FORMULA
    INLINE_STRING = TYPE_INLINE
    NUMBER = TYPE_NUMERIC
    STRING = TYPE_STRING

    @classmethod
    def coerce(cls, value: Union["ColumnType", str]) -> "ColumnType":
        """Accept a member, a data_type code ("n") or a member name ("number")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            s = value.strip()
            for member in cls:
                if member.value == s:
                    return member
            key = s.upper()
            if key in cls.__members__:
                return cls.__members__[key]
        raise AppError(BAD_COLUMN_TYPE, f"Unknown column type: {value!r}")


@dataclass
class ColumnStyle:
    """
    Presentation metadata applied by a writer to a whole column.
    Unset parts fall back to openpyxl defaults.
    """
    font: Optional[Font] = None
    fill: Optional[PatternFill] = None
    border: Optional[Border] = None
    alignment: Optional[Alignment] = None
    protection: Optional[Protection] = None
    number_format: Optional[str] = None
    width: Optional[float] = None

    def to_named_style(self, name: str) -> NamedStyle:
        return NamedStyle(
            name=name,
            font=self.font or Font(),
            fill=self.fill or PatternFill(),
            border=self.border or Border(),
            alignment=self.alignment or Alignment(),
            protection=self.protection or Protection(),
            number_format=self.number_format or "General",
        )


# ---- Property access ----

def _declares(target: type, name: str) -> bool:
    if dataclasses.is_dataclass(target):
        if any(f.name == name for f in dataclasses.fields(target)):
            return True
    for klass in getattr(target, "__mro__", ()):
        if name in getattr(klass, "__annotations__", {}):
            return True
    return hasattr(target, name)


@dataclass
class PropertyAccessor:
    """
    Getter/setter pair for one attribute of a target class, bound once when
    the mapping is created. setter is None for read-only properties.
    """
    name: str
    owner: Optional[type]
    getter: Callable[[Any], Any]
    setter: Optional[Callable[[Any, Any], None]]

    @classmethod
    def for_attribute(cls, target: type, name: str) -> "PropertyAccessor":
        if not isinstance(name, str) or not name.strip():
            raise AppError(UNKNOWN_PROPERTY, f"Bad attribute name: {name!r}",
                           {"target": getattr(target, "__qualname__", str(target))})
        if not _declares(target, name):
            raise AppError(
                UNKNOWN_PROPERTY,
                f"{target.__qualname__} has no attribute {name!r}",
                {"target": target.__qualname__, "property": name},
            )

        descriptor = getattr(target, name, None)
        read_only = isinstance(descriptor, property) and descriptor.fset is None

        def _set(obj: Any, value: Any) -> None:
            setattr(obj, name, value)

        return cls(
            name=name,
            owner=target,
            getter=attrgetter(name),
            setter=None if read_only else _set,
        )

    @property
    def read_only(self) -> bool:
        return self.setter is None

    def get(self, obj: Any) -> Any:
        return self.getter(obj)

    def set(self, obj: Any, value: Any) -> None:
        if self.setter is None:
            owner = self.owner.__qualname__ if self.owner else None
            raise AppError(
                READ_ONLY_PROPERTY,
                f"{self.name} has no setter",
                {"property": self.name, "target": owner},
            )
        self.setter(obj, value)


# ---- Mapping record ----

@dataclass
class PropertyMapData:
    """
    All configurable facets of one attribute-to-column association.

    Unified fields (constant, default, ignore, index, name) are written by the
    unified builder calls together with their _read/_write counterparts; the
    engine only consults the direction-specific fields. None means unset.
    """
    property_info: Optional[PropertyAccessor] = None
    column_type: Optional[ColumnType] = None

    constant: Any = None
    constant_read: Any = None
    constant_write: Any = None

    default: Any = None
    default_read: Any = None
    default_write: Any = None

    ignore: bool = False
    ignore_read: bool = False
    ignore_write: bool = False

    index: Optional[int] = None           # one-based
    index_read: Optional[int] = None
    index_write: Optional[int] = None

    name: Optional[str] = None
    name_read: Optional[str] = None
    name_write: Optional[str] = None

    style: Optional[ColumnStyle] = None
    read_using: Optional[Callable[[Any], Any]] = None
    write_using: Optional[Callable[[Any], Any]] = None

    @property
    def property_name(self) -> Optional[str]:
        return self.property_info.name if self.property_info else None

    def summary(self) -> Dict[str, Any]:
        """Direction-specific view, handy for logging and debugging."""
        return {
            "property": self.property_name,
            "read": {
                "index": self.index_read,
                "name": self.name_read,
                "ignore": self.ignore_read,
                "constant": self.constant_read,
                "default": self.default_read,
                "resolver": self.read_using is not None,
            },
            "write": {
                "index": self.index_write,
                "name": self.name_write,
                "ignore": self.ignore_write,
                "constant": self.constant_write,
                "default": self.default_write,
                "resolver": self.write_using is not None,
            },
        }
