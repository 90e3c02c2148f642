from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from .errors import AppError, DUPLICATE_COLUMN, MISSING_FIELD
from .models import PropertyAccessor, PropertyMapData
from .property_map import PropertyMap
from .reader_row import ReaderRow
from .resolution import (
    Direction,
    read_column_key,
    resolve_read,
    resolve_write,
    write_header,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _declared_names(target: type) -> List[str]:
    """Attribute names in declaration order: dataclass fields, else annotations."""
    if dataclasses.is_dataclass(target):
        return [f.name for f in dataclasses.fields(target)]
    names: List[str] = []
    for klass in reversed(getattr(target, "__mro__", ())):
        for name in getattr(klass, "__annotations__", {}):
            if not name.startswith("_") and name not in names:
                names.append(name)
    return names


class ClassMap(Generic[T]):
    """
    Mapping for every attribute of one target class. One PropertyMap per
    attribute; map() returns the existing builder when called again.
    """

    def __init__(self, target: Type[T]):
        self.target = target
        self._maps: Dict[str, PropertyMap] = {}

    def __repr__(self) -> str:
        return f"ClassMap({self.target.__qualname__}, {list(self._maps)})"

    # ---------- Building ----------

    def map(self, attribute: str) -> PropertyMap:
        """
        Builder for attribute, created on first call. Read-only properties
        start out ignored for reading; they can still be written.
        """
        existing = self._maps.get(attribute)
        if existing is not None:
            return existing
        accessor = PropertyAccessor.for_attribute(self.target, attribute)
        pm = PropertyMap(accessor)
        if accessor.read_only:
            pm.ignore_read()
        self._maps[attribute] = pm
        logger.debug("%s: mapped %s", self.target.__qualname__, attribute)
        return pm

    def auto_map(self) -> "ClassMap[T]":
        for name in _declared_names(self.target):
            if name not in self._maps:
                self.map(name)
        return self

    # ---------- Introspection ----------

    @property
    def property_maps(self) -> List[PropertyMap]:
        return list(self._maps.values())

    @property
    def records(self) -> List[PropertyMapData]:
        return [pm.property_data for pm in self._maps.values()]

    def get(self, attribute: str) -> Optional[PropertyMap]:
        return self._maps.get(attribute)

    def readable(self) -> List[PropertyMapData]:
        return [d for d in self.records if not d.ignore_read]

    def writable(self) -> List[PropertyMapData]:
        return [d for d in self.records if not d.ignore_write]

    def _ordered_writable(self) -> List[PropertyMapData]:
        indexed = [d for d in self.writable() if d.index_write is not None]
        rest = [d for d in self.writable() if d.index_write is None]
        return sorted(indexed, key=lambda d: d.index_write) + rest

    def headers(self) -> List[Optional[str]]:
        """Write headers ordered by index_write; unindexed columns follow in mapping order."""
        return [write_header(d) for d in self._ordered_writable()]

    # ---------- Validation ----------

    @staticmethod
    def _find_duplicates(
        keyed: List[Tuple[Any, PropertyMapData]],
        direction: Direction,
    ) -> None:
        seen: Dict[Any, PropertyMapData] = {}
        for key, data in keyed:
            if key is None:
                continue
            # 3 and "3" are different columns
            slot = (type(key).__name__, key)
            if slot in seen:
                raise AppError(
                    DUPLICATE_COLUMN,
                    f"Column {key!r} is mapped twice for {direction.value}",
                    {
                        "column": key,
                        "direction": direction.value,
                        "properties": [seen[slot].property_name, data.property_name],
                    },
                )
            seen[slot] = data

    def validate(self) -> "ClassMap[T]":
        """
        Reject two non-ignored attributes claiming the same column in one
        direction: same read key, same write index or same write header.
        """
        self._find_duplicates([(read_column_key(d), d) for d in self.readable()], Direction.READ)
        self._find_duplicates([(d.index_write, d) for d in self.writable()], Direction.WRITE)
        self._find_duplicates([(write_header(d), d) for d in self.writable()], Direction.WRITE)
        for d in self.records:
            logger.debug("%s: %s", self.target.__qualname__, d.summary())
        return self

    # ---------- Read / write ----------

    def _read_values(self, row: ReaderRow) -> List[Tuple[PropertyMapData, Any]]:
        out = []
        for data in self.readable():
            result = resolve_read(data, row)
            if not result.skipped:
                out.append((data, result.value))
        return out

    def populate(self, instance: T, row: ReaderRow) -> T:
        """Assign every readable attribute of instance from row."""
        for data, value in self._read_values(row):
            data.property_info.set(instance, value)
        return instance

    def create(self, row: ReaderRow) -> T:
        """
        Build a new target from row. Dataclasses receive their init fields as
        keyword arguments; every other target must be constructible without
        arguments.
        """
        if not dataclasses.is_dataclass(self.target):
            return self.populate(self.target(), row)

        init_fields = [f for f in dataclasses.fields(self.target) if f.init]
        init_names = {f.name for f in init_fields}
        values = self._read_values(row)
        kwargs = {d.property_name: v for d, v in values if d.property_name in init_names}
        missing = [
            f.name for f in init_fields
            if f.name not in kwargs
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        ]
        if missing:
            raise AppError(
                MISSING_FIELD,
                f"{self.target.__qualname__} needs {', '.join(missing)} but they are not read",
                {"target": self.target.__qualname__, "fields": missing, "row": row.row_number},
            )
        instance = self.target(**kwargs)
        for data, value in values:
            if data.property_name not in init_names:
                data.property_info.set(instance, value)
        return instance

    def extract(self, instance: T) -> Dict[Optional[str], Any]:
        """{header: value} for every writable attribute, in headers() order."""
        out: Dict[Optional[str], Any] = {}
        for data in self._ordered_writable():
            result = resolve_write(data, instance)
            if not result.skipped:
                out[write_header(data)] = result.value
        return out
