"""Tests for sheetmap.property_map — fluent builder, unified fan-out, validation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest
from openpyxl.styles import Font

from sheetmap.errors import (
    AppError,
    BAD_COLUMN_TYPE,
    BAD_FLAG,
    BAD_INDEX,
    BAD_NAME,
    BAD_RESOLVER,
    BAD_STYLE,
)
from sheetmap.models import ColumnStyle, ColumnType, PropertyAccessor
from sheetmap.property_map import PropertyMap


@dataclass
class Person:
    name: str = ""
    age: Optional[int] = None


def _pm(attr: str = "age") -> PropertyMap:
    return PropertyMap(PropertyAccessor.for_attribute(Person, attr))


# ── Construction ──────────────────────────────────────────────────────────────

def test_new_builder_starts_with_empty_record():
    data = PropertyMap().property_data
    assert data.property_info is None
    assert data.column_type is None
    assert data.constant is None and data.constant_read is None and data.constant_write is None
    assert data.default is None and data.default_read is None and data.default_write is None
    assert data.ignore is False and data.ignore_read is False and data.ignore_write is False
    assert data.index is None and data.index_read is None and data.index_write is None
    assert data.name is None and data.name_read is None and data.name_write is None
    assert data.style is None
    assert data.read_using is None and data.write_using is None


def test_builder_binds_accessor():
    pm = _pm("age")
    assert pm.property_data.property_name == "age"
    assert pm.property_data.property_info.owner is Person


# ── Unified fan-out ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("family,value", [
    ("constant", 42),
    ("default", "n/a"),
    ("ignore", True),
    ("index", 3),
    ("name", "Age"),
])
def test_unified_setter_sets_all_three_fields(family, value):
    pm = _pm()
    getattr(pm, family)(value)
    data = pm.property_data
    assert getattr(data, family) == value
    assert getattr(data, family + "_read") == value
    assert getattr(data, family + "_write") == value


@pytest.mark.parametrize("family,v1,v2", [
    ("constant", 1, 2),
    ("default", "a", "b"),
    ("ignore", True, False),
    ("index", 1, 7),
    ("name", "Age", "Years"),
])
def test_direction_override_after_unified_only_changes_that_direction(family, v1, v2):
    pm = _pm()
    getattr(pm, family)(v1)
    getattr(pm, family + "_read")(v2)
    data = pm.property_data
    assert getattr(data, family + "_read") == v2
    assert getattr(data, family + "_write") == v1
    assert getattr(data, family) == v1


def test_unified_after_direction_overrides_both_directions():
    pm = _pm().name_write("Old").name("New")
    data = pm.property_data
    assert data.name_read == "New"
    assert data.name_write == "New"


def test_direction_setters_leave_unified_unset():
    data = _pm().constant_write("X").default_read(0).property_data
    assert data.constant is None
    assert data.constant_read is None
    assert data.default is None
    assert data.default_write is None


def test_ignore_defaults_to_true_when_called_without_argument():
    data = _pm().ignore_write().property_data
    assert data.ignore_write is True
    assert data.ignore_read is False


# ── Chaining ──────────────────────────────────────────────────────────────────

def test_chained_calls_return_same_builder_and_record():
    pm = _pm()
    record = pm.property_data
    out = pm.name("A").index(2)
    assert out is pm
    assert pm.property_data is record
    assert record.name_read == "A"
    assert record.index_write == 2


def test_every_setter_returns_builder():
    pm = _pm()
    calls = [
        pm.column_type(ColumnType.NUMBER),
        pm.constant(1), pm.constant_read(1), pm.constant_write(1),
        pm.default(1), pm.default_read(1), pm.default_write(1),
        pm.ignore(False), pm.ignore_read(False), pm.ignore_write(False),
        pm.index(1), pm.index_read(1), pm.index_write(1),
        pm.name("a"), pm.name_read("a"), pm.name_write("a"),
        pm.read_using(lambda row: 1), pm.write_using(lambda obj: 1),
        pm.style(ColumnStyle()),
    ]
    assert all(c is pm for c in calls)


def test_end_to_end_age_mapping():
    pm = _pm("age").name("Age").default_read(0).ignore_write(True)
    data = pm.property_data
    assert data.name_read == "Age"
    assert data.name_write == "Age"
    assert data.default_read == 0
    assert data.default_write is None
    assert data.ignore_write is True
    assert data.ignore_read is False


# ── Index validation ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("bad", [0, -1, -100])
@pytest.mark.parametrize("setter", ["index", "index_read", "index_write"])
def test_non_positive_index_is_rejected(setter, bad):
    pm = _pm()
    with pytest.raises(AppError) as ei:
        getattr(pm, setter)(bad)
    assert ei.value.code == BAD_INDEX
    assert ei.value.details["property"] == "age"


@pytest.mark.parametrize("bad", [True, 1.5, None, "", "1A"])
def test_non_int_index_is_rejected(bad):
    with pytest.raises(AppError) as ei:
        _pm().index(bad)
    assert ei.value.code == BAD_INDEX


def test_index_one_is_accepted():
    data = _pm().index(1).property_data
    assert data.index_read == 1
    assert data.index_write == 1


def test_index_accepts_column_letters():
    data = _pm().index("C").index_write("aa").property_data
    assert data.index_read == 3
    assert data.index_write == 27


def test_rejected_index_leaves_record_untouched():
    pm = _pm().index(4)
    with pytest.raises(AppError):
        pm.index(0)
    assert pm.property_data.index == 4
    assert pm.property_data.index_read == 4
    assert pm.property_data.index_write == 4


# ── Other validation ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("bad", [None, "", "   ", 5])
def test_bad_name_is_rejected(bad):
    with pytest.raises(AppError) as ei:
        _pm().name_read(bad)
    assert ei.value.code == BAD_NAME


def test_column_type_accepts_member_code_and_name():
    pm = _pm()
    assert pm.column_type(ColumnType.DATE).property_data.column_type is ColumnType.DATE
    assert pm.column_type("n").property_data.column_type is ColumnType.NUMBER
    assert pm.column_type("boolean").property_data.column_type is ColumnType.BOOLEAN


def test_column_type_rejects_unknown():
    with pytest.raises(AppError) as ei:
        _pm().column_type("currency")
    assert ei.value.code == BAD_COLUMN_TYPE
    assert ei.value.details["property"] == "age"


def test_resolvers_must_be_callable():
    with pytest.raises(AppError) as ei:
        _pm().read_using("not callable")
    assert ei.value.code == BAD_RESOLVER
    with pytest.raises(AppError) as ei:
        _pm().write_using(None)
    assert ei.value.code == BAD_RESOLVER


def test_resolvers_are_stored_as_given():
    def reader(row):
        return 1

    def writer(obj):
        return 2

    data = _pm().read_using(reader).write_using(writer).property_data
    assert data.read_using is reader
    assert data.write_using is writer


def test_style_must_be_column_style():
    with pytest.raises(AppError) as ei:
        _pm().style({"bold": True})
    assert ei.value.code == BAD_STYLE


def test_style_is_stored():
    style = ColumnStyle(font=Font(bold=True), number_format="0.00")
    assert _pm().style(style).property_data.style is style


def test_resolver_and_constant_can_coexist():
    data = _pm().constant(5).read_using(lambda row: 9).property_data
    assert data.constant_read == 5
    assert data.read_using is not None


@pytest.mark.parametrize("bad", ["false", "", 0, 1, None])
@pytest.mark.parametrize("setter", ["ignore", "ignore_read", "ignore_write"])
def test_ignore_accepts_only_bool(setter, bad):
    pm = _pm().ignore_write(True)
    with pytest.raises(AppError) as ei:
        getattr(pm, setter)(bad)
    assert ei.value.code == BAD_FLAG
    assert pm.property_data.ignore_write is True
    assert pm.property_data.ignore_read is False
