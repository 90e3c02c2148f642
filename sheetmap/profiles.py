from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .class_map import ClassMap
from .errors import AppError, BAD_PROFILE, UNKNOWN_PROPERTY
from .models import ColumnStyle, PropertyMapData

logger = logging.getLogger(__name__)


PROFILE_VERSION = 1
ENV_PROFILE_DIR = "SHEETMAP_PROFILE_DIR"

# Facets with a unified field plus _read/_write counterparts, in replay order.
_FAN_OUT = ("constant", "default", "ignore", "index", "name")
_VALUE_FACETS = ("constant", "default")
_REQUIRED_FACETS = ("index", "name")


def resolve_profile_dir(project_root: Optional[str] = None) -> str:
    """Resolve the directory holding mapping profiles.

    Priority:
    1) SHEETMAP_PROFILE_DIR env var (absolute or relative)
    2) User-home scoped default: ~/.sheetmap/profiles
    """
    env = os.getenv(ENV_PROFILE_DIR)
    if env:
        p = Path(env)
        if not p.is_absolute():
            base = Path(project_root) if project_root else Path.cwd()
            p = base / p
        return str(p)

    return str(Path.home() / ".sheetmap" / "profiles")


def profile_path_for(
    target: type,
    profile_dir: Optional[str] = None,
    project_root: Optional[str] = None,
) -> str:
    base = Path(profile_dir or resolve_profile_dir(project_root))
    return str(base / f"{target.__qualname__}.json")


def _json_safe(value: Any) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True


def _same(a: Any, b: Any) -> bool:
    # True == 1 and 1.0 == 1 in Python; a profile must keep them apart
    return type(a) is type(b) and a == b


def _record_to_entry(data: PropertyMapData) -> Dict[str, Any]:
    """Serialize the JSON-safe facets of one record. Resolvers and openpyxl style objects are skipped."""
    entry: Dict[str, Any] = {}

    if data.column_type is not None:
        entry["column_type"] = data.column_type.value

    for family in _FAN_OUT:
        unified = getattr(data, family)
        unset = False if family == "ignore" else None
        if unified != unset:
            entry[family] = unified
        for suffix in ("_read", "_write"):
            value = getattr(data, family + suffix)
            if _same(value, unified):
                continue
            if family in _REQUIRED_FACETS and value is None:
                continue
            entry[family + suffix] = value

    for family in _VALUE_FACETS:
        for key in [k for k in entry if k.startswith(family)]:
            if not _json_safe(entry[key]):
                logger.debug("profile: dropping non-JSON %s of %s", key, data.property_name)
                del entry[key]

    if data.style is not None:
        style = {}
        if data.style.number_format is not None:
            style["number_format"] = data.style.number_format
        if data.style.width is not None:
            style["width"] = data.style.width
        if style:
            entry["style"] = style

    return entry


def profile_from_class_map(class_map: ClassMap) -> Dict[str, Any]:
    properties = {}
    for data in class_map.records:
        properties[data.property_name] = _record_to_entry(data)
    return {
        "version": PROFILE_VERSION,
        "target": class_map.target.__qualname__,
        "properties": properties,
    }


def apply_profile(class_map: ClassMap, profile: Dict[str, Any]) -> ClassMap:
    """Replay a profile through the builders of class_map.

    Unified facets are applied before direction overrides, so the result
    matches the record the profile was taken from. Attributes the class no
    longer has are skipped with a warning.
    """
    if not isinstance(profile, dict):
        raise AppError(BAD_PROFILE, f"Profile must be an object, got {type(profile).__name__}")
    version = profile.get("version")
    if version != PROFILE_VERSION:
        raise AppError(BAD_PROFILE, f"Unsupported profile version: {version!r}")
    properties = profile.get("properties", {})
    if not isinstance(properties, dict):
        raise AppError(BAD_PROFILE, "Profile 'properties' must be an object")

    for attribute, entry in properties.items():
        if not isinstance(entry, dict):
            raise AppError(BAD_PROFILE, f"Entry for {attribute!r} must be an object", {"property": attribute})
        try:
            pm = class_map.map(attribute)
        except AppError as e:
            if e.code != UNKNOWN_PROPERTY:
                raise
            logger.warning("profile: %s has no attribute %r, skipped", class_map.target.__qualname__, attribute)
            continue

        if "column_type" in entry:
            pm.column_type(entry["column_type"])

        for family in _FAN_OUT:
            for key in (family, family + "_read", family + "_write"):
                if key in entry:
                    getattr(pm, key)(entry[key])

        style_entry = entry.get("style")
        if isinstance(style_entry, dict):
            style = pm.property_data.style or ColumnStyle()
            style.number_format = style_entry.get("number_format", style.number_format)
            style.width = style_entry.get("width", style.width)
            pm.style(style)

    return class_map


# ---------- File IO ----------

def save_profile_json(profile: Dict[str, Any], path: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(profile, indent=2), encoding="utf-8")
    logger.info("profile saved: %s", p)


def load_profile_json(path: str) -> Dict[str, Any]:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise AppError(BAD_PROFILE, f"Failed to read profile: {e}", {"path": str(p)})
    logger.info("profile loaded: %s", p)
    return data


def save_class_map(class_map: ClassMap, path: Optional[str] = None) -> str:
    dest = path or profile_path_for(class_map.target)
    save_profile_json(profile_from_class_map(class_map), dest)
    return dest


def load_class_map(class_map: ClassMap, path: Optional[str] = None) -> bool:
    """Apply the saved profile for class_map.target if one exists. Returns True when applied."""
    p = Path(path or profile_path_for(class_map.target))
    if not p.exists():
        return False
    apply_profile(class_map, load_profile_json(str(p)))
    return True
