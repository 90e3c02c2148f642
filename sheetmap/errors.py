from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    Configuration error with a short code and structured details.
    Raised at the call site by builder, class map, row and profile code.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and callers) ───────────────────────────

BAD_INDEX        = "BAD_INDEX"
BAD_NAME         = "BAD_NAME"
BAD_COLUMN       = "BAD_COLUMN"
BAD_COLUMN_TYPE  = "BAD_COLUMN_TYPE"
BAD_STYLE        = "BAD_STYLE"
BAD_RESOLVER     = "BAD_RESOLVER"
UNKNOWN_PROPERTY = "UNKNOWN_PROPERTY"
DUPLICATE_COLUMN = "DUPLICATE_COLUMN"
COLUMN_NOT_FOUND = "COLUMN_NOT_FOUND"
BAD_PROFILE      = "BAD_PROFILE"
BAD_FLAG         = "BAD_FLAG"
MISSING_FIELD    = "MISSING_FIELD"
READ_ONLY_PROPERTY = "READ_ONLY_PROPERTY"


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner describing the configuration problem.
    Never exposes raw tracebacks or internal code paths.
    """
    code    = e.code
    msg     = e.message or ""
    details = e.details or {}
    prop    = details.get("property")
    where   = f" for '{prop}'" if prop else ""

    if code == BAD_INDEX:
        return f"Column index{where} must be a whole number of 1 or higher.\n({msg})"

    if code == BAD_NAME:
        return f"Column name{where} must be non-empty text.\n({msg})"

    if code == BAD_COLUMN:
        return f"Invalid column reference. Use letters like A, C or AA, or a number.\n({msg})"

    if code == BAD_COLUMN_TYPE:
        return f"Unknown column type{where}.\n({msg})"

    if code == BAD_STYLE:
        return f"Column style{where} must be a ColumnStyle.\n({msg})"

    if code == BAD_RESOLVER:
        return f"Custom read/write function{where} must be callable.\n({msg})"

    if code == UNKNOWN_PROPERTY:
        target = details.get("target", "")
        suffix = f" on {target}" if target else ""
        return f"No attribute named '{prop or ''}'{suffix}. Check the spelling."

    if code == DUPLICATE_COLUMN:
        column    = details.get("column", "")
        direction = details.get("direction", "")
        owners    = details.get("properties", [])
        kind      = f"{direction} column" if direction else "column"
        parts = [f"Two properties use the same {kind} {column!r}."]
        if owners:
            parts.append(f"Properties: {', '.join(owners)}.")
        parts.append("Give each property its own index or name, or ignore one of them.")
        return " ".join(parts)

    if code == COLUMN_NOT_FOUND:
        return f"Column not found in the row. Check the header name or index.\n({msg})"

    if code == BAD_PROFILE:
        return f"Mapping profile could not be used. Check that it is a valid profile file.\n({msg})"

    if code == BAD_FLAG:
        return f"Ignore setting{where} must be True or False.\n({msg})"

    if code == MISSING_FIELD:
        fields = details.get("fields", [])
        names  = ", ".join(fields) if fields else "some fields"
        return f"Cannot build the record: required fields are not read from the sheet ({names}). Map them or give them a default."

    if code == READ_ONLY_PROPERTY:
        return f"Property{where} is read-only and cannot be filled from the sheet.\n({msg})"

    # Fallback: first line only, never raw tracebacks
    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
