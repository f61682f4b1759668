"""Helpers for safely working with dynamic (untyped) structures.

Manifests and config files arrive as parsed TOML/JSON: nested dicts of
unknown shape. These helpers validate at that boundary and narrow types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value from a mapping, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    """Get a boolean value from a mapping, None if missing or not a bool."""
    value = table.get(key)
    if not isinstance(value, bool):
        return None
    return value


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    value = table.get(key)
    return as_str_dict(value)


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Get a list of non-empty strings, None if missing or any item is not a str."""
    value = table.get(key)
    if not isinstance(value, list):
        return None
    out: list[str] = []
    for item in cast(list[object], value):
        if not isinstance(item, str):
            return None
        s = item.strip()
        if s:
            out.append(s)
    return out


@dataclass(frozen=True, slots=True)
class Lookup:
    """Outcome of resolving a dotted path inside a nested table.

    Attributes:
        status: ``found`` when the path resolved to a value, ``missing`` when
            a segment does not exist, ``not_table`` when an intermediate
            segment exists but is not a table.
        value: The resolved value (only meaningful when found).
        at: The dotted prefix where resolution stopped.
    """

    status: Literal["found", "missing", "not_table"]
    value: object = None
    at: str = ""


def lookup_path(table: Mapping[str, object], dotted: str) -> Lookup:
    """Resolve ``a.b.c`` against nested tables."""
    parts = [p.strip() for p in dotted.split(".")]
    current: object = table
    walked: list[str] = []
    for part in parts:
        node = as_str_dict(current)
        if node is None:
            return Lookup(status="not_table", at=".".join(walked))
        walked.append(part)
        if not part or part not in node:
            return Lookup(status="missing", at=".".join(walked))
        current = node[part]
    return Lookup(status="found", value=current, at=".".join(walked))
