"""Shared utility functions: tolerant coercion of model-supplied values."""
from __future__ import annotations

import re
from typing import Any

_LIST_SPLIT = re.compile(r"[,;|]")
_SLUG_STRIP = re.compile(r"[^\w]+", re.UNICODE)

_TRUE_WORDS = {"true", "yes", "1", "on"}
_FALSE_WORDS = {"false", "no", "0", "off"}


def to_float(value: Any, default: float | None = None) -> float | None:
    """Coerce a literal like ``"12"``, ``"-3.5"`` or ``"+4"`` to float."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return default
        if result != result or result in (float("inf"), float("-inf")):
            return default
        return result
    return default


def to_int(value: Any, default: int | None = None) -> int | None:
    """Coerce to int, truncating decimals. Returns default when unparseable."""
    result = to_float(value)
    if result is None:
        return default
    return int(result)


def to_bool(value: Any, default: bool | None = None) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def split_list(value: Any) -> list[str]:
    """Split a comma/semicolon separated argument into trimmed, non-empty parts."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        parts = [str(v).strip() for v in value]
    else:
        parts = [p.strip() for p in _LIST_SPLIT.split(str(value))]
    return [p for p in parts if p]


def dedupe_casefold(values: list[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling."""
    seen: set[str] = set()
    result: list[str] = []
    for v in values:
        key = v.casefold()
        if key not in seen:
            seen.add(key)
            result.append(v)
    return result


def slugify(name: str) -> str:
    return _SLUG_STRIP.sub("_", name.strip().lower()).strip("_") or "entity"
