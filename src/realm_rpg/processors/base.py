"""Shared helpers for command processors: names, lookups, field whitelists.

Processors are pure functions ``(state, params) -> ProcessResult``. They
never mutate their inputs; lists and records are rebuilt and the state is
returned via ``model_copy``.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Sequence, TypeVar

from pydantic import BaseModel

from realm_rpg.models.action import IndexUpdate
from realm_rpg.utils import dedupe_casefold, slugify, split_list, to_int

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# "Elder Mo - the sect's treasurer" -> "Elder Mo"
_QUALIFIER = re.compile(r"\s+[-–—]\s+.*$")

# Argument key (compacted, lower-case) -> record field
PERSON_FIELDS = {
    "name": "name",
    "description": "description",
    "personality": "personality",
    "thoughtsonplayer": "thoughts_on_player",
    "thoughts": "thoughts_on_player",
    "stance": "thoughts_on_player",
    "physicalstate": "physical_state",
    "category": "category",
    "customcategory": "category",
    "location": "location",
    "locationid": "location",
    "tags": "tags",
    "tier": "tier",
    "realm": "tier",
    "archetype": "archetype",
    "aptitude": "aptitude",
    "physique": "physique",
    "specialphysique": "physique",
    "spiritualroot": "spiritual_root",
    "race": "race",
    "title": "title",
    "resistance": "resistance",
    "willpower": "willpower",
}

ITEM_FIELDS = {
    "name": "name",
    "description": "description",
    "category": "category",
    "customcategory": "category",
    "rarity": "rarity",
    "tier": "tier",
    "realm": "tier",
    "itemrealm": "tier",
    "tags": "tags",
    "specialeffects": "special_effects",
    "uniqueeffects": "special_effects",
    "effects": "special_effects",
}

LORE_FIELDS = {
    "name": "name",
    "description": "description",
    "category": "category",
    "customcategory": "category",
    "tags": "tags",
    "location": "location",
    "locationid": "location",
}

FACTION_FIELDS = {
    "name": "name",
    "description": "description",
    "category": "category",
    "customcategory": "category",
    "tags": "tags",
}

LIST_FIELDS = {"tags", "special_effects"}
PERCENT_FIELDS = {"resistance", "willpower"}


def compact_key(key: str) -> str:
    return re.sub(r"[\s_\-]", "", key).lower()


def sanitize_entity_name(name: str | None) -> str:
    """Trim whitespace and drop a trailing ``" - qualifier"``."""
    if not name:
        return ""
    return _QUALIFIER.sub("", name.strip()).strip()


def find_by_name(records: Sequence[T], name: str) -> T | None:
    key = sanitize_entity_name(name).casefold()
    if not key:
        return None
    for record in records:
        if record.name.casefold() == key:
            return record
    return None


def pick_fields(params: dict[str, str], whitelist: dict[str, str]) -> dict:
    """Map whitelisted arguments onto record fields, coercing lists and percentages.

    Unknown keys are dropped. Empty values are treated as not supplied.
    """
    fields: dict = {}
    for key, raw in params.items():
        field_name = whitelist.get(compact_key(key))
        if field_name is None or raw is None or str(raw).strip() == "":
            continue
        if field_name in LIST_FIELDS:
            fields[field_name] = dedupe_casefold(split_list(raw))
        elif field_name in PERCENT_FIELDS:
            number = to_int(raw)
            if number is not None:
                fields[field_name] = max(0, min(100, number))
        elif field_name == "name":
            fields[field_name] = sanitize_entity_name(raw)
        else:
            fields[field_name] = str(raw).strip()
    return fields


def upsert_by_name(
    records: Sequence[T],
    name: str,
    fields: dict,
    factory: Callable[..., T],
) -> tuple[list[T], T, bool]:
    """Merge *fields* into the record named *name*, or create it.

    Supplied fields win; omitted ones are preserved. The stored name keeps
    its original spelling. Returns (new_list, record, created).
    """
    clean = sanitize_entity_name(name)
    existing = find_by_name(records, clean)
    update = {k: v for k, v in fields.items() if k != "name"}
    if existing is not None:
        merged = existing.model_copy(update=update)
        new_records = [merged if r is existing else r for r in records]
        return new_records, merged, False
    created = factory(name=clean, **update)
    return [*records, created], created, True


def replace_record(records: Sequence[T], old: T, new: T) -> list[T]:
    return [new if r is old else r for r in records]


def remove_by_name(records: Sequence[T], name: str) -> tuple[list[T], T | None]:
    target = find_by_name(records, name)
    if target is None:
        return list(records), None
    return [r for r in records if r is not target], target


def merge_and_dedupe_by_name(records: Sequence[T]) -> list[T]:
    """Collapse case-insensitive duplicate names, later records merging over earlier.

    Order of first appearance is kept.
    """
    merged: dict[str, T] = {}
    for record in records:
        key = record.name.casefold()
        if key in merged:
            supplied = {f: getattr(record, f) for f in record.model_fields_set if f not in ("name", "id")}
            merged[key] = merged[key].model_copy(update=supplied)
        else:
            merged[key] = record
    return list(merged.values())


def index_update(kind: str, name: str, content: str, record_id: str | None = None) -> IndexUpdate:
    return IndexUpdate(id=record_id or slugify(name), type=kind, content=content)


def describe(name: str, *parts: str) -> str:
    """Index text: the name followed by any non-empty parts."""
    return ". ".join([name, *[p for p in parts if p]])


_STAT_PAIR = re.compile(r"([\w ]+?)\s*[:=]\s*([+-]?\d+(?:\.\d+)?%?)")


def collect_stat_args(params: dict[str, str], prefixes: tuple[str, ...], list_key: str) -> dict[str, str]:
    """Gather per-stat arguments from dotted keys and a packed list argument.

    ``bonus.offense=5`` and ``statBonuses="offense:5, hp:10%"`` both yield
    ``{"offense": "5"}``-style entries.
    """
    raw: dict[str, str] = {}
    for key, value in params.items():
        lowered = key.lower()
        for prefix in prefixes:
            if lowered.startswith(prefix):
                raw[key[len(prefix):]] = value
        if compact_key(key) == list_key:
            for stat, amount in _STAT_PAIR.findall(value):
                raw[stat.strip()] = amount
    return raw
