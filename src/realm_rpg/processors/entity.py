"""World-knowledge processors: factions, locations, lore, entity definitions."""
from __future__ import annotations

import logging

from realm_rpg.models.action import ProcessResult
from realm_rpg.models.entity import ENTITY_TYPES, Faction, LoreEntry
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import (
    FACTION_FIELDS,
    LORE_FIELDS,
    describe,
    index_update,
    pick_fields,
    upsert_by_name,
)

logger = logging.getLogger(__name__)


def lore_index_content(entry: LoreEntry) -> str:
    return describe(
        f"{entry.entity_type.title()}: {entry.name}",
        entry.description,
        f"Category: {entry.category}" if entry.category else "",
    )


def process_faction_update(state: GameState, params: dict[str, str]) -> ProcessResult:
    fields = pick_fields(params, FACTION_FIELDS)
    factions, faction, _ = upsert_by_name(state.factions, params["name"], fields, Faction)
    content = describe(
        f"Faction: {faction.name}",
        faction.description,
        f"Category: {faction.category}" if faction.category else "",
    )
    return ProcessResult(
        state=state.model_copy(update={"factions": factions}),
        index_updates=[index_update("faction", faction.name, content)],
    )


def _discover(state: GameState, params: dict[str, str], entity_type: str) -> tuple[GameState, LoreEntry]:
    fields = pick_fields(params, LORE_FIELDS)
    fields["entity_type"] = entity_type
    if entity_type == "lore" and "location" not in fields and state.current_location:
        fields["location"] = state.current_location
    entries, entry, created = upsert_by_name(state.discovered_entities, params["name"], fields, LoreEntry)
    if created:
        logger.info(f"Discovered {entity_type} '{entry.name}'")
    return state.model_copy(update={"discovered_entities": entries}), entry


def process_location_discovered(state: GameState, params: dict[str, str]) -> ProcessResult:
    new_state, entry = _discover(state, params, "location")
    return ProcessResult(
        state=new_state.model_copy(update={"current_location": entry.name}),
        index_updates=[index_update("location", entry.name, lore_index_content(entry))],
    )


def process_lore_discovered(state: GameState, params: dict[str, str]) -> ProcessResult:
    new_state, entry = _discover(state, params, "lore")
    return ProcessResult(
        state=new_state,
        index_updates=[index_update("lore", entry.name, lore_index_content(entry))],
    )


def process_entity_definition(state: GameState, params: dict[str, str]) -> ProcessResult:
    """Define an entity referenced before it was introduced.

    An invalid or missing ``type`` becomes lore. Re-defining an existing
    entity only overwrites the fields supplied this time.
    """
    fields = pick_fields(params, LORE_FIELDS)
    if params.get("type"):
        entity_type = params["type"].strip().lower()
        fields["entity_type"] = entity_type if entity_type in ENTITY_TYPES else "lore"
    entries, entry, _ = upsert_by_name(state.discovered_entities, params["name"], fields, LoreEntry)
    return ProcessResult(
        state=state.model_copy(update={"discovered_entities": entries}),
        index_updates=[index_update("entity_definition", entry.name, lore_index_content(entry))],
    )
