"""Person processors: NPC_NEW, NPC_UPDATE, MEM_FLAG, NPC_EMOTION, COMPANION_*."""
from __future__ import annotations

import logging
import random

from realm_rpg.mechanics.affinity import apply_affinity_change
from realm_rpg.mechanics.npc_progression import PERSON_LISTS
from realm_rpg.mechanics.npc_scaling import generate_npc_stats, select_archetype
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier, tier_label
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.character import Emotion, Person
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import (
    PERSON_FIELDS,
    describe,
    find_by_name,
    index_update,
    pick_fields,
    remove_by_name,
    replace_record,
    sanitize_entity_name,
    upsert_by_name,
)
from realm_rpg.utils import to_bool, to_float, to_int

logger = logging.getLogger(__name__)

UPDATE_FIELDS = {
    key: field
    for key, field in PERSON_FIELDS.items()
    if field in ("thoughts_on_player", "physical_state", "description", "personality", "location")
}

DEFAULT_EMOTION_INTENSITY = 50


def person_index_content(person: Person) -> str:
    return describe(
        person.name,
        person.description,
        f"Tier: {person.tier}" if person.tier else "",
        f"Personality: {person.personality}" if person.personality else "",
        f"Thoughts on player: {person.thoughts_on_player}" if person.thoughts_on_player else "",
        f"Location: {person.location}" if person.location else "",
    )


def refresh_stats(person: Person, state: GameState, rng: random.Random | None = None) -> Person:
    """Regenerate a person's stats from their tier and tags when stats are enabled."""
    if not state.settings.enable_stats:
        return person
    settings = state.settings
    tier = person.tier or (person.stats.tier if person.stats else None) or state.player.tier
    if not is_mortal(tier, settings.mortal_label):
        pos = resolve_tier(tier, settings.major_tiers, settings.minor_tiers)
        tier = tier_label(pos.major_index, pos.minor_index, settings.major_tiers, settings.minor_tiers)
    archetype = select_archetype(person.tags, person.archetype)
    stats = generate_npc_stats(state.player, tier, settings, archetype, rng)
    return person.model_copy(update={"stats": stats, "tier": tier})


def locate_person(state: GameState, name: str) -> tuple[str | None, Person | None]:
    """Find a person in any person list, NPCs first."""
    for list_name in PERSON_LISTS:
        person = find_by_name(getattr(state, list_name), name)
        if person is not None:
            return list_name, person
    return None, None


def ensure_person(
    state: GameState, name: str, rng: random.Random | None = None
) -> tuple[GameState, str, Person]:
    """Return the named person, auto-creating a minimal NPC when unknown."""
    list_name, person = locate_person(state, name)
    if person is not None:
        return state, list_name, person
    person = refresh_stats(Person(name=sanitize_entity_name(name)), state, rng)
    logger.info(f"Auto-created NPC '{person.name}' referenced before introduction")
    state = state.model_copy(update={"encountered_npcs": [*state.encountered_npcs, person]})
    return state, "encountered_npcs", person


def _store(state: GameState, list_name: str, old: Person, new: Person) -> GameState:
    return state.model_copy(update={list_name: replace_record(getattr(state, list_name), old, new)})


def _upsert_person(
    state: GameState,
    params: dict[str, str],
    list_name: str,
    seed: Person | None,
    rng: random.Random | None,
) -> tuple[GameState, Person]:
    records = getattr(state, list_name)
    fields = pick_fields(params, PERSON_FIELDS)
    name = fields.get("name") or sanitize_entity_name(params.get("name"))
    existing = find_by_name(records, name)

    if existing is None and seed is not None:
        records = [*records, seed]
        existing = seed

    new_records, person, created = upsert_by_name(records, name, fields, Person)
    if "affinity" in params:
        start = 0 if created else person.affinity
        person = person.model_copy(update={"affinity": apply_affinity_change(start, params["affinity"])})
    person = refresh_stats(person, state, rng)
    new_records = [person if r.name == person.name else r for r in new_records]
    if created:
        logger.info(f"New person '{person.name}' added to {list_name}")
    return state.model_copy(update={list_name: new_records}), person


def process_npc_new(state: GameState, params: dict[str, str], rng: random.Random | None = None) -> ProcessResult:
    new_state, person = _upsert_person(state, params, "encountered_npcs", None, rng)
    return ProcessResult(
        state=new_state,
        index_updates=[index_update("npc", person.name, person_index_content(person), person.id)],
    )


def process_npc_update(state: GameState, params: dict[str, str], rng: random.Random | None = None) -> ProcessResult:
    state, list_name, person = ensure_person(state, params["name"], rng)
    fields = pick_fields(params, UPDATE_FIELDS)
    updated = person.model_copy(update=fields)
    if "affinity" in params:
        updated = updated.model_copy(update={"affinity": apply_affinity_change(updated.affinity, params["affinity"])})
    return ProcessResult(
        state=_store(state, list_name, person, updated),
        index_updates=[index_update("npc", updated.name, person_index_content(updated), updated.id)],
    )


def _flag_value(raw: str) -> bool | int | float | str:
    flag = to_bool(raw)
    if flag is not None:
        return flag
    number = to_float(raw)
    if number is not None:
        return int(number) if number.is_integer() else number
    return raw


def process_mem_flag(state: GameState, params: dict[str, str], rng: random.Random | None = None) -> ProcessResult:
    state, list_name, person = ensure_person(state, params["npc"], rng)
    flags = {**person.memory_flags, params["flag"].strip(): _flag_value(params["value"])}
    updated = person.model_copy(update={"memory_flags": flags})
    return ProcessResult(state=_store(state, list_name, person, updated))


def process_npc_emotion(state: GameState, params: dict[str, str], rng: random.Random | None = None) -> ProcessResult:
    state, list_name, person = ensure_person(state, params["name"], rng)
    intensity = to_int(params.get("value"), DEFAULT_EMOTION_INTENSITY)
    emotion = Emotion(label=params["state"].strip(), intensity=max(0, min(100, intensity)))
    updated = person.model_copy(update={"emotion": emotion})
    return ProcessResult(state=_store(state, list_name, person, updated))


def process_companion_new(state: GameState, params: dict[str, str], rng: random.Random | None = None) -> ProcessResult:
    name = params["name"]
    seed = None
    if find_by_name(state.companions, name) is None:
        npc = find_by_name(state.encountered_npcs, name)
        if npc is not None:
            seed = npc.model_copy(update={"category": "companion"})
    params = {"category": "companion", **params} if seed is None else params
    new_state, person = _upsert_person(state, params, "companions", seed, rng)
    return ProcessResult(
        state=new_state,
        index_updates=[index_update("companion", person.name, person_index_content(person), person.id)],
        messages=[f"{person.name} joins you."],
    )


def process_companion_remove(state: GameState, params: dict[str, str]) -> ProcessResult:
    companions, removed = remove_by_name(state.companions, params["name"])
    if removed is None:
        logger.warning(f"COMPANION_REMOVE for unknown companion '{params['name']}' ignored")
        return ProcessResult(state=state)
    return ProcessResult(
        state=state.model_copy(update={"companions": companions}),
        messages=[f"{removed.name} leaves the party."],
    )
