"""Validates a state after each command, restoring invariants by clamping."""
from __future__ import annotations

import logging

from realm_rpg.mechanics.affinity import clamp_affinity
from realm_rpg.mechanics.npc_progression import PERSON_LISTS
from realm_rpg.mechanics.tiers import resolve_tier
from realm_rpg.models.character import Person, StatBlock
from realm_rpg.models.state import EngineSettings, GameState
from realm_rpg.processors.base import merge_and_dedupe_by_name

logger = logging.getLogger(__name__)


def validate_stat_block(stats: StatBlock, settings: EngineSettings) -> StatBlock:
    """Clamp pools into [0, max] and drop a peak flag that no longer fits the tier."""
    update = {}
    max_vitality = max(0, stats.max_vitality)
    max_resource = max(0, stats.max_resource)
    if max_vitality != stats.max_vitality:
        update["max_vitality"] = max_vitality
    if max_resource != stats.max_resource:
        update["max_resource"] = max_resource
    vitality = max(0, min(max_vitality, stats.vitality))
    resource = max(0, min(max_resource, stats.resource))
    if vitality != stats.vitality:
        update["vitality"] = vitality
    if resource != stats.resource:
        update["resource"] = resource
    if stats.experience < 0:
        update["experience"] = 0
    if stats.at_peak and not resolve_tier(stats.tier, settings.major_tiers, settings.minor_tiers).is_last_minor:
        logger.warning(f"Peak flag set below the last minor tier ({stats.tier}), clearing")
        update["at_peak"] = False
        update["in_tribulation"] = False
    return stats.model_copy(update=update) if update else stats


def _validate_person(person: Person, settings: EngineSettings) -> Person:
    update = {}
    affinity = clamp_affinity(person.affinity)
    if affinity != person.affinity:
        update["affinity"] = affinity
    if person.stats is not None:
        stats = validate_stat_block(person.stats, settings)
        if stats is not person.stats:
            update["stats"] = stats
    return person.model_copy(update=update) if update else person


def validate_state(state: GameState) -> GameState:
    """Return *state* with every invariant enforced."""
    settings = state.settings
    update: dict = {}

    player = validate_stat_block(state.player, settings)
    if player is not state.player:
        update["player"] = player

    for list_name in PERSON_LISTS:
        people = getattr(state, list_name)
        deduped = merge_and_dedupe_by_name(people)
        validated = [_validate_person(p, settings) for p in deduped]
        if len(deduped) != len(people) or any(a is not b for a, b in zip(validated, people)):
            update[list_name] = validated

    inventory = [item for item in state.inventory if item.quantity > 0]
    if len(inventory) != len(state.inventory):
        update["inventory"] = inventory

    return state.model_copy(update=update) if update else state
