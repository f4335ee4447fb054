"""Passive NPC progression: persons cultivate on their own between turns."""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from realm_rpg.mechanics.leveling import apply_experience, resolve_breakthrough
from realm_rpg.mechanics.npc_scaling import NPC_STAT_MINIMUMS
from realm_rpg.mechanics.progression import calculate_tier_base_stats
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier, tier_value
from realm_rpg.models.character import Person, StatBlock

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings, GameState

logger = logging.getLogger(__name__)

NPC_BASE_EXP_FRACTION = 0.05
BOTTLENECK_TURNS = 10

APTITUDE_GROWTH_MULTIPLIERS = {
    "waste": 0.5,
    "ordinary": 1.0,
    "talented": 1.5,
    "prodigy": 2.0,
}

PERSON_LISTS = ("encountered_npcs", "companions", "wives", "slaves", "prisoners")


def scale_to_tier(stats: StatBlock, label: str, settings: EngineSettings) -> StatBlock:
    """Move an NPC stat block to *label*, keeping its archetype proportions.

    Each base stat is scaled by the ratio of the two tiers' values, so a
    tanky NPC stays tanky as it grows.
    """
    majors, minors = settings.major_tiers, settings.minor_tiers
    old = resolve_tier(stats.tier, majors, minors)
    new = resolve_tier(label, majors, minors)
    ratio = (
        tier_value(new.major_index, new.minor_index, new.minor_count)
        / tier_value(old.major_index, old.minor_index, old.minor_count)
    )

    scaled = {
        key: max(NPC_STAT_MINIMUMS[key], math.floor(getattr(stats, f"base_{key}") * ratio))
        for key in NPC_STAT_MINIMUMS
    }
    requirement = calculate_tier_base_stats(label, settings)["base_experience_to_next"]
    return stats.model_copy(update={
        **{f"base_{key}": value for key, value in scaled.items()},
        **scaled,
        "tier": label,
        "vitality": scaled["max_vitality"],
        "resource": scaled["max_resource"],
        "experience_to_next": requirement,
        "base_experience_to_next": requirement,
    })


def progress_person(person: Person, settings: EngineSettings) -> tuple[Person, list[str]]:
    """One turn of passive growth for a single person."""
    stats = person.stats
    if (
        not person.is_alive
        or stats is None
        or not person.aptitude
        or not stats.tier
        or is_mortal(stats.tier, settings.mortal_label)
    ):
        return person, []

    def rebase(block: StatBlock, label: str) -> StatBlock:
        return scale_to_tier(block, label, settings)

    if stats.at_peak:
        turns = person.bottleneck_turns + 1
        if turns < BOTTLENECK_TURNS:
            return person.model_copy(update={"bottleneck_turns": turns}), []
        result = resolve_breakthrough(stats, True, settings, rebase=rebase)
        messages = [f"{person.name}: {m}" for m in result.messages] if result.broke_through else []
        return person.model_copy(update={
            "stats": result.stats,
            "tier": result.stats.tier,
            "bottleneck_turns": 0,
        }), messages

    multiplier = APTITUDE_GROWTH_MULTIPLIERS.get(person.aptitude.strip().lower(), 1.0)
    gain = round(NPC_BASE_EXP_FRACTION * multiplier * stats.experience_to_next)
    result = apply_experience(stats, gain, settings, rebase=rebase)
    messages = [f"{person.name}: {m}" for m in result.messages]
    return person.model_copy(update={"stats": result.stats, "tier": result.stats.tier}), messages


def progress_npcs(state: GameState) -> tuple[GameState, list[str]]:
    """Advance every living, cultivating person in every person list."""
    if not state.settings.enable_stats:
        return state, []

    updates: dict[str, list[Person]] = {}
    messages: list[str] = []
    for list_name in PERSON_LISTS:
        people = []
        for person in getattr(state, list_name):
            progressed, person_messages = progress_person(person, state.settings)
            people.append(progressed)
            messages.extend(person_messages)
        updates[list_name] = people
    if messages:
        logger.info(f"NPC progression: {len(messages)} advancement(s)")
    return state.model_copy(update=updates), messages
