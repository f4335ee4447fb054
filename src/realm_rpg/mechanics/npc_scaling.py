"""NPC stat generation relative to the player: pure functions.

Stats are never taken from the model. An NPC's stat block is derived from
the player's current stats, the tier gap between them, an archetype chosen
from the NPC's tags, and a small random variance.
"""
from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Iterable

from realm_rpg.mechanics.progression import MORTAL_BASE_STATS, calculate_tier_base_stats
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier
from realm_rpg.models.character import StatBlock

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

# Each minor tier of difference is a 12.5% stat change
TIER_STEP_MULTIPLIER = 0.125
VARIANCE = 0.05

# (vitality, resource, offense, defense, speed)
ARCHETYPES: dict[str, tuple[float, float, float, float, float]] = {
    "balanced": (1.0, 1.0, 1.0, 1.0, 1.0),
    "tank": (1.5, 0.8, 0.7, 1.3, 0.8),
    "assassin": (0.7, 0.8, 1.4, 0.6, 1.3),
    "caster": (0.6, 1.5, 1.5, 0.5, 1.0),
    "boss": (3.0, 2.0, 1.2, 1.2, 1.0),
    "trivial": (0.3, 0.5, 0.5, 0.5, 0.8),
}

ARCHETYPE_ALIASES = {
    "mage": "caster",
    "fodder": "trivial",
    "minion": "trivial",
}

# Checked in this order; the first set with a matching tag wins
ARCHETYPE_KEYWORDS: list[tuple[str, frozenset[str]]] = [
    ("boss", frozenset({"boss", "sect master", "patriarch", "ancestor", "overlord", "elder", "king", "emperor"})),
    ("trivial", frozenset({"fodder", "minion", "mob", "bandit", "thug", "servant", "weak", "disciple"})),
    ("tank", frozenset({"tank", "guardian", "golem", "warrior", "defender", "shield", "beast", "bulwark"})),
    ("assassin", frozenset({"assassin", "rogue", "thief", "ninja", "shadow", "killer", "swift"})),
    ("caster", frozenset({"caster", "mage", "sorcerer", "alchemist", "formation master", "priest", "spellcaster"})),
]

NPC_STAT_MINIMUMS = {
    "max_vitality": 10,
    "max_resource": 0,
    "offense": 5,
    "defense": 1,
    "speed": 5,
}


def normalize_archetype(name: str | None) -> str | None:
    """Return the canonical archetype name, or None if unknown."""
    if not name:
        return None
    key = name.strip().lower()
    key = ARCHETYPE_ALIASES.get(key, key)
    return key if key in ARCHETYPES else None


def select_archetype(tags: Iterable[str], explicit: str | None = None) -> str:
    """Pick an archetype: a known explicit one wins, else inferred from tags."""
    chosen = normalize_archetype(explicit)
    if chosen:
        return chosen
    lowered = {t.strip().lower() for t in tags if t and t.strip()}
    for archetype, keywords in ARCHETYPE_KEYWORDS:
        if lowered & keywords:
            return archetype
    return "balanced"


def tier_multiplier(npc_tier: str | None, player_tier: str | None, settings: EngineSettings) -> float:
    majors, minors = settings.major_tiers, settings.minor_tiers
    player_pos = resolve_tier(player_tier, majors, minors)
    npc_pos = resolve_tier(npc_tier or player_tier, majors, minors)
    return 1.0 + TIER_STEP_MULTIPLIER * (npc_pos.absolute - player_pos.absolute)


def generate_npc_stats(
    player: StatBlock,
    npc_tier: str | None,
    settings: EngineSettings,
    archetype: str = "balanced",
    rng: random.Random | None = None,
) -> StatBlock:
    """Generate a full, consistent stat block for an NPC.

    Mortal NPCs scale from the mortal baseline rather than the player.
    Current pools start full. The experience requirement is the tier's own
    base requirement, which passive progression uses.
    """
    rng = rng or random.Random()
    ratios = ARCHETYPES.get(normalize_archetype(archetype) or "balanced", ARCHETYPES["balanced"])

    def variance() -> float:
        return 1.0 + rng.uniform(-VARIANCE, VARIANCE)

    label = npc_tier or player.tier
    if is_mortal(label, settings.mortal_label):
        reference = (
            MORTAL_BASE_STATS["base_max_vitality"],
            MORTAL_BASE_STATS["base_max_resource"],
            MORTAL_BASE_STATS["base_offense"],
            MORTAL_BASE_STATS["base_defense"],
            MORTAL_BASE_STATS["base_speed"],
        )
        multiplier = 1.0
    else:
        reference = (player.max_vitality, player.max_resource, player.offense, player.defense, player.speed)
        multiplier = tier_multiplier(label, player.tier, settings)

    keys = ("max_vitality", "max_resource", "offense", "defense", "speed")
    values = {
        key: max(NPC_STAT_MINIMUMS[key], int(round(ref * multiplier * ratio * variance())))
        for key, ref, ratio in zip(keys, reference, ratios)
    }
    requirement = calculate_tier_base_stats(label, settings)["base_experience_to_next"]

    return StatBlock(
        tier=label,
        vitality=values["max_vitality"],
        resource=values["max_resource"],
        experience=0,
        experience_to_next=requirement,
        base_max_vitality=values["max_vitality"],
        base_max_resource=values["max_resource"],
        base_offense=values["offense"],
        base_defense=values["defense"],
        base_speed=values["speed"],
        base_experience_to_next=requirement,
        **values,
    )
