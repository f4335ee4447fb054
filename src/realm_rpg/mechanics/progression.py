"""Progression mechanics: tier base stats and effective-stat aggregation.

Pure functions, no I/O. Effective stats are always recomputed from the
``base_*`` fields, so applying them twice gives the same result.
"""
from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Iterable

from realm_rpg.mechanics.tiers import is_mortal, resolve_tier, tier_value
from realm_rpg.models.character import StatBlock
from realm_rpg.models.item import Item

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

FIRST_TIER_BASE_VALUE = 100.0
TIER_MULTIPLIER_BASE = 5.0
TIER_MULTIPLIER_DECAY = 0.3
TIER_MULTIPLIER_MIN = 3.0

# Derived-stat ratios against the tier value
VITALITY_RATIO = 1.0
RESOURCE_RATIO = 0.5
OFFENSE_RATIO = 0.1
DEFENSE_RATIO = 0.05
EXPERIENCE_RATIO = 10.0
SPEED_RATIO = 0.1

MORTAL_BASE_STATS = {
    "base_max_vitality": 100,
    "base_max_resource": 0,
    "base_offense": 10,
    "base_defense": 5,
    "base_speed": 10,
    "base_experience_to_next": 100,
}

# Lower bounds for the stats that come out of the tier formula
BASE_STAT_MINIMUMS = {
    "base_max_vitality": 10,
    "base_max_resource": 1,
    "base_offense": 1,
    "base_defense": 1,
    "base_speed": 1,
    "base_experience_to_next": 10,
}

# Lower bounds for effective stats after bonuses and status effects
EFFECTIVE_STAT_MINIMUMS = {
    "max_vitality": 10,
    "max_resource": 0,
    "offense": 1,
    "defense": 0,
    "speed": 1,
    "experience_to_next": 10,
}

BONUS_STATS = ("max_vitality", "max_resource", "offense", "defense", "speed", "experience_to_next")

STAT_ALIASES = {
    "hp": "max_vitality",
    "maxhp": "max_vitality",
    "health": "max_vitality",
    "vitality": "max_vitality",
    "maxvitality": "max_vitality",
    "mp": "max_resource",
    "maxmp": "max_resource",
    "mana": "max_resource",
    "qi": "max_resource",
    "resource": "max_resource",
    "maxresource": "max_resource",
    "atk": "offense",
    "attack": "offense",
    "offense": "offense",
    "def": "defense",
    "defence": "defense",
    "defense": "defense",
    "spd": "speed",
    "agility": "speed",
    "speed": "speed",
    "maxexp": "experience_to_next",
    "experiencetonext": "experience_to_next",
}

_MODIFIER = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*(%?)\s*$")


def normalize_stat_key(key: str) -> str | None:
    """Map a model-supplied stat name onto a bonusable StatBlock field."""
    compact = re.sub(r"[\s_\-]", "", key).lower()
    return STAT_ALIASES.get(compact)


def parse_modifier(value: str | int | float) -> tuple[float, bool] | None:
    """Parse ``"5"``, ``"-3"`` or ``"10%"`` into (amount, is_percent).

    Percentages come back as fractions (``"10%"`` -> 0.1). Returns None
    when the value is not a number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value), False
    match = _MODIFIER.match(str(value))
    if not match:
        return None
    amount = float(match.group(1))
    if match.group(2):
        return amount / 100.0, True
    return amount, False


def calculate_tier_base_stats(label: str | None, settings: EngineSettings) -> dict[str, int]:
    """Base stats for a tier label, keyed by ``base_*`` StatBlock field."""
    if is_mortal(label, settings.mortal_label):
        return dict(MORTAL_BASE_STATS)

    pos = resolve_tier(label, settings.major_tiers, settings.minor_tiers)
    final = tier_value(
        pos.major_index,
        pos.minor_index,
        pos.minor_count,
        base=FIRST_TIER_BASE_VALUE,
        multiplier=TIER_MULTIPLIER_BASE,
        decay=TIER_MULTIPLIER_DECAY,
        floor=TIER_MULTIPLIER_MIN,
    )
    raw = {
        "base_max_vitality": final * VITALITY_RATIO,
        "base_max_resource": final * RESOURCE_RATIO,
        "base_offense": final * OFFENSE_RATIO,
        "base_defense": final * DEFENSE_RATIO,
        "base_speed": final * SPEED_RATIO,
        "base_experience_to_next": final * EXPERIENCE_RATIO,
    }
    return {key: max(BASE_STAT_MINIMUMS[key], math.floor(value)) for key, value in raw.items()}


def _apply(value: float, modifier: tuple[float, bool]) -> float:
    amount, is_percent = modifier
    if is_percent:
        return value * (1.0 + amount)
    return value + amount


def calculate_effective_stats(stats: StatBlock, items: Iterable[Item] = ()) -> StatBlock:
    """Recompute current stats from base stats, bonuses and status effects.

    Order: base, permanent bonuses, equipped-item bonuses, status effects in
    listed order. Maxima are rounded and floored; current pools are clamped
    into [0, max].
    """
    values: dict[str, float] = {
        "max_vitality": float(stats.base_max_vitality),
        "max_resource": float(stats.base_max_resource),
        "offense": float(stats.base_offense),
        "defense": float(stats.base_defense),
        "speed": float(stats.base_speed),
        "experience_to_next": float(stats.base_experience_to_next),
    }

    for key, bonus in stats.permanent_bonuses.items():
        field = normalize_stat_key(key) or key
        if field in values:
            values[field] += bonus

    for item in items:
        if not item.equipped:
            continue
        for key, raw in item.stat_bonuses.items():
            field = normalize_stat_key(key)
            modifier = parse_modifier(raw)
            if field is None or modifier is None:
                continue
            values[field] = _apply(values[field], modifier)

    for effect in stats.status_effects:
        for key, raw in effect.stat_modifiers.items():
            field = normalize_stat_key(key)
            modifier = parse_modifier(raw)
            if field is None or modifier is None:
                continue
            values[field] = _apply(values[field], modifier)

    final = {key: max(EFFECTIVE_STAT_MINIMUMS[key], int(round(v))) for key, v in values.items()}
    return stats.model_copy(update={
        **final,
        "vitality": max(0, min(stats.vitality, final["max_vitality"])),
        "resource": max(0, min(stats.resource, final["max_resource"])),
        "experience": max(0, stats.experience),
    })


def rebase_stats(
    stats: StatBlock,
    label: str,
    settings: EngineSettings,
    items: Iterable[Item] = (),
    refill: bool = True,
) -> StatBlock:
    """Move *stats* to tier *label*: regenerate base stats, recompute, refill pools."""
    base = calculate_tier_base_stats(label, settings)
    updated = calculate_effective_stats(stats.model_copy(update={**base, "tier": label}), items)
    if refill:
        updated = updated.model_copy(update={
            "vitality": updated.max_vitality,
            "resource": updated.max_resource,
        })
    return updated
