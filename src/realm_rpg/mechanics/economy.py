"""Economy mechanics: item and captive valuation, no I/O."""
from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Literal

from realm_rpg.mechanics.progression import normalize_stat_key, parse_modifier
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier, tier_value
from realm_rpg.models.character import Person
from realm_rpg.models.item import Item

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

# Item tier values share the stat formula's shape with their own constants
MORTAL_TIER_VALUE = 50
FIRST_TIER_VALUE = 100.0
VALUE_MULTIPLIER_BASE = 5.0
VALUE_MULTIPLIER_DECAY = 0.3
VALUE_MULTIPLIER_MIN = 3.0
UNTIERED_ITEM_VALUE = 10

STAT_POINT_VALUES = {
    "offense": 50,
    "max_vitality": 1,
    "max_resource": 2,
}

RARITY_MULTIPLIERS = {
    "common": 1.0,
    "rare": 2.5,
    "precious": 7.5,
    "supreme": 20.0,
    "mythic": 50.0,
    "sovereign": 150.0,
}

CATEGORY_MULTIPLIERS = {
    "potion": 1.2,
    "material": 0.8,
    "technique": 3.0,
    "skill": 3.0,
    "professionskillbook": 2.5,
    "professiontool": 1.5,
}

# Checked in order; the first keyword contained in an effect wins
SPECIAL_EFFECT_KEYWORDS: list[tuple[str, float]] = [
    ("lifesteal", 0.08),
    ("critical damage", 0.015),
    ("critical", 0.07),
    ("armor pierce", 0.1),
    ("ignore defense", 0.1),
    ("reflect", 0.06),
    ("counter", 0.06),
    ("haste", 0.15),
    ("evasion", 0.09),
    ("accuracy", 0.08),
    ("resist all", 0.12),
    ("cooldown", 0.05),
    ("stun", 0.25),
    ("paralyze", 0.25),
    ("silence", 0.2),
    ("blind", 0.18),
    ("poison", 0.04),
    ("burn", 0.04),
    ("regen hp", 0.005),
    ("regen mp", 0.01),
    ("exp boost", 0.1),
    ("gold boost", 0.08),
    ("immunity", 0.8),
    ("mana cost reduction", 0.04),
    ("damage absorb", 0.11),
]
UNKNOWN_EFFECT_MULTIPLIER = 0.15
TRIVIAL_EFFECTS = {"", "none", "nothing special", "no special effect"}

# Currency items have fixed prices
CURRENCY_ITEM_PRICES = {
    "low-grade spirit stone": 10,
    "mid-grade spirit stone": 20,
    "high-grade spirit stone": 40,
    "peak-grade spirit stone": 80,
    "immortal-grade spirit stone": 160,
}

# Captives are priced from a per-major-tier table
CAPTIVE_TIER_VALUES = [500, 5000, 25000, 100000, 350000, 1000000]
CAPTIVE_TIER_GROWTH = 3.0
CAPTIVE_MINOR_BASE = 1.5
CAPTIVE_MINOR_STEP = 0.05
DEFAULT_SLAVE_VALUE = 500
DEFAULT_PRISONER_VALUE = 300
MIN_ITEM_VALUE = 1
MIN_SLAVE_VALUE = 100
MIN_PRISONER_VALUE = 50

APTITUDE_VALUE_MULTIPLIERS = {
    "waste": 0.5,
    "inferior": 0.8,
    "ordinary": 1.0,
    "talented": 1.5,
    "prodigy": 2.5,
    "immortal": 5.0,
    "divine": 10.0,
}
ORDINARY_PHYSIQUES = {"", "ordinary", "ordinary body", "mortal body", "none"}
ORDINARY_ROOTS = {"", "ordinary", "ordinary root", "mortal root", "none"}
SPECIAL_TRAIT_MULTIPLIER = 1.25

_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")


def _key(value: str | None) -> str:
    return re.sub(r"[\s_\-]", "", (value or "").lower())


def item_tier_value(label: str | None, settings: EngineSettings) -> float:
    """Base value from an item's tier affinity. Untiered items are worth 10."""
    if not label:
        return UNTIERED_ITEM_VALUE
    pos = resolve_tier(label, settings.major_tiers, settings.minor_tiers)
    if not pos.known or is_mortal(label, settings.mortal_label):
        return MORTAL_TIER_VALUE
    return math.floor(tier_value(
        pos.major_index,
        base=FIRST_TIER_VALUE,
        multiplier=VALUE_MULTIPLIER_BASE,
        decay=VALUE_MULTIPLIER_DECAY,
        floor=VALUE_MULTIPLIER_MIN,
    ))


def effect_surcharge(effects: list[str]) -> float:
    """Sum of surcharges for free-text special effects.

    Each keyword's multiplier is scaled by the first number in the effect
    text (default 1). Unrecognised effects still cost something.
    """
    total = 0.0
    for effect in effects:
        text = effect.strip().lower()
        if text in TRIVIAL_EFFECTS:
            continue
        for keyword, multiplier in SPECIAL_EFFECT_KEYWORDS:
            if keyword in text:
                number = _NUMBER.search(text)
                total += multiplier * (float(number.group(1)) if number else 1.0)
                break
        else:
            total += UNKNOWN_EFFECT_MULTIPLIER
    return total


def is_equipment(item: Item) -> bool:
    return item.category.strip().lower() == "equipment"


def calculate_item_value(item: Item, settings: EngineSettings) -> int:
    """Monetary value of one unit of *item*."""
    fixed = CURRENCY_ITEM_PRICES.get(item.name.strip().lower())
    if fixed is not None:
        return fixed

    value = item_tier_value(item.tier, settings)
    if is_equipment(item):
        for key, raw in item.stat_bonuses.items():
            field = normalize_stat_key(key)
            modifier = parse_modifier(raw)
            if field in STAT_POINT_VALUES and modifier is not None and not modifier[1]:
                value += STAT_POINT_VALUES[field] * modifier[0]

    value *= RARITY_MULTIPLIERS.get(item.rarity.strip().lower(), 1.0)
    value *= CATEGORY_MULTIPLIERS.get(_key(item.category), 1.0)
    if is_equipment(item):
        value *= 1.0 + effect_surcharge(item.special_effects)
    return max(MIN_ITEM_VALUE, round(value))


def captive_tier_value(label: str | None, settings: EngineSettings, default: int) -> float:
    if not label:
        return default
    pos = resolve_tier(label, settings.major_tiers, settings.minor_tiers)
    if not pos.known:
        return default
    if pos.major_index < len(CAPTIVE_TIER_VALUES):
        base = float(CAPTIVE_TIER_VALUES[pos.major_index])
    else:
        extra = pos.major_index - len(CAPTIVE_TIER_VALUES) + 1
        base = CAPTIVE_TIER_VALUES[-1] * CAPTIVE_TIER_GROWTH ** extra
    if not pos.minor_known:
        return base
    return base * (CAPTIVE_MINOR_BASE + CAPTIVE_MINOR_STEP * pos.minor_index)


def calculate_captive_value(
    person: Person,
    settings: EngineSettings,
    kind: Literal["slave", "prisoner"] = "slave",
) -> int:
    """Market value of a slave or prisoner.

    Prisoners are discounted by resistance and marked up by willpower.
    """
    is_prisoner = kind == "prisoner"
    default = DEFAULT_PRISONER_VALUE if is_prisoner else DEFAULT_SLAVE_VALUE
    label = person.tier or (person.stats.tier if person.stats else None)
    if not label:
        return default

    value = captive_tier_value(label, settings, default)
    if person.aptitude:
        value *= APTITUDE_VALUE_MULTIPLIERS.get(person.aptitude.strip().lower(), 1.0)
    if person.physique and person.physique.strip().lower() not in ORDINARY_PHYSIQUES:
        value *= SPECIAL_TRAIT_MULTIPLIER
    if person.spiritual_root and person.spiritual_root.strip().lower() not in ORDINARY_ROOTS:
        value *= SPECIAL_TRAIT_MULTIPLIER

    if is_prisoner:
        value *= 1.0 - person.resistance / 200
        value *= 0.8 + person.willpower / 500
        return max(MIN_PRISONER_VALUE, round(value))
    return max(MIN_SLAVE_VALUE, round(value))
