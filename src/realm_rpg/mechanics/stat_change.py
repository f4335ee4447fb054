"""Player stat changes requested by the model: bounded, pure functions.

An amount is an absolute number, a percentage string (``"20%"``) or a coarse
``level`` bucket. Every change passes a clamp before it lands.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from realm_rpg.mechanics.leveling import LevelingResult, check_level_up
from realm_rpg.mechanics.progression import calculate_effective_stats
from realm_rpg.models.character import StatBlock
from realm_rpg.models.item import Item
from realm_rpg.utils import to_float

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

MAX_CURRENCY = 10**12

LEVEL_FRACTIONS = {
    "low": 0.1,
    "medium": 0.25,
    "high": 0.5,
}

OPERATIONS = ("add", "subtract", "add_max")

# floor on how far one add_max may raise a stat, so a zero maximum can grow
MIN_PERMANENT_STEP = 10
POOLS = {"vitality": "max_vitality", "resource": "max_resource"}
SCALARS = ("offense", "defense", "speed")

STAT_KEYS = {
    "hp": "vitality",
    "health": "vitality",
    "vitality": "vitality",
    "mp": "resource",
    "mana": "resource",
    "qi": "resource",
    "resource": "resource",
    "exp": "experience",
    "xp": "experience",
    "experience": "experience",
    "gold": "currency",
    "money": "currency",
    "currency": "currency",
    "spiritstones": "currency",
    "atk": "offense",
    "attack": "offense",
    "offense": "offense",
    "def": "defense",
    "defense": "defense",
    "defence": "defense",
    "spd": "speed",
    "agility": "speed",
    "speed": "speed",
}


@dataclass
class StatChangeResult:
    stats: StatBlock
    applied: bool = False
    messages: list[str] = field(default_factory=list)
    leveling: LevelingResult | None = None


def resolve_stat_key(name: str) -> str | None:
    compact = "".join(name.lower().split()).replace("_", "")
    return STAT_KEYS.get(compact)


def _reference(stats: StatBlock, key: str) -> float:
    if key in POOLS:
        return float(getattr(stats, POOLS[key]))
    if key == "experience":
        return float(stats.experience_to_next)
    return float(getattr(stats, key))


def resolve_amount(stats: StatBlock, key: str, amount: str | None, level: str | None) -> float | None:
    """Absolute size of the change, or None when nothing usable was given."""
    if amount is not None:
        text = str(amount).strip()
        if text.endswith("%"):
            pct = to_float(text[:-1])
            if pct is not None:
                return abs(pct) / 100.0 * _reference(stats, key)
        else:
            number = to_float(text)
            if number is not None:
                return abs(number)
    if level:
        fraction = LEVEL_FRACTIONS.get(level.strip().lower())
        if fraction is not None:
            return fraction * _reference(stats, key)
    return None


def apply_stat_change(
    stats: StatBlock,
    name: str,
    operation: str,
    settings: EngineSettings,
    amount: str | None = None,
    level: str | None = None,
    items: Iterable[Item] = (),
) -> StatChangeResult:
    items = list(items)
    key = resolve_stat_key(name)
    op = (operation or "add").strip().lower()
    if key is None:
        logger.warning(f"STAT_CHANGE for unknown stat '{name}' ignored")
        return StatChangeResult(stats)
    if op not in OPERATIONS:
        logger.warning(f"STAT_CHANGE with unknown operation '{operation}' ignored")
        return StatChangeResult(stats)
    magnitude = resolve_amount(stats, key, amount, level)
    if magnitude is None:
        logger.warning(f"STAT_CHANGE for '{name}' has no usable amount")
        return StatChangeResult(stats)
    magnitude = int(round(magnitude))
    signed = -magnitude if op == "subtract" else magnitude

    if key in POOLS:
        if op == "add_max":
            return _add_permanent(stats, POOLS[key], signed, items)
        maximum = getattr(stats, POOLS[key])
        delta = max(-maximum, min(maximum, signed))
        value = max(0, min(maximum, getattr(stats, key) + delta))
        return StatChangeResult(stats.model_copy(update={key: value}), applied=True)

    if key == "experience":
        if op == "add_max":
            logger.info("add_max on experience ignored")
            return StatChangeResult(stats)
        updated = stats.model_copy(update={"experience": max(0, stats.experience + signed)})
        if op == "add" and settings.enable_stats:
            leveling = check_level_up(updated, settings, items)
            return StatChangeResult(leveling.stats, applied=True, messages=leveling.messages, leveling=leveling)
        return StatChangeResult(updated, applied=True)

    if key == "currency":
        if op == "add_max":
            logger.info("add_max on currency ignored")
            return StatChangeResult(stats)
        value = max(0, min(MAX_CURRENCY, stats.currency + signed))
        return StatChangeResult(stats.model_copy(update={"currency": value}), applied=True)

    return _add_permanent(stats, key, signed, items)


def _add_permanent(stats: StatBlock, field_name: str, delta: int, items: list[Item]) -> StatChangeResult:
    """Permanent change to a maximum or scalar.

    A single command can lower the stat to zero at most, and raise it by the
    larger of its current value, its base value and MIN_PERMANENT_STEP.
    """
    current = getattr(stats, field_name)
    cap = max(current, getattr(stats, f"base_{field_name}", 0), MIN_PERMANENT_STEP)
    bounded = max(-current, min(cap, delta))
    bonuses = dict(stats.permanent_bonuses)
    bonuses[field_name] = bonuses.get(field_name, 0) + bounded
    updated = calculate_effective_stats(stats.model_copy(update={"permanent_bonuses": bonuses}), items)
    return StatChangeResult(updated, applied=True, messages=[f"{field_name} changed by {bounded:+d}"])
