"""Experience and tier advancement: pure math, no I/O.

The leveling state machine:

* NORMAL: experience at or above the requirement advances one minor tier,
  carrying the remainder over.
* AT_PEAK: reached at the last minor tier of a major tier. Experience is
  held at the requirement until a breakthrough.
* IN_TRIBULATION: a breakthrough is in progress; it resolves to the next
  major tier on success or a one-step demotion on failure.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable

from realm_rpg.mechanics.progression import calculate_effective_stats, rebase_stats
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier, tier_label
from realm_rpg.models.character import ProgressionState, StatBlock
from realm_rpg.models.item import Item

if TYPE_CHECKING:
    from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

Rebase = Callable[[StatBlock, str], StatBlock]


@dataclass
class LevelingResult:
    stats: StatBlock
    levels_gained: int = 0
    reached_peak: bool = False
    broke_through: bool = False
    messages: list[str] = field(default_factory=list)


def check_level_up(
    stats: StatBlock,
    settings: EngineSettings,
    items: Iterable[Item] = (),
    rebase: Rebase | None = None,
) -> LevelingResult:
    """Advance minor tiers while experience covers the requirement.

    The loop runs at most ``minor_count - minor_index`` times, enough to
    reach the last minor tier and then set the peak flag. *rebase* moves a
    stat block to a new tier label; by default stats are regenerated from
    the tier formula.
    """
    items = list(items)
    result = LevelingResult(stats=stats)

    if stats.progression_state is not ProgressionState.NORMAL or is_mortal(stats.tier, settings.mortal_label):
        capped = min(max(0, stats.experience), stats.experience_to_next)
        if capped != stats.experience:
            result.stats = stats.model_copy(update={"experience": capped})
        return result

    current = stats
    pos = resolve_tier(current.tier, settings.major_tiers, settings.minor_tiers)
    for _ in range(pos.minor_count - pos.minor_index):
        if current.experience < current.experience_to_next:
            break
        if pos.is_last_minor:
            current = current.model_copy(update={
                "at_peak": True,
                "experience": current.experience_to_next,
            })
            result.reached_peak = True
            result.messages.append(f"Reached the peak of {current.tier}. A breakthrough is required to advance.")
            break

        remaining = current.experience - current.experience_to_next
        new_label = tier_label(pos.major_index, pos.minor_index + 1, settings.major_tiers, settings.minor_tiers)
        moved = current.model_copy(update={"experience": remaining})
        if rebase is not None:
            current = rebase(moved, new_label)
        else:
            current = rebase_stats(moved, new_label, settings, items)
        result.levels_gained += 1
        result.messages.append(f"Advanced to {new_label}!")
        pos = resolve_tier(new_label, settings.major_tiers, settings.minor_tiers)

    result.stats = current
    return result


def apply_experience(
    stats: StatBlock,
    amount: int,
    settings: EngineSettings,
    items: Iterable[Item] = (),
    rebase: Rebase | None = None,
) -> LevelingResult:
    """Add (or remove) experience and run the level-up loop. Never negative."""
    updated = stats.model_copy(update={"experience": max(0, stats.experience + amount)})
    return check_level_up(updated, settings, items, rebase)


def begin_breakthrough(stats: StatBlock) -> LevelingResult:
    """Enter tribulation. Only valid from the peak."""
    if stats.progression_state is not ProgressionState.AT_PEAK:
        logger.warning(f"Breakthrough requested while {stats.progression_state.value}, ignoring")
        return LevelingResult(stats=stats)
    return LevelingResult(
        stats=stats.model_copy(update={"in_tribulation": True}),
        messages=["The tribulation begins."],
    )


def resolve_breakthrough(
    stats: StatBlock,
    success: bool,
    settings: EngineSettings,
    items: Iterable[Item] = (),
    rebase: Rebase | None = None,
) -> LevelingResult:
    """Resolve a breakthrough attempt.

    Success moves to the first minor tier of the next major tier with a full
    heal. At the top major tier there is nowhere to go, so the peak is kept.
    Failure demotes one minor tier, zeroes experience and halves current
    vitality; inventory and equipment are untouched.
    """
    items = list(items)
    if stats.progression_state is ProgressionState.NORMAL:
        logger.warning("Breakthrough result without a breakthrough in progress, ignoring")
        return LevelingResult(stats=stats)

    pos = resolve_tier(stats.tier, settings.major_tiers, settings.minor_tiers)
    cleared = stats.model_copy(update={"in_tribulation": False, "at_peak": False, "experience": 0})

    if success:
        if pos.is_top_major:
            kept = stats.model_copy(update={
                "in_tribulation": False,
                "at_peak": True,
                "experience": stats.experience_to_next,
            })
            return LevelingResult(stats=kept, messages=["There is no higher tier to reach."])
        new_label = tier_label(pos.major_index + 1, 0, settings.major_tiers, settings.minor_tiers)
        if rebase is not None:
            advanced = rebase(cleared, new_label)
        else:
            advanced = rebase_stats(cleared, new_label, settings, items)
        return LevelingResult(
            stats=advanced,
            levels_gained=1,
            broke_through=True,
            messages=[f"Breakthrough! Ascended to {new_label}."],
        )

    demoted_label = tier_label(pos.major_index, max(0, pos.minor_index - 1), settings.major_tiers, settings.minor_tiers)
    demoted = rebase_stats(cleared, demoted_label, settings, items, refill=False)
    demoted = demoted.model_copy(update={"vitality": max(1, demoted.vitality // 2)})
    return LevelingResult(
        stats=calculate_effective_stats(demoted, items),
        messages=[f"The breakthrough failed. Fell back to {demoted_label}."],
    )
