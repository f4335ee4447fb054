"""Player processors: stats, status effects, reputation, breakthroughs."""
from __future__ import annotations

import logging

from realm_rpg.mechanics.leveling import begin_breakthrough, resolve_breakthrough
from realm_rpg.mechanics.progression import calculate_effective_stats
from realm_rpg.mechanics.reputation import apply_reputation_change
from realm_rpg.mechanics.stat_change import apply_stat_change
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.character import StatusEffect
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import collect_stat_args, find_by_name, sanitize_entity_name
from realm_rpg.processors.inventory import clamp_bonuses
from realm_rpg.utils import to_bool, to_int

logger = logging.getLogger(__name__)

STATUS_KINDS = {
    "buff": "buff",
    "positive": "buff",
    "debuff": "debuff",
    "negative": "debuff",
    "neutral": "neutral",
}
MAX_STATUS_DURATION = 999


def process_stat_change(state: GameState, params: dict[str, str]) -> ProcessResult:
    result = apply_stat_change(
        state.player,
        params["name"],
        params.get("operation", "add"),
        state.settings,
        amount=params.get("amount", params.get("value")),
        level=params.get("level"),
        items=state.inventory,
    )
    return ProcessResult(state=state.model_copy(update={"player": result.stats}), messages=result.messages)


def process_status_acquired(state: GameState, params: dict[str, str]) -> ProcessResult:
    """Add or replace a status effect; its modifiers apply immediately."""
    name = sanitize_entity_name(params["name"])
    duration = to_int(params.get("duration"))
    if duration is not None:
        duration = max(1, min(MAX_STATUS_DURATION, duration))
    modifiers = clamp_bonuses(
        collect_stat_args(params, ("mod.", "modifier."), "statmodifiers"),
        state.player,
    )
    effect = StatusEffect(
        name=name,
        description=params.get("description", "").strip(),
        kind=STATUS_KINDS.get(params.get("type", "").strip().lower(), "neutral"),
        duration_turns=duration,
        stat_modifiers=modifiers,
    )
    effects = [e for e in state.player.status_effects if e.name.casefold() != name.casefold()]
    player = state.player.model_copy(update={"status_effects": [*effects, effect]})
    player = calculate_effective_stats(player, state.inventory)
    return ProcessResult(state=state.model_copy(update={"player": player}), messages=[f"Status gained: {name}"])


def process_status_removed(state: GameState, params: dict[str, str]) -> ProcessResult:
    effect = find_by_name(state.player.status_effects, params["name"])
    if effect is None:
        logger.warning(f"STATUS_REMOVED for inactive status '{params['name']}' ignored")
        return ProcessResult(state=state)
    effects = [e for e in state.player.status_effects if e is not effect]
    player = calculate_effective_stats(state.player.model_copy(update={"status_effects": effects}), state.inventory)
    return ProcessResult(state=state.model_copy(update={"player": player}), messages=[f"Status ended: {effect.name}"])


def process_reputation_changed(state: GameState, params: dict[str, str]) -> ProcessResult:
    delta = to_int(params["score"])
    if delta is None:
        logger.warning(f"REPUTATION_CHANGED with non-numeric score {params['score']!r} ignored")
        return ProcessResult(state=state)
    score = apply_reputation_change(state.reputation.score, delta)
    reputation = state.reputation.model_copy(update={"score": score})
    reason = params.get("reason", "").strip()
    message = f"Reputation {score - state.reputation.score:+d}" + (f" ({reason})" if reason else "")
    return ProcessResult(state=state.model_copy(update={"reputation": reputation}), messages=[message])


def process_breakthrough_begin(state: GameState, params: dict[str, str]) -> ProcessResult:
    if not state.settings.enable_stats:
        return ProcessResult(state=state)
    result = begin_breakthrough(state.player)
    return ProcessResult(state=state.model_copy(update={"player": result.stats}), messages=result.messages)


def apply_breakthrough_result(state: GameState, success: bool) -> ProcessResult:
    result = resolve_breakthrough(state.player, success, state.settings, state.inventory)
    return ProcessResult(state=state.model_copy(update={"player": result.stats}), messages=result.messages)


def process_breakthrough_result(state: GameState, params: dict[str, str]) -> ProcessResult:
    if not state.settings.enable_stats:
        return ProcessResult(state=state)
    success = to_bool(params["success"])
    if success is None:
        logger.warning(f"BREAKTHROUGH_RESULT with unreadable success {params['success']!r} ignored")
        return ProcessResult(state=state)
    return apply_breakthrough_result(state, success)
