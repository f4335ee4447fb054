"""Combat contract: BEGIN_COMBAT raises a request, COMBAT_END applies the result."""
from __future__ import annotations

import logging
import re

from pydantic import ValidationError

from realm_rpg.mechanics.npc_progression import PERSON_LISTS
from realm_rpg.mechanics.progression import calculate_effective_stats
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.character import ProgressionState
from realm_rpg.models.combat import CombatRequest, CombatResult
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import find_by_name, remove_by_name, replace_record
from realm_rpg.processors.player import apply_breakthrough_result
from realm_rpg.utils import dedupe_casefold, to_int

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Unknown"
CAPTURED_RESISTANCE = 50
CAPTURED_WILLPOWER = 50

_DISPOSITION_PAIR = re.compile(r"([^,:=]+?)\s*[:=]\s*(kill|capture|release)", re.I)


def process_begin_combat(state: GameState, params: dict[str, str]) -> ProcessResult:
    if state.settings.combat_mode == "narrative":
        logger.info("BEGIN_COMBAT skipped: combat is narrated in this world")
        return ProcessResult(state=state)

    opponents = dedupe_casefold([o.strip() for o in params["opponentIds"].split(",") if o.strip()])
    if not opponents:
        logger.warning("BEGIN_COMBAT without any opponent ignored")
        return ProcessResult(state=state)

    location = (params.get("location") or "").strip() or state.current_location or DEFAULT_LOCATION
    request = CombatRequest(opponents=opponents, location=location)
    player = state.player.model_copy(update={"combo_streak": 0})
    return ProcessResult(
        state=state.model_copy(update={"pending_combat": request, "player": player}),
        messages=[f"Combat looms against {', '.join(opponents)}."],
    )


def _capture(state: GameState, name: str) -> GameState:
    for list_name in PERSON_LISTS:
        if list_name == "prisoners":
            continue
        records, person = remove_by_name(getattr(state, list_name), name)
        if person is None:
            continue
        prisoner = person.model_copy(update={
            "category": "prisoner",
            "resistance": CAPTURED_RESISTANCE,
            "willpower": CAPTURED_WILLPOWER,
        })
        logger.info(f"{person.name} taken prisoner")
        return state.model_copy(update={list_name: records, "prisoners": [*state.prisoners, prisoner]})
    logger.warning(f"Cannot capture unknown person '{name}'")
    return state


def _kill(state: GameState, name: str) -> GameState:
    for list_name in PERSON_LISTS:
        records = getattr(state, list_name)
        person = find_by_name(records, name)
        if person is not None:
            dead = person.model_copy(update={"is_alive": False})
            return state.model_copy(update={list_name: replace_record(records, person, dead)})
    logger.warning(f"Cannot mark unknown person '{name}' as killed")
    return state


def apply_combat_result(state: GameState, result: CombatResult) -> ProcessResult:
    """Fold a finished encounter back into the state."""
    player = state.player
    update = {}
    if result.final_vitality is not None:
        update["vitality"] = max(0, min(player.max_vitality, result.final_vitality))
    if result.final_resource is not None:
        update["resource"] = max(0, min(player.max_resource, result.final_resource))
    new_state = state.model_copy(update={"pending_combat": None, "player": player.model_copy(update=update)})

    for name, disposition in result.dispositions.items():
        if disposition == "capture":
            new_state = _capture(new_state, name)
        elif disposition == "kill":
            new_state = _kill(new_state, name)

    if result.final_inventory is not None:
        inventory = list(result.final_inventory)
        new_state = new_state.model_copy(update={
            "inventory": inventory,
            "player": calculate_effective_stats(new_state.player, inventory),
        })

    messages = [result.summary] if result.summary else []
    if new_state.player.progression_state is ProgressionState.IN_TRIBULATION and result.outcome != "escaped":
        resolved = apply_breakthrough_result(new_state, result.outcome == "victory")
        new_state = resolved.state
        messages.extend(resolved.messages)
    return ProcessResult(state=new_state, messages=messages)


def parse_dispositions(text: str | None) -> dict[str, str]:
    """``"Wolf King:kill, Bandit:capture"`` -> ``{"Wolf King": "kill", ...}``."""
    return {name.strip(): action.lower() for name, action in _DISPOSITION_PAIR.findall(text or "")}


def process_combat_end(state: GameState, params: dict[str, str]) -> ProcessResult:
    try:
        result = CombatResult(
            outcome=params["outcome"].strip().lower(),
            summary=params.get("summary", ""),
            final_vitality=to_int(params.get("finalVitality")),
            final_resource=to_int(params.get("finalResource")),
            dispositions=parse_dispositions(params.get("dispositions")),
        )
    except ValidationError:
        logger.warning(f"COMBAT_END with invalid outcome {params['outcome']!r} ignored")
        return ProcessResult(state=state)
    return apply_combat_result(state, result)
