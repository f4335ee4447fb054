"""World processors: TIME_PASS, WORLD_TIME_SET, MEMORY_ADD."""
from __future__ import annotations

import logging

from realm_rpg.mechanics import world_clock
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.state import GameState
from realm_rpg.utils import to_int

logger = logging.getLogger(__name__)

_UNITS = ("years", "months", "days", "hours", "minutes")


def process_time_pass(state: GameState, params: dict[str, str]) -> ProcessResult:
    """Advance the clock by a named duration or explicit units."""
    units = {unit: to_int(params.get(unit), 0) for unit in _UNITS}
    minutes = world_clock.to_minutes(**units)
    duration = params.get("duration", "").strip().lower()
    if duration:
        minutes += world_clock.DURATION_MINUTES.get(duration, 0)
    if minutes <= 0:
        logger.warning(f"TIME_PASS without a usable duration: {params}")
        return ProcessResult(state=state)
    world_time = world_clock.advance_by(state.world_time, minutes)
    return ProcessResult(
        state=state.model_copy(update={"world_time": world_time}),
        messages=[f"Time passes: {world_clock.format_time(world_time)}"],
    )


def process_world_time_set(state: GameState, params: dict[str, str]) -> ProcessResult:
    fields = {unit: to_int(params.get(unit)) for unit in ("year", "month", "day", "hour", "minute")}
    world_time = world_clock.set_time(state.world_time, **fields)
    return ProcessResult(state=state.model_copy(update={"world_time": world_time}))


def process_memory_add(state: GameState, params: dict[str, str]) -> ProcessResult:
    content = params["content"].strip()
    if any(m.strip().casefold() == content.casefold() for m in state.memories):
        return ProcessResult(state=state)
    return ProcessResult(
        state=state.model_copy(update={"memories": [*state.memories, content]}),
        messages=["A new core memory was formed."],
    )
