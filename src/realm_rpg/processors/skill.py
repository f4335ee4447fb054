"""SKILL_LEARNED processor."""
from __future__ import annotations

import logging

from realm_rpg.mechanics.skills import add_proficiency, skill_from_template
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import describe, find_by_name, index_update, replace_record, sanitize_entity_name
from realm_rpg.utils import to_int

logger = logging.getLogger(__name__)

# Proficiency gained when an already-known skill is learned again
RELEARN_PROFICIENCY = 10
MAX_PROFICIENCY_GAIN = 800


def process_skill_learned(state: GameState, params: dict[str, str]) -> ProcessResult:
    name = sanitize_entity_name(params["name"])
    existing = find_by_name(state.skills, name)
    gain = to_int(params.get("proficiency"))

    if existing is not None:
        amount = RELEARN_PROFICIENCY if gain is None else gain
        amount = max(-MAX_PROFICIENCY_GAIN, min(MAX_PROFICIENCY_GAIN, amount))
        updated = add_proficiency(existing, amount)
        if params.get("description"):
            updated = updated.model_copy(update={"description": params["description"].strip()})
        skills = replace_record(state.skills, existing, updated)
        message = f"{updated.name} proficiency: {updated.proficiency_tier} ({updated.proficiency}/{updated.max_proficiency})"
        skill = updated
    else:
        skill = skill_from_template(name, params.get("description", "").strip())
        if gain:
            skill = add_proficiency(skill, max(0, min(MAX_PROFICIENCY_GAIN, gain)))
        skills = [*state.skills, skill]
        message = f"Learned {skill.name}"
        logger.info(message)

    return ProcessResult(
        state=state.model_copy(update={"skills": skills}),
        index_updates=[index_update("skill", skill.name, describe(f"Skill: {skill.name}", skill.description))],
        messages=[message],
    )
