"""Relationship processors for wives, slaves and prisoners."""
from __future__ import annotations

import logging
from functools import partial

from realm_rpg.mechanics.affinity import apply_affinity_change, get_tier_name
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import PERCENT_FIELDS, PERSON_FIELDS, find_by_name, pick_fields, replace_record

logger = logging.getLogger(__name__)

CAPTIVE_FIELDS = {key: field for key, field in PERSON_FIELDS.items() if field in PERCENT_FIELDS}


def process_relationship_update(state: GameState, params: dict[str, str], list_name: str) -> ProcessResult:
    """Adjust affinity (and captive resistance/willpower) for a person in *list_name*.

    Unknown names are ignored; these lists only grow through explicit events.
    """
    records = getattr(state, list_name)
    person = find_by_name(records, params["name"])
    if person is None:
        logger.warning(f"Relationship update for '{params['name']}' not in {list_name}, ignored")
        return ProcessResult(state=state)

    affinity = apply_affinity_change(person.affinity, params["affinity"])
    update = {"affinity": affinity}
    if list_name in ("slaves", "prisoners"):
        update.update(pick_fields(params, CAPTIVE_FIELDS))
    updated = person.model_copy(update=update)

    messages = []
    if get_tier_name(affinity) != get_tier_name(person.affinity):
        messages.append(f"{person.name} now regards you as: {get_tier_name(affinity)}")
    return ProcessResult(
        state=state.model_copy(update={list_name: replace_record(records, person, updated)}),
        messages=messages,
    )


process_wife_update = partial(process_relationship_update, list_name="wives")
process_slave_update = partial(process_relationship_update, list_name="slaves")
process_prisoner_update = partial(process_relationship_update, list_name="prisoners")
