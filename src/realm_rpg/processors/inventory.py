"""Inventory processors: ITEM_ADD, ITEM_REMOVE, ITEM_EQUIP, ITEM_UNEQUIP."""
from __future__ import annotations

import logging

from realm_rpg.mechanics.economy import calculate_item_value
from realm_rpg.mechanics.progression import calculate_effective_stats, normalize_stat_key, parse_modifier
from realm_rpg.models.action import ProcessResult
from realm_rpg.models.character import StatBlock
from realm_rpg.models.item import Item
from realm_rpg.models.state import GameState
from realm_rpg.processors.base import (
    ITEM_FIELDS,
    collect_stat_args,
    describe,
    find_by_name,
    index_update,
    pick_fields,
    replace_record,
    upsert_by_name,
)
from realm_rpg.utils import to_int

logger = logging.getLogger(__name__)

MIN_QUANTITY_PER_COMMAND = 1
MAX_QUANTITY_PER_COMMAND = 9999
MIN_PERCENT_BONUS = -0.9
MAX_PERCENT_BONUS = 1.0


def _quantity(params: dict[str, str]) -> int:
    qty = to_int(params.get("quantity"), 1)
    return max(MIN_QUANTITY_PER_COMMAND, min(MAX_QUANTITY_PER_COMMAND, qty))


def clamp_bonuses(raw: dict[str, str], player: StatBlock) -> dict[str, str]:
    """Normalise and bound stat bonuses from an item or status effect.

    Percentages are kept within [-90%, +100%]; flat bonuses within the
    player's own base value for that stat at the time of acquisition.
    """
    bonuses: dict[str, str] = {}
    for key, value in raw.items():
        field = normalize_stat_key(key)
        modifier = parse_modifier(value)
        if field is None or modifier is None:
            logger.debug(f"Dropping stat modifier {key}={value!r}")
            continue
        amount, is_percent = modifier
        if is_percent:
            pct = max(MIN_PERCENT_BONUS, min(MAX_PERCENT_BONUS, amount))
            bonuses[field] = f"{round(pct * 100, 2):g}%"
        else:
            limit = max(1, getattr(player, f"base_{field}"))
            bonuses[field] = str(int(max(-limit, min(limit, amount))))
    return bonuses


def _recompute(state: GameState, inventory: list[Item]) -> GameState:
    player = calculate_effective_stats(state.player, inventory)
    return state.model_copy(update={"inventory": inventory, "player": player})


def item_index_content(item: Item) -> str:
    return describe(
        f"Item: {item.name}",
        item.description,
        f"Category: {item.category}",
        f"Rarity: {item.rarity}",
    )


def process_item_add(state: GameState, params: dict[str, str]) -> ProcessResult:
    qty = _quantity(params)
    fields = pick_fields(params, ITEM_FIELDS)
    bonuses = clamp_bonuses(collect_stat_args(params, ("bonus.", "stat.", "stats."), "statbonuses"), state.player)
    if bonuses:
        fields["stat_bonuses"] = bonuses

    existing = find_by_name(state.inventory, params["name"])
    fields["quantity"] = qty if existing is None else existing.quantity + qty
    inventory, item, created = upsert_by_name(state.inventory, params["name"], fields, Item)

    valued = item.model_copy(update={"value": calculate_item_value(item, state.settings)})
    inventory = replace_record(inventory, item, valued)
    verb = "Obtained" if created else "Gained"
    return ProcessResult(
        state=_recompute(state, inventory) if valued.equipped else state.model_copy(update={"inventory": inventory}),
        index_updates=[index_update("item", valued.name, item_index_content(valued))],
        messages=[f"{verb} {qty} x {valued.name}"],
    )


def process_item_remove(state: GameState, params: dict[str, str]) -> ProcessResult:
    item = find_by_name(state.inventory, params["name"])
    if item is None:
        logger.warning(f"ITEM_REMOVE for '{params['name']}' not in inventory, ignored")
        return ProcessResult(state=state)

    qty = _quantity(params)
    remaining = item.quantity - qty
    if remaining <= 0:
        inventory = [i for i in state.inventory if i is not item]
    else:
        inventory = replace_record(state.inventory, item, item.model_copy(update={"quantity": remaining}))
    new_state = _recompute(state, inventory) if item.equipped else state.model_copy(update={"inventory": inventory})
    return ProcessResult(state=new_state, messages=[f"Lost {min(qty, item.quantity)} x {item.name}"])


def _set_equipped(state: GameState, params: dict[str, str], equipped: bool) -> ProcessResult:
    item = find_by_name(state.inventory, params["name"])
    if item is None:
        logger.warning(f"Cannot {'equip' if equipped else 'unequip'} '{params['name']}': not in inventory")
        return ProcessResult(state=state)
    if item.equipped == equipped:
        return ProcessResult(state=state)
    inventory = replace_record(state.inventory, item, item.model_copy(update={"equipped": equipped}))
    return ProcessResult(
        state=_recompute(state, inventory),
        messages=[f"{'Equipped' if equipped else 'Unequipped'} {item.name}"],
    )


def process_item_equip(state: GameState, params: dict[str, str]) -> ProcessResult:
    return _set_equipped(state, params, True)


def process_item_unequip(state: GameState, params: dict[str, str]) -> ProcessResult:
    return _set_equipped(state, params, False)
