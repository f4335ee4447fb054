"""Tests for src/realm_rpg/processors/inventory.py."""
from __future__ import annotations

import pytest

from realm_rpg.processors.inventory import (
    clamp_bonuses,
    process_item_add,
    process_item_equip,
    process_item_remove,
    process_item_unequip,
)


@pytest.fixture
def armed(state):
    """State holding an unequipped sword with +5 offense."""
    return process_item_add(state, {
        "name": "Iron Sword", "category": "Equipment", "tier": "Qi Refining", "bonus.attack": "5",
    }).state


class TestItemAdd:
    def test_new_item(self, state):
        result = process_item_add(state, {"name": "Spirit Herb", "quantity": "3", "rarity": "Rare", "tier": "Qi Refining"})
        herb = result.state.inventory[0]
        assert (herb.name, herb.quantity, herb.rarity) == ("Spirit Herb", 3, "Rare")
        assert herb.value == 200
        assert result.messages == ["Obtained 3 x Spirit Herb"]
        assert result.index_updates[0].type == "item"

    def test_stacks_by_name(self, state):
        first = process_item_add(state, {"name": "Spirit Herb", "quantity": "3"}).state
        second = process_item_add(first, {"name": "spirit herb", "quantity": "2"})
        assert len(second.state.inventory) == 1
        assert second.state.inventory[0].quantity == 5
        assert second.messages == ["Gained 2 x Spirit Herb"]

    @pytest.mark.parametrize("quantity, expected", [("0", 1), ("-4", 1), ("99999", 9999), ("abc", 1), ("2.7", 2)])
    def test_quantity_clamped(self, state, quantity, expected):
        result = process_item_add(state, {"name": "Pebble", "quantity": quantity})
        assert result.state.inventory[0].quantity == expected

    def test_default_value(self, state):
        result = process_item_add(state, {"name": "Pebble"})
        assert result.state.inventory[0].value == 8

    def test_dotted_bonus(self, armed):
        sword = armed.inventory[0]
        assert sword.stat_bonuses == {"offense": "5"}
        assert sword.value == 350

    def test_packed_bonuses(self, state):
        result = process_item_add(state, {"name": "Jade Ring", "statBonuses": "hp:10%, defense:2"})
        assert result.state.inventory[0].stat_bonuses == {"max_vitality": "10%", "defense": "2"}

    def test_adding_does_not_change_stats(self, armed, state):
        assert armed.player == state.player

    def test_special_effects_list(self, state):
        result = process_item_add(state, {"name": "Leech Blade", "specialEffects": "Lifesteal 10%; Glows"})
        assert result.state.inventory[0].special_effects == ["Lifesteal 10%", "Glows"]


class TestClampBonuses:
    def test_flat_bounded_by_base_stat(self, state):
        assert clamp_bonuses({"attack": "999"}, state.player) == {"offense": "10"}
        assert clamp_bonuses({"attack": "-999"}, state.player) == {"offense": "-10"}

    def test_percent_bounded(self, state):
        assert clamp_bonuses({"hp": "500%"}, state.player) == {"max_vitality": "100%"}
        assert clamp_bonuses({"hp": "-500%"}, state.player) == {"max_vitality": "-90%"}

    def test_unknown_dropped(self, state):
        assert clamp_bonuses({"luck": "5", "attack": "lots"}, state.player) == {}


class TestEquip:
    def test_equip_applies_bonus(self, armed):
        result = process_item_equip(armed, {"name": "iron sword"})
        assert result.state.inventory[0].equipped
        assert result.state.player.offense == 15
        assert result.messages == ["Equipped Iron Sword"]

    def test_unequip_restores(self, armed):
        equipped = process_item_equip(armed, {"name": "Iron Sword"}).state
        result = process_item_unequip(equipped, {"name": "Iron Sword"})
        assert not result.state.inventory[0].equipped
        assert result.state.player.offense == 10

    def test_equip_twice_is_noop(self, armed):
        equipped = process_item_equip(armed, {"name": "Iron Sword"}).state
        assert process_item_equip(equipped, {"name": "Iron Sword"}).state is equipped

    def test_equip_missing_ignored(self, state):
        assert process_item_equip(state, {"name": "Ghost Blade"}).state is state

    def test_effective_stats_idempotent_across_equips(self, armed):
        once = process_item_equip(armed, {"name": "Iron Sword"}).state
        cycled = process_item_unequip(once, {"name": "Iron Sword"}).state
        again = process_item_equip(cycled, {"name": "Iron Sword"}).state
        assert again.player == once.player


class TestItemRemove:
    def test_partial(self, state):
        stocked = process_item_add(state, {"name": "Healing Pill", "quantity": "5"}).state
        result = process_item_remove(stocked, {"name": "Healing Pill", "quantity": "2"})
        assert result.state.inventory[0].quantity == 3

    def test_remove_all(self, state):
        stocked = process_item_add(state, {"name": "Healing Pill", "quantity": "2"}).state
        result = process_item_remove(stocked, {"name": "Healing Pill", "quantity": "10"})
        assert result.state.inventory == []
        assert result.messages == ["Lost 2 x Healing Pill"]

    def test_removing_equipped_drops_bonus(self, armed):
        equipped = process_item_equip(armed, {"name": "Iron Sword"}).state
        result = process_item_remove(equipped, {"name": "Iron Sword"})
        assert result.state.player.offense == 10

    def test_unknown_ignored(self, state):
        assert process_item_remove(state, {"name": "Nothing"}).state is state
