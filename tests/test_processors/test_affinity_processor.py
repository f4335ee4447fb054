"""Tests for src/realm_rpg/processors/affinity.py."""
from __future__ import annotations

import pytest

from realm_rpg.processors.affinity import (
    process_prisoner_update,
    process_slave_update,
    process_wife_update,
)


class TestWifeUpdate:
    def test_relative_gain_bounded(self, state_with_people):
        wives = [state_with_people.wives[0].model_copy(update={"affinity": 50})]
        state = state_with_people.model_copy(update={"wives": wives})
        result = process_wife_update(state, {"name": "Xiao Yu", "affinity": "+=999"})
        assert result.state.wives[0].affinity == 60

    def test_tier_change_reported(self, state_with_people):
        result = process_wife_update(state_with_people, {"name": "Xiao Yu", "affinity": "+=10"})
        assert result.state.wives[0].affinity == 35
        assert result.messages == ["Xiao Yu now regards you as: Friend"]

    def test_no_message_within_tier(self, state_with_people):
        result = process_wife_update(state_with_people, {"name": "Xiao Yu", "affinity": "+=1"})
        assert result.messages == []

    def test_unknown_name_ignored(self, state_with_people):
        result = process_wife_update(state_with_people, {"name": "Elder Mo", "affinity": "+=5"})
        assert result.state is state_with_people

    def test_unparseable_affinity_keeps_score(self, state_with_people):
        result = process_wife_update(state_with_people, {"name": "Xiao Yu", "affinity": "a lot"})
        assert result.state.wives[0].affinity == 25


class TestCaptives:
    def test_slave_affinity(self, state_with_people):
        result = process_slave_update(state_with_people, {"name": "Tie Niu", "affinity": "-=3"})
        assert result.state.slaves[0].affinity == -13

    def test_prisoner_resistance_and_willpower(self, state_with_people):
        result = process_prisoner_update(
            state_with_people,
            {"name": "Hei Sha", "affinity": "+=2", "resistance": "60", "willpower": "150"},
        )
        prisoner = result.state.prisoners[0]
        assert (prisoner.affinity, prisoner.resistance, prisoner.willpower) == (2, 60, 100)

    def test_wife_ignores_captive_fields(self, state_with_people):
        result = process_wife_update(state_with_people, {"name": "Xiao Yu", "affinity": "+=1", "resistance": "60"})
        assert result.state.wives[0].resistance == 0

    @pytest.mark.parametrize("processor, list_name", [
        (process_slave_update, "slaves"),
        (process_prisoner_update, "prisoners"),
    ])
    def test_lists_do_not_grow(self, state_with_people, processor, list_name):
        result = processor(state_with_people, {"name": "Newcomer", "affinity": "5"})
        assert len(getattr(result.state, list_name)) == 1
