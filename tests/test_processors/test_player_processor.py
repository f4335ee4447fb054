"""Tests for src/realm_rpg/processors/player.py."""
from __future__ import annotations

import pytest

from realm_rpg.mechanics.progression import rebase_stats
from realm_rpg.models.character import ProgressionState
from realm_rpg.models.state import EngineSettings
from realm_rpg.processors.player import (
    process_breakthrough_begin,
    process_breakthrough_result,
    process_reputation_changed,
    process_stat_change,
    process_status_acquired,
    process_status_removed,
)


@pytest.fixture
def at_peak(state, settings):
    player = rebase_stats(state.player, "Qi Refining Layer 9", settings)
    player = player.model_copy(update={"at_peak": True, "experience": player.experience_to_next})
    return state.model_copy(update={"player": player})


class TestStatChange:
    def test_damage(self, state):
        result = process_stat_change(state, {"name": "hp", "operation": "subtract", "amount": "30"})
        assert result.state.player.vitality == 70

    def test_value_alias_for_amount(self, state):
        result = process_stat_change(state, {"name": "gold", "value": "25"})
        assert result.state.player.currency == 25

    def test_level_bucket(self, state):
        result = process_stat_change(state, {"name": "qi", "operation": "subtract", "level": "high"})
        assert result.state.player.resource == 25

    def test_experience_levels(self, state):
        result = process_stat_change(state, {"name": "exp", "amount": "1000"})
        assert result.state.player.tier == "Qi Refining Layer 2"
        assert "Advanced to Qi Refining Layer 2!" in result.messages


class TestStatus:
    def test_acquire_applies_modifiers(self, state):
        result = process_status_acquired(state, {
            "name": "Weakened", "type": "negative", "duration": "3", "mod.attack": "-3",
        })
        effect = result.state.player.status_effects[0]
        assert (effect.kind, effect.duration_turns, effect.stat_modifiers) == ("debuff", 3, {"offense": "-3"})
        assert result.state.player.offense == 7

    def test_packed_modifiers(self, state):
        result = process_status_acquired(state, {"name": "Blessed", "statModifiers": "speed:50%"})
        assert result.state.player.speed == 15

    def test_reacquire_replaces(self, state):
        first = process_status_acquired(state, {"name": "Weakened", "mod.attack": "-3"}).state
        second = process_status_acquired(first, {"name": "weakened", "mod.attack": "-5"}).state
        assert len(second.player.status_effects) == 1
        assert second.player.offense == 5

    @pytest.mark.parametrize("duration, expected", [(None, None), ("0", 1), ("5000", 999), ("soon", None)])
    def test_duration(self, state, duration, expected):
        params = {"name": "Focus"}
        if duration is not None:
            params["duration"] = duration
        result = process_status_acquired(state, params)
        assert result.state.player.status_effects[0].duration_turns == expected

    def test_remove_restores(self, state):
        weakened = process_status_acquired(state, {"name": "Weakened", "mod.attack": "-3"}).state
        result = process_status_removed(weakened, {"name": "Weakened"})
        assert result.state.player.status_effects == []
        assert result.state.player.offense == 10

    def test_remove_inactive_ignored(self, state):
        assert process_status_removed(state, {"name": "Poisoned"}).state is state


class TestReputation:
    def test_bounded(self, state):
        result = process_reputation_changed(state, {"score": "50", "reason": "Saved the village"})
        assert result.state.reputation.score == 20
        assert result.messages == ["Reputation +20 (Saved the village)"]

    def test_negative(self, state):
        result = process_reputation_changed(state, {"score": "-5"})
        assert result.state.reputation.score == -5
        assert result.messages == ["Reputation -5"]

    def test_non_numeric_ignored(self, state):
        assert process_reputation_changed(state, {"score": "huge"}).state is state


class TestBreakthrough:
    def test_begin_needs_peak(self, state):
        result = process_breakthrough_begin(state, {})
        assert result.state.player.progression_state is ProgressionState.NORMAL

    def test_full_cycle_success(self, at_peak):
        begun = process_breakthrough_begin(at_peak, {}).state
        assert begun.player.progression_state is ProgressionState.IN_TRIBULATION
        result = process_breakthrough_result(begun, {"success": "true"})
        assert result.state.player.tier == "Foundation Establishment Layer 1"

    def test_failure(self, at_peak):
        begun = process_breakthrough_begin(at_peak, {}).state
        result = process_breakthrough_result(begun, {"success": "no"})
        assert result.state.player.tier == "Qi Refining Layer 8"
        assert result.state.player.experience == 0

    def test_unreadable_success_ignored(self, at_peak):
        begun = process_breakthrough_begin(at_peak, {}).state
        assert process_breakthrough_result(begun, {"success": "perhaps"}).state is begun

    def test_stats_disabled(self, at_peak):
        state = at_peak.model_copy(update={"settings": EngineSettings(enable_stats=False)})
        assert process_breakthrough_begin(state, {}).state is state
