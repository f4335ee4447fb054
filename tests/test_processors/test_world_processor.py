"""Tests for src/realm_rpg/processors/world.py."""
from __future__ import annotations

import pytest

from realm_rpg.mechanics.world_clock import MAX_ADVANCE_MINUTES, MINUTES_PER_YEAR
from realm_rpg.processors.world import process_memory_add, process_time_pass, process_world_time_set


class TestTimePass:
    @pytest.mark.parametrize("params, expected", [
        ({"duration": "short"}, 60),
        ({"duration": "LONG"}, 720),
        ({"days": "2"}, 2880),
        ({"hours": "1", "minutes": "30"}, 90),
        ({"duration": "short", "minutes": "15"}, 75),
    ])
    def test_advances(self, state, params, expected):
        assert process_time_pass(state, params).state.world_time == expected

    def test_clamped(self, state):
        assert process_time_pass(state, {"years": "100"}).state.world_time == MAX_ADVANCE_MINUTES

    @pytest.mark.parametrize("params", [{}, {"duration": "forever"}, {"hours": "-3"}])
    def test_nothing_usable(self, state, params):
        assert process_time_pass(state, params).state is state


class TestWorldTimeSet:
    def test_forward(self, state):
        assert process_world_time_set(state, {"year": "2"}).state.world_time == MINUTES_PER_YEAR

    def test_backwards_ignored(self, state):
        later = state.model_copy(update={"world_time": 600})
        assert process_world_time_set(later, {"hour": "6"}).state.world_time == 600


class TestMemoryAdd:
    def test_adds(self, state):
        result = process_memory_add(state, {"content": " First breakthrough "})
        assert result.state.memories == ["First breakthrough"]

    def test_deduped(self, state):
        first = process_memory_add(state, {"content": "First breakthrough"}).state
        assert process_memory_add(first, {"content": "first BREAKTHROUGH"}).state is first
