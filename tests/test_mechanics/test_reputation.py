"""Tests for src/realm_rpg/mechanics/reputation.py."""
from __future__ import annotations

import pytest

from realm_rpg.mechanics.reputation import (
    adjust_reputation,
    apply_reputation_change,
    clamp_reputation,
    get_tier,
)


class TestGetTier:
    @pytest.mark.parametrize("score, expected", [
        (-100, "infamous"), (-61, "infamous"), (-60, "notorious"), (-21, "notorious"),
        (-20, "distrusted"), (-6, "distrusted"), (-5, "unknown"), (0, "unknown"),
        (5, "unknown"), (6, "recognized"), (20, "recognized"), (21, "respected"),
        (60, "respected"), (61, "renowned"), (100, "renowned"),
    ])
    def test_boundaries(self, score, expected):
        assert get_tier(score) == expected

    def test_out_of_range_clamped(self):
        assert get_tier(500) == "renowned"
        assert get_tier(-500) == "infamous"


class TestAdjust:
    def test_clamp(self):
        assert clamp_reputation(120) == 100
        assert clamp_reputation(-120) == -100

    def test_adjust(self):
        assert adjust_reputation(95, 10) == 100
        assert adjust_reputation(0, -7) == -7


class TestApplyReputationChange:
    @pytest.mark.parametrize("current, delta, expected", [
        (0, 5, 5),
        (0, 50, 20),
        (0, -50, -20),
        (90, 20, 100),
        (-95, -20, -100),
    ])
    def test_bounded(self, current, delta, expected):
        assert apply_reputation_change(current, delta) == expected


class TestReputationModel:
    def test_tier_property(self, state):
        assert state.reputation.tier == "unknown"
        assert state.reputation.model_copy(update={"score": 70}).tier == "renowned"
