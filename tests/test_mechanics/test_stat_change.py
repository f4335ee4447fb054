"""Tests for src/realm_rpg/mechanics/stat_change.py."""
from __future__ import annotations

import pytest

from realm_rpg.mechanics.progression import rebase_stats
from realm_rpg.mechanics.stat_change import MAX_CURRENCY, MIN_PERMANENT_STEP, apply_stat_change, resolve_stat_key


@pytest.fixture
def player(state):
    return state.player


class TestResolveStatKey:
    @pytest.mark.parametrize("name, expected", [
        ("HP", "vitality"), ("qi", "resource"), ("XP", "experience"), ("Spirit Stones", "currency"),
        ("attack", "offense"), ("max_hp", None), ("charisma", None),
    ])
    def test_aliases(self, name, expected):
        assert resolve_stat_key(name) == expected


class TestPools:
    def test_subtract(self, player, settings):
        result = apply_stat_change(player, "hp", "subtract", settings, amount="30")
        assert result.stats.vitality == 70
        assert result.applied

    def test_add_capped_at_max(self, player, settings):
        hurt = player.model_copy(update={"vitality": 70})
        assert apply_stat_change(hurt, "hp", "add", settings, amount="50").stats.vitality == 100

    def test_subtract_floors_at_zero(self, player, settings):
        assert apply_stat_change(player, "hp", "subtract", settings, amount="999").stats.vitality == 0

    def test_percentage_of_max(self, player, settings):
        assert apply_stat_change(player, "hp", "subtract", settings, amount="20%").stats.vitality == 80

    @pytest.mark.parametrize("level, expected", [("low", 90), ("medium", 75), ("high", 50)])
    def test_level_buckets(self, player, settings, level, expected):
        assert apply_stat_change(player, "vitality", "subtract", settings, level=level).stats.vitality == expected

    def test_resource(self, player, settings):
        assert apply_stat_change(player, "mana", "subtract", settings, amount="10").stats.resource == 40

    def test_amount_sign_ignored(self, player, settings):
        assert apply_stat_change(player, "hp", "subtract", settings, amount="-30").stats.vitality == 70


class TestAddMax:
    def test_raises_maximum(self, player, settings):
        result = apply_stat_change(player, "hp", "add_max", settings, amount="50")
        assert result.stats.max_vitality == 150
        assert result.stats.vitality == 100
        assert result.stats.permanent_bonuses["max_vitality"] == 50

    def test_bounded_by_current_max(self, player, settings):
        result = apply_stat_change(player, "hp", "add_max", settings, amount="5000")
        assert result.stats.max_vitality == 200

    def test_zero_maximum_can_grow(self, player, settings):
        mortal = rebase_stats(player, "Mortal", settings)
        assert mortal.max_resource == 0
        result = apply_stat_change(mortal, "mp", "add_max", settings, amount="50")
        assert result.stats.max_resource == MIN_PERMANENT_STEP
        assert result.stats.permanent_bonuses["max_resource"] == MIN_PERMANENT_STEP

    def test_ignored_for_currency(self, player, settings):
        result = apply_stat_change(player, "gold", "add_max", settings, amount="5")
        assert not result.applied
        assert result.stats is player


class TestExperience:
    def test_add_levels_up(self, player, settings):
        result = apply_stat_change(player, "exp", "add", settings, amount="1000")
        assert result.stats.tier == "Qi Refining Layer 2"
        assert result.leveling.levels_gained == 1
        assert result.messages

    def test_subtract_never_negative(self, player, settings):
        assert apply_stat_change(player, "exp", "subtract", settings, amount="50").stats.experience == 0

    def test_stats_disabled_no_level(self, player):
        from realm_rpg.models.state import EngineSettings

        result = apply_stat_change(player, "exp", "add", EngineSettings(enable_stats=False), amount="5000")
        assert result.stats.experience == 5000
        assert result.stats.tier == "Qi Refining Layer 1"


class TestCurrency:
    def test_add(self, player, settings):
        assert apply_stat_change(player, "gold", "add", settings, amount="500").stats.currency == 500

    def test_floor(self, player, settings):
        assert apply_stat_change(player, "gold", "subtract", settings, amount="999").stats.currency == 0

    def test_ceiling(self, player, settings):
        rich = player.model_copy(update={"currency": MAX_CURRENCY - 1})
        assert apply_stat_change(rich, "gold", "add", settings, amount="500").stats.currency == MAX_CURRENCY


class TestScalars:
    def test_permanent_offense(self, player, settings):
        result = apply_stat_change(player, "attack", "add", settings, amount="5")
        assert result.stats.offense == 15
        assert result.stats.base_offense == 10

    def test_bounded_by_current_value(self, player, settings):
        assert apply_stat_change(player, "attack", "add", settings, amount="999").stats.offense == 20

    def test_subtract_not_below_minimum(self, player, settings):
        assert apply_stat_change(player, "speed", "subtract", settings, amount="999").stats.speed == 1


class TestIgnored:
    @pytest.mark.parametrize("name, operation, amount", [
        ("charisma", "add", "5"),
        ("hp", "multiply", "5"),
        ("hp", "add", "lots"),
        ("hp", "add", None),
    ])
    def test_ignored(self, player, settings, name, operation, amount):
        result = apply_stat_change(player, name, operation, settings, amount=amount)
        assert not result.applied
        assert result.stats is player
