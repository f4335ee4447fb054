"""Tests for src/realm_rpg/mechanics/tiers.py."""
from __future__ import annotations

import pytest

from realm_rpg.mechanics.tiers import (
    DEFAULT_MAJOR_TIERS,
    DEFAULT_MINOR_TIERS,
    TierPosition,
    is_mortal,
    parse_tier_string,
    resolve_tier,
    tier_label,
    tier_value,
)


class TestParseTierString:
    def test_dash_list(self):
        assert parse_tier_string("Qi Refining - Foundation - Golden Core") == [
            "Qi Refining", "Foundation", "Golden Core",
        ]

    def test_comma_list(self):
        assert parse_tier_string("Early, Middle, Late") == ["Early", "Middle", "Late"]

    def test_numeric_range_expands(self):
        assert parse_tier_string("Layer 1 - Layer 9") == [f"Layer {i}" for i in range(1, 10)]

    def test_range_without_space(self):
        assert parse_tier_string("Stage1 - Stage3") == ["Stage1", "Stage2", "Stage3"]

    def test_descending_range_kept_literal(self):
        assert parse_tier_string("Stage 3 - Stage 1") == ["Stage 3", "Stage 1"]

    def test_different_prefixes_not_a_range(self):
        assert parse_tier_string("Layer 1 - Stage 9") == ["Layer 1", "Stage 9"]

    def test_hyphenated_names_not_split(self):
        assert parse_tier_string("Body-Tempering - Qi-Gathering") == ["Body-Tempering", "Qi-Gathering"]

    def test_list_is_cleaned(self):
        assert parse_tier_string([" A ", "", "B"]) == ["A", "B"]

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        assert parse_tier_string(value) == []


class TestResolveTier:
    def test_major_and_minor(self):
        pos = resolve_tier("Golden Core Layer 3", DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (2, 2)
        assert pos.known
        assert pos.minor_known

    def test_case_insensitive(self):
        pos = resolve_tier("golden core layer 3", DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (2, 2)

    def test_major_only_means_first_minor(self):
        pos = resolve_tier("Nascent Soul", DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (3, 0)
        assert not pos.minor_known

    def test_longest_major_prefix_wins(self):
        majors = ["Core", "Core Formation"]
        pos = resolve_tier("Core Formation Layer 2", majors, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (1, 1)

    def test_exact_minor_beats_prefix(self):
        minors = [f"Layer {i}" for i in range(1, 13)]
        pos = resolve_tier("Qi Refining Layer 10", DEFAULT_MAJOR_TIERS, minors)
        assert pos.minor_index == 9

    def test_unknown_minor_means_first(self):
        pos = resolve_tier("Golden Core Something", DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (2, 0)
        assert not pos.minor_known

    @pytest.mark.parametrize("label", ["Bogus Realm", "", None])
    def test_unknown_falls_back_to_lowest(self, label):
        pos = resolve_tier(label, DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (0, 0)
        assert not pos.known


class TestTierPosition:
    def test_absolute(self):
        assert TierPosition(2, 2, 5, 9).absolute == 20

    def test_last_minor(self):
        assert TierPosition(0, 8, 5, 9).is_last_minor
        assert not TierPosition(0, 7, 5, 9).is_last_minor

    def test_top_major(self):
        assert TierPosition(4, 0, 5, 9).is_top_major
        assert not TierPosition(3, 8, 5, 9).is_top_major


class TestTierLabel:
    def test_compose(self):
        assert tier_label(1, 0, DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS) == "Foundation Establishment Layer 1"

    def test_indices_clamped(self):
        assert tier_label(99, 99, DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS) == "Spirit Severing Layer 9"

    def test_no_minors(self):
        assert tier_label(0, 3, DEFAULT_MAJOR_TIERS, []) == "Qi Refining"

    def test_round_trips_through_resolve(self):
        label = tier_label(3, 5, DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        pos = resolve_tier(label, DEFAULT_MAJOR_TIERS, DEFAULT_MINOR_TIERS)
        assert (pos.major_index, pos.minor_index) == (3, 5)


class TestTierValue:
    @pytest.mark.parametrize("major, expected", [(0, 100.0), (1, 500.0), (2, 2350.0)])
    def test_major_steps(self, major, expected):
        assert tier_value(major) == pytest.approx(expected)

    def test_minor_steps_are_linear(self):
        assert tier_value(0, 1, 9) == pytest.approx(100 + 100 / 9)

    def test_multiplier_floor(self):
        # deep in the ladder the multiplier bottoms out at 3
        assert tier_value(10) / tier_value(9) == pytest.approx(3.0)

    def test_strictly_increasing(self):
        values = [tier_value(major, minor, 9) for major in range(15) for minor in range(9)]
        assert all(b > a for a, b in zip(values, values[1:]))


class TestIsMortal:
    @pytest.mark.parametrize("label, expected", [
        ("Mortal", True), ("mortal ", True), ("Qi Refining", False), ("", False), (None, False),
    ])
    def test_is_mortal(self, label, expected):
        assert is_mortal(label) is expected
