"""Tests for src/realm_rpg/cli/main.py."""
from __future__ import annotations

import pytest
from typer.testing import CliRunner

from realm_rpg.cli.main import app
from realm_rpg.models.state import GameState
from realm_rpg.processors.skill import process_skill_learned

runner = CliRunner()

RESPONSE = """<narration>A girl in white waves from the bridge.</narration>
<data_tags>
[NPC_NEW: name="Mei", tier="Qi Refining Layer 2"]
[TIME_PASS: duration="short"]
</data_tags>"""


@pytest.fixture
def no_config(tmp_path):
    return tmp_path / "missing.toml"


@pytest.fixture
def state_file(tmp_path, no_config):
    path = tmp_path / "state.json"
    result = runner.invoke(app, ["new", "Lin Feng", "--out", str(path), "--location", "Azure Cloud Sect",
                                 "--config", str(no_config)])
    assert result.exit_code == 0, result.output
    return path


def _load(path) -> GameState:
    return GameState.model_validate_json(path.read_text(encoding="utf-8"))


class TestNew:
    def test_writes_state(self, state_file):
        state = _load(state_file)
        assert state.player_name == "Lin Feng"
        assert state.player.tier == "Qi Refining Layer 1"
        assert state.current_location == "Azure Cloud Sect"

    def test_starting_tier(self, tmp_path, no_config):
        path = tmp_path / "late.json"
        result = runner.invoke(app, ["new", "Lin Feng", "-o", str(path), "-t", "Golden Core Layer 1",
                                     "-c", str(no_config)])
        assert result.exit_code == 0, result.output
        assert _load(path).player.max_vitality == 2350

    def test_invalid_config(self, tmp_path):
        bad = tmp_path / "config.toml"
        bad.write_text("[engine\nenable_stats = ", encoding="utf-8")
        result = runner.invoke(app, ["new", "Lin Feng", "-o", str(tmp_path / "s.json"), "-c", str(bad)])
        assert result.exit_code == 1
        assert not (tmp_path / "s.json").exists()

    def test_invalid_engine_settings(self, tmp_path):
        bad = tmp_path / "config.toml"
        bad.write_text('[engine]\ncombat_mode = "turn-based"\n', encoding="utf-8")
        result = runner.invoke(app, ["new", "Lin Feng", "-o", str(tmp_path / "s.json"), "-c", str(bad)])
        assert result.exit_code == 1


class TestApply:
    def test_applies_response(self, tmp_path, state_file, no_config):
        response = tmp_path / "response.txt"
        response.write_text(RESPONSE, encoding="utf-8")
        result = runner.invoke(app, ["apply", str(response), "--state", str(state_file), "-c", str(no_config)])
        assert result.exit_code == 0, result.output
        state = _load(state_file)
        assert [p.name for p in state.encountered_npcs] == ["Mei"]
        assert state.world_time == 60
        assert state.turn == 1

    def test_separate_output_and_no_end_turn(self, tmp_path, state_file, no_config):
        response = tmp_path / "response.txt"
        response.write_text(RESPONSE, encoding="utf-8")
        out = tmp_path / "after.json"
        result = runner.invoke(app, ["apply", str(response), "-s", str(state_file), "-o", str(out),
                                     "--no-end-turn", "-c", str(no_config)])
        assert result.exit_code == 0, result.output
        assert _load(state_file).encountered_npcs == []
        assert _load(out).turn == 0

    def test_bad_state_file(self, tmp_path, no_config):
        response = tmp_path / "response.txt"
        response.write_text(RESPONSE, encoding="utf-8")
        broken = tmp_path / "state.json"
        broken.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["apply", str(response), "-s", str(broken), "-c", str(no_config)])
        assert result.exit_code == 1
        assert broken.read_text(encoding="utf-8") == "{not json"

    def test_missing_response_file(self, tmp_path, state_file, no_config):
        result = runner.invoke(app, ["apply", str(tmp_path / "nope.txt"), "-s", str(state_file), "-c", str(no_config)])
        assert result.exit_code == 1


class TestShow:
    def test_show(self, state_file):
        result = runner.invoke(app, ["show", "--state", str(state_file), "--inventory"])
        assert result.exit_code == 0, result.output
        assert "Lin Feng" in result.output

    def test_relations_and_skills(self, tmp_path, state_with_people):
        path = tmp_path / "people.json"
        learned = process_skill_learned(state_with_people, {"name": "Heavy Strike"}).state
        path.write_text(learned.model_dump_json(), encoding="utf-8")
        result = runner.invoke(app, ["show", "-s", str(path)])
        assert result.exit_code == 0, result.output
        assert "Heavy Strike" in result.output
        assert "Hei Sha" in result.output

    def test_missing_state(self, tmp_path):
        result = runner.invoke(app, ["show", "-s", str(tmp_path / "nope.json")])
        assert result.exit_code == 1


class TestTier:
    def test_base_stats(self, no_config):
        result = runner.invoke(app, ["tier", "Golden Core Layer 3", "-c", str(no_config)])
        assert result.exit_code == 0, result.output
        assert "28722" in result.output

    def test_mortal(self, no_config):
        result = runner.invoke(app, ["tier", "Mortal", "-c", str(no_config)])
        assert result.exit_code == 0, result.output
        assert "mortal" in result.output
