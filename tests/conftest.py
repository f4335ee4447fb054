"""Shared fixtures for the realm_rpg test suite."""
from __future__ import annotations

import random

import pytest

from realm_rpg.engine.command_dispatcher import CommandDispatcher
from realm_rpg.models.character import Person
from realm_rpg.models.state import EngineSettings, GameState


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def narrative_settings() -> EngineSettings:
    return EngineSettings(combat_mode="narrative")


@pytest.fixture
def state(settings) -> GameState:
    """A fresh game at the first rung: 100 vitality, 50 resource, 10 offense."""
    return GameState.new_game("Lin Feng", settings=settings, location="Azure Cloud Sect")


@pytest.fixture
def state_with_people(state) -> GameState:
    return state.model_copy(update={
        "encountered_npcs": [
            Person(name="Elder Mo", description="Treasurer of the sect", affinity=50),
            Person(name="Wolf King", tags=["beast", "boss"]),
            Person(name="Bandit", tags=["bandit"]),
        ],
        "wives": [Person(name="Xiao Yu", category="wife", affinity=25)],
        "slaves": [Person(name="Tie Niu", category="slave", affinity=-10)],
        "prisoners": [Person(name="Hei Sha", category="prisoner", resistance=80, willpower=40)],
    })


@pytest.fixture
def dispatcher() -> CommandDispatcher:
    return CommandDispatcher(rng=random.Random(42))


@pytest.fixture
def seeded_rng():
    return random.Random(42)
