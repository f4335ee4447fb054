from __future__ import annotations

import uuid
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ProgressionState(str, Enum):
    NORMAL = "normal"
    AT_PEAK = "at_peak"
    IN_TRIBULATION = "in_tribulation"


class StatusEffect(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str = ""
    kind: Literal["buff", "debuff", "neutral"] = "neutral"
    duration_turns: Optional[int] = None  # None = until removed
    stat_modifiers: dict[str, str] = Field(default_factory=dict)


class Emotion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    intensity: int = Field(default=50, ge=0, le=100)


class StatBlock(BaseModel):
    """Current and base stats for the player or a person.

    Current values (``max_vitality``, ``offense``...) are derived from the
    ``base_*`` fields plus bonuses by ``calculate_effective_stats``.
    """

    model_config = ConfigDict(from_attributes=True)

    vitality: int = 100
    max_vitality: int = 100
    resource: int = 50
    max_resource: int = 50
    offense: int = 10
    defense: int = 5
    speed: int = 10
    experience: int = 0
    experience_to_next: int = 100
    currency: int = 0
    tier: str = ""
    at_peak: bool = False
    in_tribulation: bool = False

    base_max_vitality: int = 100
    base_max_resource: int = 50
    base_offense: int = 10
    base_defense: int = 5
    base_speed: int = 10
    base_experience_to_next: int = 100

    permanent_bonuses: dict[str, float] = Field(default_factory=dict)
    status_effects: list[StatusEffect] = Field(default_factory=list)
    combo_streak: int = 0
    lifespan: Optional[int] = None
    max_lifespan: Optional[int] = None

    @property
    def progression_state(self) -> ProgressionState:
        if self.in_tribulation:
            return ProgressionState.IN_TRIBULATION
        if self.at_peak:
            return ProgressionState.AT_PEAK
        return ProgressionState.NORMAL


MemoryValue = Union[bool, int, float, str]


class Person(BaseModel):
    """An NPC, companion, wife, slave or prisoner."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    personality: str = ""
    thoughts_on_player: str = ""
    physical_state: str = ""
    category: str = "npc"
    location: str = ""
    tags: list[str] = Field(default_factory=list)
    tier: Optional[str] = None
    stats: Optional[StatBlock] = None
    affinity: int = Field(default=0, ge=-100, le=100)
    memory_flags: dict[str, MemoryValue] = Field(default_factory=dict)
    emotion: Optional[Emotion] = None
    archetype: Optional[str] = None
    aptitude: Optional[str] = None
    physique: Optional[str] = None
    spiritual_root: Optional[str] = None
    race: Optional[str] = None
    title: Optional[str] = None
    resistance: int = Field(default=0, ge=0, le=100)
    willpower: int = Field(default=0, ge=0, le=100)
    is_alive: bool = True
    bottleneck_turns: int = 0
