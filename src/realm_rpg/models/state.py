from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from realm_rpg.mechanics.reputation import get_tier
from realm_rpg.mechanics.tiers import (
    DEFAULT_MAJOR_TIERS,
    DEFAULT_MINOR_TIERS,
    MORTAL_LABEL,
    parse_tier_string,
)
from realm_rpg.models.character import Person, StatBlock
from realm_rpg.models.combat import CombatRequest
from realm_rpg.models.entity import Faction, LoreEntry
from realm_rpg.models.item import Item, Skill

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enable_stats: bool = True
    combat_mode: Literal["mechanical", "narrative"] = "mechanical"
    major_tiers: list[str] = Field(default_factory=lambda: list(DEFAULT_MAJOR_TIERS))
    minor_tiers: list[str] = Field(default_factory=lambda: list(DEFAULT_MINOR_TIERS))
    mortal_label: str = MORTAL_LABEL

    @field_validator("major_tiers", mode="before")
    @classmethod
    def _parse_major(cls, value):
        return parse_tier_string(value) or list(DEFAULT_MAJOR_TIERS)

    @field_validator("minor_tiers", mode="before")
    @classmethod
    def _parse_minor(cls, value):
        return parse_tier_string(value) or list(DEFAULT_MINOR_TIERS)

    @property
    def minor_count(self) -> int:
        return len(self.minor_tiers)


class Reputation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: int = Field(default=0, ge=-100, le=100)

    @property
    def tier(self) -> str:
        return get_tier(self.score)


class GameState(BaseModel):
    """The single document every command reads and rewrites."""

    model_config = ConfigDict(from_attributes=True)

    player: StatBlock = Field(default_factory=StatBlock)
    player_name: str = ""
    encountered_npcs: list[Person] = Field(default_factory=list)
    companions: list[Person] = Field(default_factory=list)
    wives: list[Person] = Field(default_factory=list)
    slaves: list[Person] = Field(default_factory=list)
    prisoners: list[Person] = Field(default_factory=list)
    inventory: list[Item] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    discovered_entities: list[LoreEntry] = Field(default_factory=list)
    factions: list[Faction] = Field(default_factory=list)
    memories: list[str] = Field(default_factory=list)
    pending_combat: Optional[CombatRequest] = None
    reputation: Reputation = Field(default_factory=Reputation)
    world_time: int = 0  # minutes since the calendar epoch
    current_location: str = ""
    turn: int = 0
    settings: EngineSettings = Field(default_factory=EngineSettings)

    @classmethod
    def new_game(
        cls,
        player_name: str,
        settings: EngineSettings | None = None,
        tier: str | None = None,
        location: str = "",
    ) -> GameState:
        """Create a fresh state with the player at *tier* (default: the first rung)."""
        from realm_rpg.mechanics.progression import rebase_stats
        from realm_rpg.mechanics.tiers import tier_label

        settings = settings or EngineSettings()
        label = tier or tier_label(0, 0, settings.major_tiers, settings.minor_tiers)
        player = StatBlock(tier=label)
        if settings.enable_stats:
            player = rebase_stats(player, label, settings, [])
        logger.info(f"New game for {player_name} at {label}")
        return cls(
            player=player,
            player_name=player_name,
            current_location=location,
            settings=settings,
        )
