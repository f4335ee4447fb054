from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ENTITY_TYPES = ("npc", "item", "location", "faction", "lore")


class LoreEntry(BaseModel):
    """A discovered location, lore fragment, or generic defined entity."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    entity_type: str = "lore"
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    location: str = ""


class Faction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
