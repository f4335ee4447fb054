from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """An inventory stack. Bonuses are flat (``"5"``) or percentage (``"10%"``)."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str = ""
    quantity: int = Field(default=1, ge=1)
    category: str = "Material"
    rarity: str = "Common"
    tier: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    equipped: bool = False
    stat_bonuses: dict[str, str] = Field(default_factory=dict)
    special_effects: list[str] = Field(default_factory=list)
    value: Optional[int] = None


class Skill(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str = ""
    resource_cost: int = 0
    effect: str = ""
    proficiency: int = 0
    max_proficiency: int = 100
    proficiency_tier: str = "Novice"
