from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from realm_rpg.models.item import Item

CombatOutcome = Literal["victory", "defeat", "escaped", "surrendered"]
Disposition = Literal["kill", "capture", "release"]


class CombatRequest(BaseModel):
    """Pending encounter read by the external combat screen."""

    model_config = ConfigDict(from_attributes=True)

    opponents: list[str] = Field(default_factory=list)
    location: str = ""


class CombatResult(BaseModel):
    """The only data accepted back from the combat screen."""

    model_config = ConfigDict(from_attributes=True)

    outcome: CombatOutcome
    summary: str = ""
    final_vitality: Optional[int] = None
    final_resource: Optional[int] = None
    dispositions: dict[str, Disposition] = Field(default_factory=dict)
    final_inventory: Optional[list[Item]] = None
