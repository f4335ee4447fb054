from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from realm_rpg.models.state import GameState


@dataclass
class Command:
    """One ``[NAME: args]`` tag lifted from a model response."""

    name: str
    params: dict[str, str] = field(default_factory=dict)
    raw: str = ""


@dataclass
class IndexUpdate:
    id: str
    type: str
    content: str


@dataclass
class IgnoredCommand:
    name: str
    reason: str


@dataclass
class ProcessResult:
    """What a processor hands back: the new state plus side outputs."""

    state: GameState
    index_updates: list[IndexUpdate] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


@dataclass
class DispatchResult:
    state: GameState
    index_updates: list[IndexUpdate] = field(default_factory=list)
    ignored: list[IgnoredCommand] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
