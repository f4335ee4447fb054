"""Turn loop — the host-facing pipeline from raw model text to a new state.

Steps per turn:
1. Split the response into narration and commands.
2. Dispatch the commands in order.
3. Hand index updates to the indexer.
4. End-of-turn ticks: status durations, NPC progression, turn counter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from realm_rpg.engine.command_dispatcher import CommandDispatcher
from realm_rpg.engine.validators import validate_state
from realm_rpg.llm.output_parser import OutputParser
from realm_rpg.mechanics.npc_progression import progress_npcs
from realm_rpg.mechanics.progression import calculate_effective_stats
from realm_rpg.models.action import Command, IgnoredCommand, IndexUpdate
from realm_rpg.models.combat import CombatResult
from realm_rpg.models.state import GameState
from realm_rpg.processors.combat import apply_combat_result

if TYPE_CHECKING:
    from realm_rpg.rag.indexer import Indexer

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    narration: str = ""
    world_sim: str | None = None
    commands: list[Command] = field(default_factory=list)
    ignored: list[IgnoredCommand] = field(default_factory=list)
    index_updates: list[IndexUpdate] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


class TurnLoop:
    def __init__(
        self,
        state: GameState,
        dispatcher: CommandDispatcher | None = None,
        indexer: Indexer | None = None,
    ):
        self.state = state
        self.dispatcher = dispatcher or CommandDispatcher()
        self.indexer = indexer
        self.parser = OutputParser()

    def process_response(self, raw: str, end_turn: bool = True) -> TurnResult:
        parsed = self.parser.parse_response(raw)
        result = self.apply_commands(parsed.commands, end_turn=end_turn)
        result.narration = parsed.narration
        result.world_sim = parsed.world_sim
        return result

    def apply_commands(self, commands: list[Command], end_turn: bool = True) -> TurnResult:
        dispatched = self.dispatcher.dispatch_all(self.state, commands)
        for ignored in dispatched.ignored:
            logger.info(f"Ignored [{ignored.name}]: {ignored.reason}")

        self._publish(dispatched.index_updates)
        self.state = dispatched.state
        messages = list(dispatched.messages)
        if end_turn:
            messages.extend(self.end_turn())
        return TurnResult(
            commands=list(commands),
            ignored=dispatched.ignored,
            index_updates=dispatched.index_updates,
            messages=messages,
        )

    def apply_combat_result(self, result: CombatResult) -> TurnResult:
        """Accept the combat screen's result for the pending encounter."""
        if self.state.pending_combat is None:
            logger.warning("Combat result received with no pending combat")
        processed = apply_combat_result(self.state, result)
        self.state = validate_state(processed.state)
        return TurnResult(messages=processed.messages)

    def end_turn(self) -> list[str]:
        """Tick status durations, progress NPCs and advance the turn counter."""
        messages: list[str] = []
        player = self.state.player

        remaining = []
        for effect in player.status_effects:
            if effect.duration_turns is None:
                remaining.append(effect)
            elif effect.duration_turns > 1:
                remaining.append(effect.model_copy(update={"duration_turns": effect.duration_turns - 1}))
            else:
                messages.append(f"Status ended: {effect.name}")
        if messages:
            player = calculate_effective_stats(player.model_copy(update={"status_effects": remaining}), self.state.inventory)
        else:
            player = player.model_copy(update={"status_effects": remaining})

        state = self.state.model_copy(update={"player": player})
        state, npc_messages = progress_npcs(state)
        messages.extend(npc_messages)
        self.state = validate_state(state.model_copy(update={"turn": state.turn + 1}))
        return messages

    def _publish(self, updates: list[IndexUpdate]) -> None:
        if not self.indexer or not updates:
            return
        try:
            self.indexer.apply_updates(updates)
        except Exception:
            logger.exception("Failed to index entity updates")
