"""Processor registry — maps command tags to processor functions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from realm_rpg.models.action import ProcessResult

logger = logging.getLogger(__name__)

Processor = Callable[..., ProcessResult]


@dataclass(frozen=True)
class ProcessorSpec:
    tag: str
    handler: Processor
    required: tuple[str, ...] = ()
    uses_rng: bool = False


class ProcessorRegistry:
    def __init__(self) -> None:
        self._processors: dict[str, ProcessorSpec] = {}

    def register(
        self,
        tag: str,
        handler: Processor,
        required: tuple[str, ...] = (),
        uses_rng: bool = False,
    ) -> None:
        key = tag.upper()
        if key in self._processors:
            logger.debug(f"Replacing processor for {key}")
        self._processors[key] = ProcessorSpec(key, handler, tuple(required), uses_rng)

    def get(self, tag: str) -> ProcessorSpec | None:
        return self._processors.get(tag.upper())

    def tags(self) -> list[str]:
        return sorted(self._processors)

    def register_defaults(self) -> None:
        from realm_rpg.processors import affinity, combat, entity, inventory, npc, player, skill, world

        self.register("NPC_NEW", npc.process_npc_new, ("name",), uses_rng=True)
        self.register("NPC_UPDATE", npc.process_npc_update, ("name",), uses_rng=True)
        self.register("MEM_FLAG", npc.process_mem_flag, ("npc", "flag", "value"), uses_rng=True)
        self.register("NPC_EMOTION", npc.process_npc_emotion, ("name", "state"), uses_rng=True)
        self.register("COMPANION_NEW", npc.process_companion_new, ("name",), uses_rng=True)
        self.register("COMPANION_REMOVE", npc.process_companion_remove, ("name",))

        self.register("WIFE_UPDATE", affinity.process_wife_update, ("name", "affinity"))
        self.register("SLAVE_UPDATE", affinity.process_slave_update, ("name", "affinity"))
        self.register("PRISONER_UPDATE", affinity.process_prisoner_update, ("name", "affinity"))

        self.register("FACTION_UPDATE", entity.process_faction_update, ("name",))
        self.register("LOCATION_DISCOVERED", entity.process_location_discovered, ("name",))
        self.register("LORE_DISCOVERED", entity.process_lore_discovered, ("name",))
        self.register("ENTITY_DEFINITION", entity.process_entity_definition, ("name",))

        self.register("ITEM_ADD", inventory.process_item_add, ("name",))
        self.register("ITEM_REMOVE", inventory.process_item_remove, ("name",))
        self.register("ITEM_EQUIP", inventory.process_item_equip, ("name",))
        self.register("ITEM_UNEQUIP", inventory.process_item_unequip, ("name",))

        self.register("SKILL_LEARNED", skill.process_skill_learned, ("name",))

        self.register("STAT_CHANGE", player.process_stat_change, ("name",))
        self.register("STATUS_ACQUIRED", player.process_status_acquired, ("name",))
        self.register("STATUS_REMOVED", player.process_status_removed, ("name",))
        self.register("REPUTATION_CHANGED", player.process_reputation_changed, ("score",))
        self.register("BREAKTHROUGH_BEGIN", player.process_breakthrough_begin)
        self.register("BREAKTHROUGH_RESULT", player.process_breakthrough_result, ("success",))

        self.register("BEGIN_COMBAT", combat.process_begin_combat, ("opponentIds",))
        self.register("COMBAT_END", combat.process_combat_end, ("outcome",))

        self.register("TIME_PASS", world.process_time_pass)
        self.register("WORLD_TIME_SET", world.process_world_time_set)
        self.register("MEMORY_ADD", world.process_memory_add, ("content",))
