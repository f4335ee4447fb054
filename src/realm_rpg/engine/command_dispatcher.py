"""Command dispatcher — routes parsed commands to processors, in order."""
from __future__ import annotations

import logging
import random
from typing import Iterable

from realm_rpg.engine.processor_registry import ProcessorRegistry
from realm_rpg.engine.validators import validate_state
from realm_rpg.models.action import Command, DispatchResult, IgnoredCommand, ProcessResult
from realm_rpg.models.state import GameState

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Applies commands to a state one at a time.

    A command that is unknown, lacks a required argument, or whose processor
    raises is ignored as a whole: the state it saw is carried forward
    unchanged and the command is reported in ``DispatchResult.ignored``.
    """

    def __init__(self, registry: ProcessorRegistry | None = None, rng: random.Random | None = None):
        if registry is None:
            registry = ProcessorRegistry()
            registry.register_defaults()
        self.registry = registry
        self.rng = rng or random.Random()

    def dispatch(self, state: GameState, command: Command) -> ProcessResult | IgnoredCommand:
        spec = self.registry.get(command.name)
        if spec is None:
            logger.warning(f"No processor for command [{command.name}], ignoring")
            return IgnoredCommand(command.name, "unknown command")

        for arg in spec.required:
            value = command.params.get(arg)
            if value is None or not str(value).strip():
                logger.warning(f"[{command.name}] missing required argument '{arg}', ignoring")
                return IgnoredCommand(command.name, f"missing required argument '{arg}'")

        try:
            if spec.uses_rng:
                result = spec.handler(state, command.params, rng=self.rng)
            else:
                result = spec.handler(state, command.params)
            return ProcessResult(
                state=validate_state(result.state),
                index_updates=result.index_updates,
                messages=result.messages,
            )
        except Exception as e:
            logger.exception(f"Error processing [{command.name}]")
            return IgnoredCommand(command.name, f"processor error: {e}")

    def dispatch_all(self, state: GameState, commands: Iterable[Command]) -> DispatchResult:
        """Apply *commands* strictly in order; later commands see earlier effects."""
        result = DispatchResult(state=state)
        for command in commands:
            outcome = self.dispatch(result.state, command)
            if isinstance(outcome, IgnoredCommand):
                result.ignored.append(outcome)
                continue
            result.state = outcome.state
            result.index_updates.extend(outcome.index_updates)
            result.messages.extend(outcome.messages)
        return result
