"""Parse model responses into narration and bracketed commands."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from realm_rpg.models.action import Command

logger = logging.getLogger(__name__)

# key="double", key='single' or key=bare (no whitespace, comma or closing bracket)
_PARAM_PATTERN = re.compile(r"""([\w.]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s,\]]+))""")
_TAG_PATTERN = re.compile(r"\[(\w+):\s*([\s\S]*?)\]")
_META_TALK = re.compile(r"^(I will|Here is|Based on|Analyzing|Strategizing|Confidence)", re.I)
_EMPTY_MARKERS = {"EMPTY", "EMPTY.", "NONE"}

_BLOCKS = ("thinking", "world_sim", "narration", "data_tags", "entity_definitions")


def _block_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"<{name}>([\s\S]*?)</{name}>", re.I)


_BLOCK_PATTERNS = {name: _block_pattern(name) for name in _BLOCKS}


@dataclass
class ParsedResponse:
    narration: str = ""
    commands: list[Command] = field(default_factory=list)
    world_sim: str | None = None
    thinking: str = ""


class OutputParser:
    @staticmethod
    def parse_tag_params(text: str) -> dict[str, str]:
        """Tokenize a command's argument list into a key/value map.

        Values are returned as literal strings; callers coerce them. Fragments
        that do not look like ``key=value`` are skipped and a later duplicate
        key overwrites an earlier one. Never raises.
        """
        params: dict[str, str] = {}
        if not isinstance(text, str):
            return params
        for match in _PARAM_PATTERN.finditer(text):
            key = match.group(1)
            value = next((g for g in match.group(2, 3, 4) if g is not None), "")
            params[key] = value
        return params

    @staticmethod
    def parse_commands(text: str) -> list[Command]:
        """Find every ``[NAME: args]`` tag in *text*, in order."""
        commands: list[Command] = []
        for match in _TAG_PATTERN.finditer(text or ""):
            commands.append(Command(
                name=match.group(1).upper(),
                params=OutputParser.parse_tag_params(match.group(2).strip()),
                raw=match.group(0),
            ))
        return commands

    @staticmethod
    def _block(raw: str, name: str) -> str | None:
        match = _BLOCK_PATTERNS[name].search(raw)
        return match.group(1).strip() if match else None

    @staticmethod
    def parse_response(raw: str) -> ParsedResponse:
        """Split a raw model response into narration, commands and side blocks.

        Commands come from ``<data_tags>`` (or the whole text when that block
        is missing), then from ``<entity_definitions>``.
        """
        raw = raw or ""
        thinking = OutputParser._block(raw, "thinking") or ""

        world_sim = OutputParser._block(raw, "world_sim")
        if world_sim is not None and (not world_sim or world_sim.upper() in _EMPTY_MARKERS):
            world_sim = None

        narration = OutputParser._block(raw, "narration") or ""
        if not narration and "<narration>" not in raw.lower():
            fallback = raw
            for name in ("thinking", "world_sim", "data_tags", "entity_definitions"):
                fallback = _BLOCK_PATTERNS[name].sub("", fallback)
            fallback = _TAG_PATTERN.sub("", fallback).strip()
            if _META_TALK.match(fallback):
                logger.debug("Dropping untagged text that looks like model meta-talk")
            else:
                narration = fallback

        data_tags = OutputParser._block(raw, "data_tags")
        entity_block = OutputParser._block(raw, "entity_definitions")
        if data_tags is None:
            data_tags = raw
            for name in ("thinking", "entity_definitions"):
                data_tags = _BLOCK_PATTERNS[name].sub("", data_tags)
        commands = OutputParser.parse_commands(data_tags)
        if entity_block:
            commands.extend(OutputParser.parse_commands(entity_block))

        logger.debug(f"Parsed {len(commands)} command(s) from response")
        return ParsedResponse(narration=narration, commands=commands, world_sim=world_sim, thinking=thinking)
