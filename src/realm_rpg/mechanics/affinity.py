"""Affinity system: bounded relationship scores between the player and persons."""
from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MIN_AFFINITY = -100
MAX_AFFINITY = 100
# Largest move a single command may make, whatever the model asked for
MAX_AFFINITY_CHANGE_PER_TURN = 10

# Affinity tiers ordered by threshold
AFFINITY_TIERS = [
    {"name": "Sworn Enemy", "min_score": -100},
    {"name": "Hostile", "min_score": -60},
    {"name": "Wary", "min_score": -20},
    {"name": "Stranger", "min_score": -5},
    {"name": "Acquaintance", "min_score": 5},
    {"name": "Friend", "min_score": 30},
    {"name": "Close Friend", "min_score": 60},
    {"name": "Devoted", "min_score": 90},
]

_RELATIVE = re.compile(r"^\s*([+-])=\s*([+-]?\d+(?:\.\d+)?)\s*$")
_ABSOLUTE = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*$")


def get_tier(score: int) -> dict:
    """Get the affinity tier for a given score."""
    tier = AFFINITY_TIERS[0]
    for t in AFFINITY_TIERS:
        if score >= t["min_score"]:
            tier = t
    return tier


def get_tier_name(score: int) -> str:
    """Get just the tier name for a score."""
    return get_tier(score)["name"]


def clamp_affinity(value: float) -> int:
    """Clamp to [-100, 100] and round to int."""
    return int(round(max(MIN_AFFINITY, min(MAX_AFFINITY, value))))


def apply_affinity_change(current: int, expression: str | int | float | None) -> int:
    """Apply an affinity expression to *current*.

    ``"+=N"`` / ``"-=N"`` are relative, anything numeric is an absolute target.
    Either way the actual move is limited to +/-10 and the result to
    [-100, 100]. Unparseable expressions leave the score unchanged.

    >>> apply_affinity_change(50, "+=999")
    60
    """
    current = clamp_affinity(current)
    if expression is None:
        return current
    if isinstance(expression, bool):
        return current
    if isinstance(expression, (int, float)):
        target = float(expression)
    else:
        text = str(expression)
        rel = _RELATIVE.match(text)
        if rel:
            amount = float(rel.group(2))
            target = current + amount if rel.group(1) == "+" else current - amount
        else:
            absolute = _ABSOLUTE.match(text)
            if not absolute:
                logger.warning(f"Unparseable affinity expression: {expression!r}")
                return current
            target = float(absolute.group(1))

    delta = max(-MAX_AFFINITY_CHANGE_PER_TURN, min(MAX_AFFINITY_CHANGE_PER_TURN, target - current))
    return clamp_affinity(current + delta)
