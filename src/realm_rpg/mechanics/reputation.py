"""Reputation mechanics: pure functions, no I/O."""
from __future__ import annotations

REPUTATION_TIERS = {
    (-100, -61): "infamous",
    (-60, -21): "notorious",
    (-20, -6): "distrusted",
    (-5, 5): "unknown",
    (6, 20): "recognized",
    (21, 60): "respected",
    (61, 100): "renowned",
}

# A single REPUTATION_CHANGED tag can never move the score further than this
MAX_REPUTATION_CHANGE_PER_COMMAND = 20


def get_tier(reputation: int) -> str:
    """Return the named tier for a reputation value."""
    rep = clamp_reputation(reputation)
    for (low, high), tier_name in REPUTATION_TIERS.items():
        if low <= rep <= high:
            return tier_name
    return "unknown"


def clamp_reputation(value: int) -> int:
    """Clamp reputation to [-100, 100]."""
    return max(-100, min(100, value))


def adjust_reputation(current: int, delta: int) -> int:
    """Adjust reputation by delta and clamp."""
    return clamp_reputation(current + delta)


def apply_reputation_change(current: int, delta: int) -> int:
    """Apply a model-requested delta, bounded per command and overall."""
    bounded = max(-MAX_REPUTATION_CHANGE_PER_COMMAND, min(MAX_REPUTATION_CHANGE_PER_COMMAND, delta))
    return adjust_reputation(current, bounded)
