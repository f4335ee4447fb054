"""Tier ladder: parsing and resolving hierarchical tier labels.

A tier label is a major tier name optionally followed by a minor tier name,
e.g. ``"Golden Core Layer 3"``. Labels are matched case-insensitively by
longest major-tier prefix; anything unrecognised falls back to the lowest
major tier.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MORTAL_LABEL = "Mortal"

DEFAULT_MAJOR_TIERS = [
    "Qi Refining",
    "Foundation Establishment",
    "Golden Core",
    "Nascent Soul",
    "Spirit Severing",
]
DEFAULT_MINOR_TIERS = [f"Layer {i}" for i in range(1, 10)]

# "Layer 1 - Layer 9" style ranges share a prefix and differ only in the number
_RANGE_PATTERN = re.compile(r"^(.*?)(\d+)\s*$")
_SEPARATOR = re.compile(r"\s+[-–—]\s+|\s*,\s*")
_MAX_RANGE_SPAN = 100


@dataclass(frozen=True)
class TierPosition:
    major_index: int
    minor_index: int
    major_count: int
    minor_count: int
    known: bool = True
    minor_known: bool = False

    @property
    def absolute(self) -> int:
        """Linear position across the whole ladder."""
        return self.major_index * self.minor_count + self.minor_index

    @property
    def is_last_minor(self) -> bool:
        return self.minor_index >= self.minor_count - 1

    @property
    def is_top_major(self) -> bool:
        return self.major_index >= self.major_count - 1


def parse_tier_string(value: str | list[str] | None) -> list[str]:
    """Expand a tier ladder description into a list of tier names.

    Accepts a list (returned cleaned), a ``"A - B - C"`` string, or a numeric
    range ``"Layer 1 - Layer 9"`` where both ends share a prefix.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]

    parts = [p.strip() for p in _SEPARATOR.split(value) if p.strip()]
    if len(parts) == 2:
        start = _RANGE_PATTERN.match(parts[0])
        end = _RANGE_PATTERN.match(parts[1])
        if start and end and start.group(1).strip() == end.group(1).strip():
            prefix = start.group(1)
            lo, hi = int(start.group(2)), int(end.group(2))
            if lo <= hi and hi - lo < _MAX_RANGE_SPAN:
                return [f"{prefix}{n}".strip() for n in range(lo, hi + 1)]
    return parts


def is_mortal(label: str | None, mortal_label: str = MORTAL_LABEL) -> bool:
    return bool(label) and label.strip().casefold() == mortal_label.casefold()


def resolve_tier(label: str | None, major_tiers: list[str], minor_tiers: list[str]) -> TierPosition:
    """Decompose *label* into (major, minor) indices on the ladder.

    The longest matching major-tier prefix wins; the remainder is matched
    against the minor tiers. A missing or unknown minor means the first one.
    Unknown labels resolve to the lowest major tier.
    """
    major_count = max(1, len(major_tiers))
    minor_count = max(1, len(minor_tiers))
    text = (label or "").strip().casefold()

    major_index = 0
    matched_len = -1
    for i, name in enumerate(major_tiers):
        key = name.casefold()
        if text.startswith(key) and len(key) > matched_len:
            major_index = i
            matched_len = len(key)
    if matched_len < 0:
        if text:
            logger.debug(f"Unknown tier label '{label}', using lowest major tier")
        return TierPosition(0, 0, major_count, minor_count, known=False)

    rest = text[matched_len:].strip(" -–—,")
    minor_index = 0
    minor_known = False
    if rest:
        best = -1
        for i, name in enumerate(minor_tiers):
            key = name.casefold()
            if rest == key:
                minor_index = i
                minor_known = True
                break
            if rest.startswith(key) and len(key) > best:
                minor_index = i
                minor_known = True
                best = len(key)
    return TierPosition(major_index, minor_index, major_count, minor_count, minor_known=minor_known)


def tier_label(major_index: int, minor_index: int, major_tiers: list[str], minor_tiers: list[str]) -> str:
    """Compose the display label for a ladder position (indices are clamped)."""
    if not major_tiers:
        return MORTAL_LABEL
    major = major_tiers[max(0, min(major_index, len(major_tiers) - 1))]
    if not minor_tiers:
        return major
    minor = minor_tiers[max(0, min(minor_index, len(minor_tiers) - 1))]
    return f"{major} {minor}"


def tier_value(
    major_index: int,
    minor_index: int = 0,
    minor_count: int = 1,
    base: float = 100.0,
    multiplier: float = 5.0,
    decay: float = 0.3,
    floor: float = 3.0,
) -> float:
    """Decaying-geometric value of a ladder position.

    Starting from *base*, each major step multiplies by
    ``max(floor, multiplier - decay*(i-1))``; minor steps add a linear share
    of the major value.
    """
    value = base
    for i in range(1, major_index + 1):
        value *= max(floor, multiplier - decay * (i - 1))
    return value + minor_index * value / max(1, minor_count)
