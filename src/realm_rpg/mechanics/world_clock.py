"""World clock: in-game calendar measured in minutes since the epoch.

The calendar has 12 months of 30 days. Time only moves forward.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440  # 24 * 60
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12
MINUTES_PER_MONTH = MINUTES_PER_DAY * DAYS_PER_MONTH
MINUTES_PER_YEAR = MINUTES_PER_MONTH * MONTHS_PER_YEAR

# A single TIME_PASS may not skip more than this
MAX_ADVANCE_MINUTES = 5 * MINUTES_PER_YEAR

DURATION_MINUTES = {
    "short": 60,
    "medium": 240,
    "long": 720,
}

# Period boundaries: (start_hour, end_hour_exclusive)
_PERIODS = [
    (5, 8, "dawn"),
    (8, 12, "morning"),
    (12, 14, "midday"),
    (14, 17, "afternoon"),
    (17, 20, "evening"),
    (20, 23, "night"),
    # late_night wraps: 23-5
]


def to_minutes(years: int = 0, months: int = 0, days: int = 0, hours: int = 0, minutes: int = 0) -> int:
    return (
        years * MINUTES_PER_YEAR
        + months * MINUTES_PER_MONTH
        + days * MINUTES_PER_DAY
        + hours * MINUTES_PER_HOUR
        + minutes
    )


def advance_by(current_minutes: int, minutes: int) -> int:
    """Advance by *minutes*, clamped to [0, MAX_ADVANCE_MINUTES]."""
    step = max(0, min(MAX_ADVANCE_MINUTES, minutes))
    if step != minutes:
        logger.warning(f"Time advance of {minutes} minutes clamped to {step}")
    return current_minutes + step


def set_time(current_minutes: int, year: int | None = None, month: int | None = None,
             day: int | None = None, hour: int | None = None, minute: int | None = None) -> int:
    """Set calendar fields (1-based year/month/day). Never moves backwards.

    Omitted fields keep their current value.
    """
    cur_year, cur_month, cur_day, cur_hour, cur_minute = decompose(current_minutes)
    year = cur_year if year is None else max(1, year)
    month = cur_month if month is None else max(1, min(MONTHS_PER_YEAR, month))
    day = cur_day if day is None else max(1, min(DAYS_PER_MONTH, day))
    hour = cur_hour if hour is None else max(0, min(23, hour))
    minute = cur_minute if minute is None else max(0, min(59, minute))
    target = to_minutes(year - 1, month - 1, day - 1, hour, minute)
    if target < current_minutes:
        logger.warning("Ignoring attempt to move the world clock backwards")
        return current_minutes
    return target


def decompose(total_minutes: int) -> tuple[int, int, int, int, int]:
    """Split into (year, month, day, hour, minute); year/month/day are 1-based."""
    total = max(0, total_minutes)
    year, rest = divmod(total, MINUTES_PER_YEAR)
    month, rest = divmod(rest, MINUTES_PER_MONTH)
    day, rest = divmod(rest, MINUTES_PER_DAY)
    hour, minute = divmod(rest, MINUTES_PER_HOUR)
    return year + 1, month + 1, day + 1, hour, minute


def get_hour(total_minutes: int) -> int:
    """Hour of day (0-23)."""
    return (total_minutes % MINUTES_PER_DAY) // 60


def get_period(total_minutes: int) -> str:
    """Return the current time period name."""
    hour = get_hour(total_minutes)
    for start, end, name in _PERIODS:
        if start <= hour < end:
            return name
    return "late_night"  # 23-4


def format_time(total_minutes: int) -> str:
    """Human-readable time string, e.g. 'Morning, Day 2 Month 1 Year 1 (8:30)'."""
    year, month, day, hour, minute = decompose(total_minutes)
    period = get_period(total_minutes).replace("_", " ").title()
    return f"{period}, Day {day} Month {month} Year {year} ({hour}:{minute:02d})"
