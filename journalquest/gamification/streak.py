"""Day-streak calculation.

A streak counts consecutive calendar days with at least one entry.
Two entries on the same day never bump it; skipping a day (or
backdating an entry before the last one) starts over at 1.

Streaks also decay silently: if the last entry is neither today nor
yesterday when a session starts, the streak drops to 0 while the
longest streak is left alone.
"""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from .dates import is_same_day, is_yesterday, parse_entry_date


class StreakResult(NamedTuple):
    streak: int
    is_new_day: bool


def calculate_streak(
    last_entry_date: str | datetime | None,
    current_streak: int,
    new_entry_date: str | datetime,
) -> StreakResult:
    """Return the streak after an entry dated *new_entry_date*."""
    last = parse_entry_date(last_entry_date)
    new = parse_entry_date(new_entry_date)

    if last is None:
        return StreakResult(1, True)
    if new is None:
        # An unreadable date can't continue anything.
        return StreakResult(1, True)

    if is_same_day(last, new):
        return StreakResult(current_streak, False)
    if is_yesterday(last, new):
        return StreakResult(current_streak + 1, True)
    return StreakResult(1, True)


def is_streak_stale(last_entry_date: str | datetime | None, now: datetime) -> bool:
    """True when the last entry is neither today nor yesterday."""
    last = parse_entry_date(last_entry_date)
    if last is None:
        return False
    return not (is_same_day(last, now) or is_yesterday(last, now))
