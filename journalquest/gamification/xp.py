"""XP and leveling arithmetic for JournalQuest.

XP Awards (per journal entry)
-----------------------------
- First entry of a calendar day:     +10 XP
- Streak grew with this entry:       +streak x 2 XP
- Focus time:                        +1 XP per 5 focus minutes
  (awarded on every entry, including same-day duplicates)

Leveling Curve
--------------
Flat: every level costs 100 XP.  Below 100 XP the player is level 0,
``floor(xp / 100)`` after that.  The per-level cost lives in
:data:`XP_PER_LEVEL` so it's trivial to re-tune.

Level Titles
------------
Display-only flavour names, one per band of levels:
    0-2  Blank Page
    3-4  Daily Scribbler
    5-6  Steady Chronicler
    7-9  Reflective Scholar
   10+   Master Journaler
"""

from __future__ import annotations

from dataclasses import dataclass


# ── leveling constants (easy to adjust) ──────────────────────────────────

XP_PER_LEVEL = 100


# ── entry reward constants ───────────────────────────────────────────────

XP_NEW_DAY = 10             # first entry of a calendar day
XP_STREAK_MULTIPLIER = 2    # x new streak length, only when it grew
FOCUS_MINUTES_PER_XP = 5


# ── level math ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class XPProgress:
    """Where the player sits inside their current level."""

    current: int
    required: int
    percentage: float


def level_for_xp(xp: int) -> int:
    """Return the level a player is at given their total XP."""
    if xp < XP_PER_LEVEL:
        return 0
    return xp // XP_PER_LEVEL


def xp_threshold(level: int) -> int:
    """Total cumulative XP required to *reach* the given level."""
    return level * XP_PER_LEVEL


def xp_for_next_level(xp: int) -> int:
    """Cumulative XP at which the next level starts."""
    return xp_threshold(level_for_xp(xp) + 1)


def xp_progress(xp: int) -> XPProgress:
    """Return earned/needed XP inside the current level."""
    level = level_for_xp(xp)
    floor = xp_threshold(level)
    ceiling = xp_threshold(level + 1)
    current = xp - floor
    required = ceiling - floor
    return XPProgress(
        current=current,
        required=required,
        percentage=min(current / required * 100, 100),
    )


# ── entry rewards ────────────────────────────────────────────────────────


def entry_xp_reward(
    *,
    is_new_day: bool,
    streak_grew: bool,
    new_streak: int,
    focus_minutes: float = 0,
) -> int:
    """XP earned by a single journal entry."""
    reward = 0
    if is_new_day:
        reward += XP_NEW_DAY
        if streak_grew:
            reward += new_streak * XP_STREAK_MULTIPLIER
    if focus_minutes:
        reward += int(focus_minutes // FOCUS_MINUTES_PER_XP)
    return reward


# ── level titles ─────────────────────────────────────────────────────────

# Ordered descending so the first match wins.
LEVEL_TITLES: list[tuple[int, str]] = [
    (10, "Master Journaler"),
    (7,  "Reflective Scholar"),
    (5,  "Steady Chronicler"),
    (3,  "Daily Scribbler"),
    (0,  "Blank Page"),
]


def title_for_level(level: int) -> str:
    """Return the flavour title for *level*."""
    for threshold, title in LEVEL_TITLES:
        if level >= threshold:
            return title
    return "Blank Page"
