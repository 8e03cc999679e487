"""One-time achievements for JournalQuest.

Achievement Catalog
-------------------
    streak-warrior     7-day streak                  (streak)
    math-mastery       10 math-tagged entries        (math_tagged_entries)
    deep-focus         240 minutes of total focus    (total_focus_minutes)
    consistency-king   20 journal entries            (total_entries)

Rules
-----
Locked achievements track ``progress`` against their counter and unlock
as soon as it reaches the requirement; ``unlocked_at`` is stamped at
that moment only.  Once unlocked an achievement is frozen: it is never
recomputed and never re-locked, even if the counter later drops.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from .dates import to_iso
from .state import Achievement

logger = logging.getLogger(__name__)


# ── catalog ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AchievementDef:
    key: str
    title: str
    description: str
    icon: str
    requirement: int
    counter: str   # attribute of AchievementCounters


@dataclass(frozen=True)
class AchievementCounters:
    """The aggregate counters achievements are measured against."""

    streak: int = 0
    math_tagged_entries: int = 0
    total_focus_minutes: float = 0
    total_entries: int = 0


ACHIEVEMENTS: list[AchievementDef] = [
    AchievementDef(
        "streak-warrior", "7-Day Streak Warrior",
        "Maintain a 7-day journaling streak", "🔥", 7, "streak",
    ),
    AchievementDef(
        "math-mastery", "Math Mastery",
        "Create 10 math-tagged entries", "🧮", 10, "math_tagged_entries",
    ),
    AchievementDef(
        "deep-focus", "Deep Focus",
        "Accumulate 4 hours of total focus time", "🎯", 240,
        "total_focus_minutes",
    ),
    AchievementDef(
        "consistency-king", "Consistency King",
        "Create 20 journal entries", "👑", 20, "total_entries",
    ),
]

_ACHIEVEMENT_MAP: dict[str, AchievementDef] = {a.key: a for a in ACHIEVEMENTS}


def get_achievement_def(key: str) -> AchievementDef | None:
    return _ACHIEVEMENT_MAP.get(key)


def default_achievements() -> dict[str, Achievement]:
    return {
        d.key: Achievement(
            id=d.key,
            title=d.title,
            description=d.description,
            icon=d.icon,
            requirement=d.requirement,
        )
        for d in ACHIEVEMENTS
    }


# ── evaluator ────────────────────────────────────────────────────────────


def evaluate_achievements(
    achievements: dict[str, Achievement],
    counters: AchievementCounters,
    now: datetime,
) -> tuple[dict[str, Achievement], list[str]]:
    """Recompute every locked achievement against *counters*.

    Returns ``(updated_map, newly_unlocked_ids)``.  The input map is
    not modified.
    """
    updated = dict(achievements)
    newly_unlocked: list[str] = []
    stamp = to_iso(now)

    for key, achievement in achievements.items():
        if achievement.unlocked:
            continue
        definition = _ACHIEVEMENT_MAP.get(key)
        if definition is None:
            continue

        progress = getattr(counters, definition.counter)
        unlocked = progress >= achievement.requirement
        updated[key] = replace(
            achievement,
            progress=progress,
            unlocked=unlocked,
            unlocked_at=stamp if unlocked else None,
        )
        if unlocked:
            newly_unlocked.append(key)
            logger.info("Achievement unlocked: %s", key)

    return updated, newly_unlocked
