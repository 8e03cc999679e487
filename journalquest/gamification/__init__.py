"""Gamification package."""

from .achievements import (
    ACHIEVEMENTS,
    AchievementCounters,
    AchievementDef,
    evaluate_achievements,
)
from .engine import ProgressionEngine
from .quests import (
    apply_entry_to_quests,
    apply_weekly_reset,
    derived_focus_level,
)
from .state import (
    Achievement,
    EntryEvent,
    ProgressionSnapshot,
    ProgressionState,
    Quest,
    QuestType,
    Unlock,
    default_state,
    state_from_record,
    state_to_record,
)
from .streak import StreakResult, calculate_streak, is_streak_stale
from .unlockables import UNLOCKS, UnlockDef, evaluate_unlocks, next_unlock
from .xp import (
    XPProgress,
    level_for_xp,
    title_for_level,
    xp_for_next_level,
    xp_progress,
    xp_threshold,
)

__all__ = [
    "ACHIEVEMENTS",
    "AchievementCounters",
    "AchievementDef",
    "evaluate_achievements",
    "ProgressionEngine",
    "apply_entry_to_quests",
    "apply_weekly_reset",
    "derived_focus_level",
    "Achievement",
    "EntryEvent",
    "ProgressionSnapshot",
    "ProgressionState",
    "Quest",
    "QuestType",
    "Unlock",
    "default_state",
    "state_from_record",
    "state_to_record",
    "StreakResult",
    "calculate_streak",
    "is_streak_stale",
    "UNLOCKS",
    "UnlockDef",
    "evaluate_unlocks",
    "next_unlock",
    "XPProgress",
    "level_for_xp",
    "title_for_level",
    "xp_for_next_level",
    "xp_progress",
    "xp_threshold",
]
