"""Quests: bounded objectives with a target and a claimable XP reward.

Quest Catalog
-------------
    weekly-entries-3    Write 3 entries this week          50 XP  weekly
    math-tags-5         Tag 5 entries with Math            75 XP
    high-focus-2-days   2 days with focus level >= 7       60 XP  weekly

Lifecycle
---------
``active -> completed -> claimed``.  A quest completes once its progress
reaches the target; its progress is frozen from then on.  Claiming is
terminal until a weekly reset puts the quest back to ``active``.

Weekly cycle
------------
Weeks start Monday 00:00.  When the tracked week (``week_start_date``)
is no longer the current one, every ``reset_weekly`` quest goes back to
zero and the weekly counters are cleared.  Non-weekly quests keep their
progress forever.

Progress per quest type
-----------------------
entries   weekly: number of distinct entry days this week
          otherwise: +1 per new entry day
tags      +1 per new entry day carrying the quest's tag (case-insensitive)
focus     weekly: number of high-focus entry days this week
          otherwise: +1 per new high-focus entry day
streak    the streak produced by this entry
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime

from .dates import is_same_week, parse_entry_date, to_iso, week_start
from .state import EntryEvent, ProgressionState, Quest, QuestType
from .streak import StreakResult

logger = logging.getLogger(__name__)


DEFAULT_FOCUS_LEVEL = 5
HIGH_FOCUS_LEVEL = 7
FOCUS_MINUTES_PER_LEVEL = 6


# ── catalog ──────────────────────────────────────────────────────────────


def default_quests() -> dict[str, Quest]:
    quests = [
        Quest(
            id="weekly-entries-3",
            title="Weekly Writer",
            description="Write 3 entries this week",
            quest_type=QuestType.ENTRIES,
            target=3,
            reward_xp=50,
            reset_weekly=True,
        ),
        Quest(
            id="math-tags-5",
            title="Math Explorer",
            description="Tag 5 entries with Math",
            quest_type=QuestType.TAGS,
            type_value="math",
            target=5,
            reward_xp=75,
        ),
        Quest(
            id="high-focus-2-days",
            title="Focus Master",
            description="Have 2 days with focus level ≥7",
            quest_type=QuestType.FOCUS,
            target=2,
            reward_xp=60,
            reset_weekly=True,
        ),
    ]
    return {q.id: q for q in quests}


# ── helpers ──────────────────────────────────────────────────────────────


def derived_focus_level(entry: EntryEvent) -> int:
    """Explicit focus level, else one level per 6 focus minutes, else 5."""
    if entry.focus_level is not None:
        return entry.focus_level
    if entry.focus_minutes:
        # Half rounds up: 39 minutes is level 7, not 6.
        return math.floor(entry.focus_minutes / FOCUS_MINUTES_PER_LEVEL + 0.5)
    return DEFAULT_FOCUS_LEVEL


def _clamp(quest: Quest, new_progress: int) -> Quest:
    progress = max(0, min(new_progress, quest.target))
    return replace(
        quest,
        progress=progress,
        completed=new_progress >= quest.target,
    )


# ── weekly reset ─────────────────────────────────────────────────────────


def apply_weekly_reset(
    state: ProgressionState, now: datetime,
) -> tuple[ProgressionState, bool]:
    """Roll weekly quests over if *now* is in a new ISO week.

    Returns ``(new_state, did_reset)``.  Safe to call any number of
    times: only the first call in a new week resets anything.
    """
    monday = to_iso(week_start(now))
    tracked = state.week_start_date

    if tracked is None:
        return replace(state, week_start_date=monday), False

    tracked_dt = parse_entry_date(tracked)
    if tracked_dt is not None and is_same_week(tracked_dt, now):
        return replace(state, week_start_date=monday), False

    quests = dict(state.quests)
    for key, quest in state.quests.items():
        if quest.reset_weekly:
            quests[key] = replace(
                quest,
                progress=0,
                completed=False,
                claimed=False,
                week_started=monday,
            )

    logger.info("New week %s: weekly quests reset", monday)
    return replace(
        state,
        quests=quests,
        week_start_date=monday,
        weekly_entries_count=0,
        weekly_high_focus_days=0,
    ), True


# ── per-entry update ─────────────────────────────────────────────────────


def _quest_progress(
    quest: Quest,
    entry: EntryEvent,
    outcome: StreakResult,
    *,
    weekly_entries: int,
    weekly_high_focus_days: int,
    high_focus: bool,
) -> int:
    is_new_day = outcome.is_new_day

    match quest.quest_type:
        case QuestType.ENTRIES:
            if quest.reset_weekly:
                return weekly_entries
            return quest.progress + (1 if is_new_day else 0)

        case QuestType.TAGS:
            if quest.type_value and is_new_day and entry.has_tag(quest.type_value):
                return quest.progress + 1
            return quest.progress

        case QuestType.FOCUS:
            if quest.reset_weekly:
                return weekly_high_focus_days
            if high_focus and is_new_day:
                return quest.progress + 1
            return quest.progress

        case QuestType.STREAK:
            return outcome.streak

    return quest.progress


def apply_entry_to_quests(
    state: ProgressionState,
    entry: EntryEvent,
    outcome: StreakResult,
    now: datetime,
) -> tuple[ProgressionState, list[str]]:
    """Advance weekly counters and quest progress for one entry.

    *outcome* is the streak calculation for this entry against the state
    as it was *before* the entry was registered.  Returns
    ``(new_state, newly_completed_ids)``.
    """
    weekly_entries = state.weekly_entries_count
    weekly_high_focus = state.weekly_high_focus_days
    high_focus = derived_focus_level(entry) >= HIGH_FOCUS_LEVEL

    entry_date = parse_entry_date(entry.date)
    in_current_week = entry_date is not None and is_same_week(entry_date, now)
    if outcome.is_new_day and in_current_week:
        weekly_entries += 1
        if high_focus:
            weekly_high_focus += 1

    quests = dict(state.quests)
    newly_completed: list[str] = []
    for key, quest in state.quests.items():
        if quest.completed:
            continue
        new_progress = _quest_progress(
            quest, entry, outcome,
            weekly_entries=weekly_entries,
            weekly_high_focus_days=weekly_high_focus,
            high_focus=high_focus,
        )
        quests[key] = _clamp(quest, new_progress)
        if quests[key].completed:
            newly_completed.append(key)
            logger.info("Quest completed: %s", key)

    return replace(
        state,
        quests=quests,
        weekly_entries_count=weekly_entries,
        weekly_high_focus_days=weekly_high_focus,
    ), newly_completed


# ── claiming ─────────────────────────────────────────────────────────────


def claim(state: ProgressionState, quest_id: str) -> Quest | None:
    """Return the claimed version of *quest_id*, or ``None`` if it can't be."""
    quest = state.quests.get(quest_id)
    if quest is None or not quest.claimable:
        return None
    return replace(quest, claimed=True)
