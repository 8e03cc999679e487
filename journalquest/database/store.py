"""Durable storage for the progression state.

``ProgressionStore`` is what the engine hands its commits to.  Hook it
up by passing it to :class:`~journalquest.gamification.ProgressionEngine`
(``store=...``): the engine loads from it once and then calls
:meth:`ProgressionStore.save` after every commit.

Saving is fire-and-forget from the engine's point of view.  A failed
write is logged and reported through the return value; it never
reaches the engine.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..gamification.state import (
    ProgressionState,
    achievement_to_record,
    quest_to_record,
    state_from_record,
    unlock_to_record,
)
from .db import get_session
from .models import AchievementRecord, ProgressRecord, QuestRecord, UnlockRecord

logger = logging.getLogger(__name__)


class ProgressionStore:
    """Loads and saves ``ProgressionState`` through SQLAlchemy."""

    # ── load ────────────────────────────────────────────────────────

    def load(self) -> ProgressionState | None:
        """Return the saved state, or ``None`` if nothing was saved yet
        or the database could not be read."""
        try:
            return self._read()
        except SQLAlchemyError:
            logger.exception("Failed to load progression state")
            return None

    def _read(self) -> ProgressionState | None:
        with get_session() as db:
            row: ProgressRecord | None = db.query(ProgressRecord).first()
            if row is None:
                return None

            record = {
                "xp": row.xp,
                "totalEntries": row.total_entries,
                "totalFocusMinutes": row.total_focus_minutes,
                "mathTaggedEntries": row.math_tagged_entries,
                "streak": row.streak,
                "lastEntryDate": row.last_entry_date,
                "longestStreak": row.longest_streak,
                "weeklyEntriesCount": row.weekly_entries_count,
                "weeklyHighFocusDays": row.weekly_high_focus_days,
                "weekStartDate": row.week_start_date,
                "achievements": {
                    a.id: {
                        "id": a.id,
                        "title": a.title,
                        "description": a.description,
                        "icon": a.icon,
                        "requirement": a.requirement,
                        "progress": a.progress,
                        "unlocked": a.unlocked,
                        "unlockedAt": a.unlocked_at,
                    }
                    for a in db.query(AchievementRecord).all()
                },
                "unlocks": {
                    u.id: {
                        "id": u.id,
                        "title": u.title,
                        "description": u.description,
                        "requiredLevel": u.required_level,
                        "unlocked": u.unlocked,
                    }
                    for u in db.query(UnlockRecord).all()
                },
                "quests": {
                    q.id: {
                        "id": q.id,
                        "title": q.title,
                        "description": q.description,
                        "type": q.quest_type,
                        "typeValue": q.type_value,
                        "target": q.target,
                        "progress": q.progress,
                        "rewardXP": q.reward_xp,
                        "completed": q.completed,
                        "claimed": q.claimed,
                        "resetWeekly": q.reset_weekly,
                        "weekStarted": q.week_started,
                    }
                    for q in db.query(QuestRecord).all()
                },
            }

        state = state_from_record(record)
        logger.debug("Loaded progression state: xp=%d", state.xp)
        return state

    # ── save ────────────────────────────────────────────────────────

    def save(self, state: ProgressionState) -> bool:
        """Write *state* in one database transaction.  Returns success."""
        try:
            with get_session() as db:
                self._write(db, state)
        except SQLAlchemyError:
            logger.exception("Failed to persist progression state")
            return False
        return True

    def clear(self) -> None:
        """Delete everything that was saved."""
        with get_session() as db:
            for model in (ProgressRecord, AchievementRecord, UnlockRecord, QuestRecord):
                db.query(model).delete()

    # ── internal ────────────────────────────────────────────────────

    def _write(self, db, state: ProgressionState) -> None:
        row = db.query(ProgressRecord).first()
        if row is None:
            row = ProgressRecord()
            db.add(row)
        row.xp = state.xp
        row.total_entries = state.total_entries
        row.total_focus_minutes = state.total_focus_minutes
        row.math_tagged_entries = state.math_tagged_entries
        row.streak = state.streak
        row.last_entry_date = state.last_entry_date
        row.longest_streak = state.longest_streak
        row.weekly_entries_count = state.weekly_entries_count
        row.weekly_high_focus_days = state.weekly_high_focus_days
        row.week_start_date = state.week_start_date

        for achievement in state.achievements.values():
            data = achievement_to_record(achievement)
            db.merge(AchievementRecord(
                id=data["id"],
                title=data["title"],
                description=data["description"],
                icon=data["icon"],
                requirement=data["requirement"],
                progress=data["progress"],
                unlocked=data["unlocked"],
                unlocked_at=data.get("unlockedAt"),
            ))

        for unlock in state.unlocks.values():
            data = unlock_to_record(unlock)
            db.merge(UnlockRecord(
                id=data["id"],
                title=data["title"],
                description=data["description"],
                required_level=data["requiredLevel"],
                unlocked=data["unlocked"],
            ))

        for quest in state.quests.values():
            data = quest_to_record(quest)
            db.merge(QuestRecord(
                id=data["id"],
                title=data["title"],
                description=data["description"],
                quest_type=data["type"],
                type_value=data.get("typeValue"),
                target=data["target"],
                progress=data["progress"],
                reward_xp=data["rewardXP"],
                completed=data["completed"],
                claimed=data["claimed"],
                reset_weekly=data["resetWeekly"],
                week_started=data.get("weekStarted"),
            ))

        # Drop rows for ids that no longer exist in the state.
        for model, ids in (
            (AchievementRecord, state.achievements),
            (UnlockRecord, state.unlocks),
            (QuestRecord, state.quests),
        ):
            db.query(model).filter(
                model.id.notin_(list(ids)),
            ).delete(synchronize_session=False)
