"""SQLAlchemy ORM models for JournalQuest.

The tables mirror the persisted progression layout: one flat row of
counters plus achievements, unlocks and quests keyed by their id.
Derived values (level, XP progress) have no columns.
"""

from sqlalchemy import Column, Integer, String, Boolean, Float
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ProgressRecord(Base):
    """Single-row table holding the progression counters."""

    __tablename__ = "progression_state"

    id = Column(Integer, primary_key=True, autoincrement=True)
    xp = Column(Integer, nullable=False, default=0)
    total_entries = Column(Integer, nullable=False, default=0)
    total_focus_minutes = Column(Float, nullable=False, default=0)
    math_tagged_entries = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    last_entry_date = Column(String(64), nullable=True)
    longest_streak = Column(Integer, nullable=False, default=0)
    weekly_entries_count = Column(Integer, nullable=False, default=0)
    weekly_high_focus_days = Column(Integer, nullable=False, default=0)
    week_start_date = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ProgressRecord xp={self.xp} streak={self.streak} "
            f"entries={self.total_entries}>"
        )


class AchievementRecord(Base):
    __tablename__ = "achievements"

    id = Column(String(64), primary_key=True)
    title = Column(String(128), nullable=False)
    description = Column(String(255), nullable=False, default="")
    icon = Column(String(16), nullable=False, default="")
    requirement = Column(Integer, nullable=False)
    progress = Column(Float, nullable=False, default=0)
    unlocked = Column(Boolean, nullable=False, default=False)
    unlocked_at = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<AchievementRecord id={self.id} progress={self.progress} "
            f"unlocked={self.unlocked}>"
        )


class UnlockRecord(Base):
    __tablename__ = "unlocks"

    id = Column(String(64), primary_key=True)
    title = Column(String(128), nullable=False)
    description = Column(String(255), nullable=False, default="")
    required_level = Column(Integer, nullable=False)
    unlocked = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<UnlockRecord id={self.id} unlocked={self.unlocked}>"


class QuestRecord(Base):
    __tablename__ = "quests"

    id = Column(String(64), primary_key=True)
    title = Column(String(128), nullable=False)
    description = Column(String(255), nullable=False, default="")
    quest_type = Column(String(20), nullable=False)   # entries | tags | focus | streak
    type_value = Column(String(64), nullable=True)
    target = Column(Integer, nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    reward_xp = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    claimed = Column(Boolean, nullable=False, default=False)
    reset_weekly = Column(Boolean, nullable=False, default=False)
    week_started = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<QuestRecord id={self.id} progress={self.progress}/{self.target} "
            f"claimed={self.claimed}>"
        )
