"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import AchievementRecord, ProgressRecord, QuestRecord, UnlockRecord
from .store import ProgressionStore

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "AchievementRecord",
    "ProgressRecord",
    "QuestRecord",
    "UnlockRecord",
    "ProgressionStore",
]
