"""JournalQuest: XP, streaks, quests and achievements for a journal."""

__version__ = "0.1.0"
