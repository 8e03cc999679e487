"""Progression data model.

``ProgressionState`` is the only mutable aggregate in the game, and it
isn't really mutable: every operation builds a new frozen state with
:func:`dataclasses.replace` and the engine swaps it in as a whole.

Persisted layout
----------------
:func:`state_to_record` flattens a state into a plain dict keyed by the
journal app's camelCase field names (``xp``, ``totalEntries``,
``lastEntryDate`` ...).  Achievements, unlocks and quests become maps
keyed by id.  ``level`` and ``xpProgress`` are derived and never written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .xp import XPProgress, level_for_xp, xp_for_next_level, xp_progress


# ── catalog items ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    requirement: int
    progress: float = 0
    unlocked: bool = False
    unlocked_at: str | None = None


@dataclass(frozen=True)
class Unlock:
    id: str
    title: str
    description: str
    required_level: int
    unlocked: bool = False


class QuestType(Enum):
    ENTRIES = "entries"
    TAGS = "tags"
    FOCUS = "focus"
    STREAK = "streak"


@dataclass(frozen=True)
class Quest:
    id: str
    title: str
    description: str
    quest_type: QuestType
    target: int
    reward_xp: int
    progress: int = 0
    completed: bool = False
    claimed: bool = False
    type_value: str | None = None     # tag name for TAGS quests
    reset_weekly: bool = False
    week_started: str | None = None   # ISO Monday of the current cycle

    @property
    def claimable(self) -> bool:
        return self.completed and not self.claimed


# ── input ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EntryEvent:
    """A journal entry as handed over by the journal subsystem."""

    id: str
    date: str
    tags: tuple[str, ...] = ()
    focus_minutes: float | None = None
    focus_level: int | None = None

    def has_tag(self, tag: str) -> bool:
        wanted = tag.lower()
        return any(t.lower() == wanted for t in self.tags)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EntryEvent:
        """Build an event from the journal's JSON (camelCase or snake_case)."""
        focus_minutes = data.get("focusMinutes", data.get("focus_minutes"))
        focus_level = data.get("focusLevel", data.get("focus_level"))
        tags = data.get("tags") or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            id=str(data.get("id", "")),
            date=data.get("date", ""),
            tags=tuple(tags),
            focus_minutes=focus_minutes,
            focus_level=focus_level,
        )


# ── aggregate ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProgressionState:
    xp: int = 0
    total_entries: int = 0
    total_focus_minutes: float = 0
    math_tagged_entries: int = 0
    streak: int = 0
    last_entry_date: str | None = None
    longest_streak: int = 0
    achievements: dict[str, Achievement] = field(default_factory=dict)
    unlocks: dict[str, Unlock] = field(default_factory=dict)
    quests: dict[str, Quest] = field(default_factory=dict)
    weekly_entries_count: int = 0
    weekly_high_focus_days: int = 0
    week_start_date: str | None = None

    @property
    def level(self) -> int:
        return level_for_xp(self.xp)


def default_state() -> ProgressionState:
    """A zeroed state seeded with the built-in catalogs."""
    from .achievements import default_achievements
    from .quests import default_quests
    from .unlockables import default_unlocks

    return ProgressionState(
        achievements=default_achievements(),
        unlocks=default_unlocks(),
        quests=default_quests(),
    )


# ── read-only snapshot ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ProgressionSnapshot:
    """What the rest of the app gets to see.  Derived values included."""

    xp: int
    level: int
    streak: int
    longest_streak: int
    total_entries: int
    total_focus_minutes: float
    xp_progress: XPProgress
    xp_for_next_level: int
    achievements: tuple[Achievement, ...]
    unlocks: tuple[Unlock, ...]
    quests: tuple[Quest, ...]

    @classmethod
    def from_state(cls, state: ProgressionState) -> ProgressionSnapshot:
        return cls(
            xp=state.xp,
            level=state.level,
            streak=state.streak,
            longest_streak=state.longest_streak,
            total_entries=state.total_entries,
            total_focus_minutes=state.total_focus_minutes,
            xp_progress=xp_progress(state.xp),
            xp_for_next_level=xp_for_next_level(state.xp),
            achievements=tuple(state.achievements.values()),
            unlocks=tuple(state.unlocks.values()),
            quests=tuple(state.quests.values()),
        )

    # ── selectors ───────────────────────────────────────────────────

    @property
    def unlocked_achievements(self) -> list[Achievement]:
        return [a for a in self.achievements if a.unlocked]

    @property
    def locked_achievements(self) -> list[Achievement]:
        return [a for a in self.achievements if not a.unlocked]

    @property
    def unlocked_features(self) -> list[Unlock]:
        return [u for u in self.unlocks if u.unlocked]

    @property
    def locked_features(self) -> list[Unlock]:
        return [u for u in self.unlocks if not u.unlocked]

    @property
    def available_quests(self) -> list[Quest]:
        return [q for q in self.quests if not q.completed]

    @property
    def completed_quests(self) -> list[Quest]:
        return [q for q in self.quests if q.completed]

    @property
    def claimable_quests(self) -> list[Quest]:
        return [q for q in self.quests if q.claimable]

    def is_unlocked(self, unlock_id: str) -> bool:
        return any(u.id == unlock_id and u.unlocked for u in self.unlocks)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(
            a.id == achievement_id and a.unlocked for a in self.achievements
        )


# ── persisted record ─────────────────────────────────────────────────────


def achievement_to_record(a: Achievement) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": a.id,
        "title": a.title,
        "description": a.description,
        "icon": a.icon,
        "requirement": a.requirement,
        "progress": a.progress,
        "unlocked": a.unlocked,
    }
    if a.unlocked_at is not None:
        record["unlockedAt"] = a.unlocked_at
    return record


def unlock_to_record(u: Unlock) -> dict[str, Any]:
    return {
        "id": u.id,
        "title": u.title,
        "description": u.description,
        "requiredLevel": u.required_level,
        "unlocked": u.unlocked,
    }


def quest_to_record(q: Quest) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": q.id,
        "title": q.title,
        "description": q.description,
        "type": q.quest_type.value,
        "target": q.target,
        "progress": q.progress,
        "rewardXP": q.reward_xp,
        "completed": q.completed,
        "claimed": q.claimed,
        "resetWeekly": q.reset_weekly,
    }
    if q.type_value is not None:
        record["typeValue"] = q.type_value
    if q.week_started is not None:
        record["weekStarted"] = q.week_started
    return record


def state_to_record(state: ProgressionState) -> dict[str, Any]:
    """Flatten *state* into the persisted layout."""
    return {
        "xp": state.xp,
        "totalEntries": state.total_entries,
        "totalFocusMinutes": state.total_focus_minutes,
        "mathTaggedEntries": state.math_tagged_entries,
        "streak": state.streak,
        "lastEntryDate": state.last_entry_date,
        "longestStreak": state.longest_streak,
        "achievements": {
            k: achievement_to_record(v) for k, v in state.achievements.items()
        },
        "unlocks": {k: unlock_to_record(v) for k, v in state.unlocks.items()},
        "quests": {k: quest_to_record(v) for k, v in state.quests.items()},
        "weeklyEntriesCount": state.weekly_entries_count,
        "weeklyHighFocusDays": state.weekly_high_focus_days,
        "weekStartDate": state.week_start_date,
    }


def _merge_achievements(
    raw: Mapping[str, Any], defaults: dict[str, Achievement],
) -> dict[str, Achievement]:
    merged = dict(defaults)
    for key, data in raw.items():
        base = merged.get(key)
        if base is None:
            continue
        merged[key] = Achievement(
            id=base.id,
            title=data.get("title", base.title),
            description=data.get("description", base.description),
            icon=data.get("icon", base.icon),
            requirement=data.get("requirement", base.requirement),
            progress=data.get("progress", 0),
            unlocked=bool(data.get("unlocked", False)),
            unlocked_at=data.get("unlockedAt"),
        )
    return merged


def _merge_unlocks(
    raw: Mapping[str, Any], defaults: dict[str, Unlock],
) -> dict[str, Unlock]:
    merged = dict(defaults)
    for key, data in raw.items():
        base = merged.get(key)
        if base is None:
            continue
        merged[key] = Unlock(
            id=base.id,
            title=data.get("title", base.title),
            description=data.get("description", base.description),
            required_level=data.get("requiredLevel", base.required_level),
            unlocked=bool(data.get("unlocked", False)),
        )
    return merged


def _quest_from_record(data: Mapping[str, Any]) -> Quest | None:
    try:
        quest_type = QuestType(data["type"])
        return Quest(
            id=data["id"],
            title=data.get("title", data["id"]),
            description=data.get("description", ""),
            quest_type=quest_type,
            target=int(data["target"]),
            reward_xp=int(data.get("rewardXP", 0)),
            progress=int(data.get("progress", 0)),
            completed=bool(data.get("completed", False)),
            claimed=bool(data.get("claimed", False)),
            type_value=data.get("typeValue"),
            reset_weekly=bool(data.get("resetWeekly", False)),
            week_started=data.get("weekStarted"),
        )
    except (KeyError, TypeError, ValueError):
        return None


def state_from_record(record: Mapping[str, Any]) -> ProgressionState:
    """Rebuild a state from its persisted layout.

    Missing fields fall back to defaults.  Built-in catalog entries that
    are missing from the record are added fresh, so older saves pick up
    new achievements, unlocks and quests.
    """
    base = default_state()

    quests = dict(base.quests)
    for key, data in (record.get("quests") or {}).items():
        quest = _quest_from_record(data)
        if quest is not None:
            quests[key] = quest

    return ProgressionState(
        xp=record.get("xp") or 0,
        total_entries=record.get("totalEntries") or 0,
        total_focus_minutes=record.get("totalFocusMinutes") or 0,
        math_tagged_entries=record.get("mathTaggedEntries") or 0,
        streak=record.get("streak") or 0,
        last_entry_date=record.get("lastEntryDate"),
        longest_streak=record.get("longestStreak") or 0,
        achievements=_merge_achievements(
            record.get("achievements") or {}, base.achievements,
        ),
        unlocks=_merge_unlocks(record.get("unlocks") or {}, base.unlocks),
        quests=quests,
        weekly_entries_count=record.get("weeklyEntriesCount") or 0,
        weekly_high_focus_days=record.get("weeklyHighFocusDays") or 0,
        week_start_date=record.get("weekStartDate"),
    )
