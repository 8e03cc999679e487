"""Tests for the quest engine: weekly roll-over, per-entry progress, claiming."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from journalquest.gamification.quests import (
    apply_entry_to_quests,
    apply_weekly_reset,
    claim,
    default_quests,
    derived_focus_level,
)
from journalquest.gamification.state import (
    ProgressionState,
    Quest,
    QuestType,
    default_state,
)
from journalquest.gamification.streak import StreakResult

from helpers import entry


MONDAY = datetime(2024, 1, 1, 12, 0)
NEXT_MONDAY = datetime(2024, 1, 8, 9, 0)

NEW_DAY = StreakResult(1, True)
SAME_DAY = StreakResult(1, False)


def _with_quest(state: ProgressionState, quest: Quest) -> ProgressionState:
    quests = dict(state.quests)
    quests[quest.id] = quest
    return replace(state, quests=quests)


# ═══════════════════════════════════════════════════════════════════════════
#  CATALOG
# ═══════════════════════════════════════════════════════════════════════════


class TestQuestCatalog:

    def test_three_default_quests(self):
        assert set(default_quests()) == {
            "weekly-entries-3", "math-tags-5", "high-focus-2-days",
        }

    def test_weekly_flags(self):
        quests = default_quests()
        assert quests["weekly-entries-3"].reset_weekly
        assert not quests["math-tags-5"].reset_weekly
        assert quests["high-focus-2-days"].reset_weekly

    def test_math_quest_tag(self):
        q = default_quests()["math-tags-5"]
        assert q.quest_type is QuestType.TAGS
        assert q.type_value == "math"


# ═══════════════════════════════════════════════════════════════════════════
#  FOCUS LEVEL
# ═══════════════════════════════════════════════════════════════════════════


class TestDerivedFocusLevel:

    def test_explicit_level_wins(self):
        assert derived_focus_level(entry("2024-01-01", focus_level=9, focus_minutes=6)) == 9

    def test_from_minutes(self):
        assert derived_focus_level(entry("2024-01-01", focus_minutes=42)) == 7

    def test_half_rounds_up(self):
        assert derived_focus_level(entry("2024-01-01", focus_minutes=39)) == 7

    def test_default_without_minutes(self):
        assert derived_focus_level(entry("2024-01-01")) == 5

    def test_zero_minutes_uses_default(self):
        assert derived_focus_level(entry("2024-01-01", focus_minutes=0)) == 5


# ═══════════════════════════════════════════════════════════════════════════
#  WEEKLY RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestWeeklyReset:

    def test_first_run_records_week_without_reset(self):
        state, did_reset = apply_weekly_reset(default_state(), MONDAY)
        assert not did_reset
        assert state.week_start_date == "2024-01-01T00:00:00"

    def test_same_week_is_noop(self):
        state, _ = apply_weekly_reset(default_state(), MONDAY)
        state = replace(state, weekly_entries_count=2)
        again, did_reset = apply_weekly_reset(state, datetime(2024, 1, 7, 23, 59))
        assert not did_reset
        assert again.weekly_entries_count == 2

    def test_new_week_resets_weekly_quests(self):
        state = default_state()
        quests = dict(state.quests)
        quests["weekly-entries-3"] = replace(quests["weekly-entries-3"], progress=2)
        state = replace(
            state,
            quests=quests,
            week_start_date="2024-01-01T00:00:00",
            weekly_entries_count=2,
            weekly_high_focus_days=1,
        )

        reset, did_reset = apply_weekly_reset(state, NEXT_MONDAY)

        assert did_reset
        q = reset.quests["weekly-entries-3"]
        assert q.progress == 0
        assert not q.completed and not q.claimed
        assert q.week_started == "2024-01-08T00:00:00"
        assert reset.week_start_date == "2024-01-08T00:00:00"
        assert reset.weekly_entries_count == 0
        assert reset.weekly_high_focus_days == 0

    def test_claimed_weekly_quest_becomes_active_again(self):
        state = default_state()
        quests = dict(state.quests)
        quests["high-focus-2-days"] = replace(
            quests["high-focus-2-days"], progress=2, completed=True, claimed=True,
        )
        state = replace(state, quests=quests, week_start_date="2024-01-01T00:00:00")
        reset, _ = apply_weekly_reset(state, NEXT_MONDAY)
        q = reset.quests["high-focus-2-days"]
        assert (q.progress, q.completed, q.claimed) == (0, False, False)

    def test_non_weekly_quest_untouched(self):
        state = default_state()
        quests = dict(state.quests)
        quests["math-tags-5"] = replace(quests["math-tags-5"], progress=3)
        state = replace(state, quests=quests, week_start_date="2024-01-01T00:00:00")
        reset, _ = apply_weekly_reset(state, NEXT_MONDAY)
        assert reset.quests["math-tags-5"].progress == 3
        assert reset.quests["math-tags-5"].week_started is None

    def test_idempotent(self):
        state = replace(default_state(), week_start_date="2024-01-01T00:00:00")
        once, first = apply_weekly_reset(state, NEXT_MONDAY)
        twice, second = apply_weekly_reset(once, NEXT_MONDAY)
        assert first and not second
        assert once == twice


# ═══════════════════════════════════════════════════════════════════════════
#  PER-ENTRY PROGRESS
# ═══════════════════════════════════════════════════════════════════════════


class TestEntryProgress:

    def test_weekly_entries_counts_new_days(self):
        state = default_state()
        state, done = apply_entry_to_quests(state, entry("2024-01-01"), NEW_DAY, MONDAY)
        assert state.weekly_entries_count == 1
        assert state.quests["weekly-entries-3"].progress == 1
        assert done == []

    def test_same_day_entry_does_not_count(self):
        state = replace(default_state(), weekly_entries_count=1)
        state, _ = apply_entry_to_quests(state, entry("2024-01-01"), SAME_DAY, MONDAY)
        assert state.weekly_entries_count == 1

    def test_entry_outside_current_week_does_not_count(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2023-12-28"), NEW_DAY, MONDAY,
        )
        assert state.weekly_entries_count == 0
        assert state.quests["weekly-entries-3"].progress == 0

    def test_weekly_entries_completes_at_target(self):
        state = replace(default_state(), weekly_entries_count=2)
        state, done = apply_entry_to_quests(state, entry("2024-01-03"), NEW_DAY, MONDAY)
        assert done == ["weekly-entries-3"]
        q = state.quests["weekly-entries-3"]
        assert q.completed and q.progress == 3

    def test_tag_quest_case_insensitive(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2024-01-01", "MaTh"), NEW_DAY, MONDAY,
        )
        assert state.quests["math-tags-5"].progress == 1

    def test_tag_quest_ignores_same_day(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2024-01-01", "math"), SAME_DAY, MONDAY,
        )
        assert state.quests["math-tags-5"].progress == 0

    def test_tag_quest_ignores_other_tags(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2024-01-01", "history"), NEW_DAY, MONDAY,
        )
        assert state.quests["math-tags-5"].progress == 0

    def test_high_focus_day(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2024-01-01", focus_level=8), NEW_DAY, MONDAY,
        )
        assert state.weekly_high_focus_days == 1
        assert state.quests["high-focus-2-days"].progress == 1

    def test_low_focus_day(self):
        state, _ = apply_entry_to_quests(
            default_state(), entry("2024-01-01", focus_level=6), NEW_DAY, MONDAY,
        )
        assert state.weekly_high_focus_days == 0
        assert state.quests["high-focus-2-days"].progress == 0

    def test_non_weekly_entries_quest(self):
        quest = Quest(
            id="entries-10", title="Ten", description="",
            quest_type=QuestType.ENTRIES, target=10, reward_xp=10, progress=4,
        )
        state = _with_quest(default_state(), quest)
        state, _ = apply_entry_to_quests(state, entry("2024-01-01"), NEW_DAY, MONDAY)
        assert state.quests["entries-10"].progress == 5
        state, _ = apply_entry_to_quests(state, entry("2024-01-01"), SAME_DAY, MONDAY)
        assert state.quests["entries-10"].progress == 5

    def test_non_weekly_focus_quest(self):
        quest = Quest(
            id="focus-forever", title="Focus", description="",
            quest_type=QuestType.FOCUS, target=5, reward_xp=10,
        )
        state = _with_quest(default_state(), quest)
        state, _ = apply_entry_to_quests(
            state, entry("2023-06-01", focus_minutes=60), NEW_DAY, MONDAY,
        )
        assert state.quests["focus-forever"].progress == 1

    def test_streak_quest_uses_outcome(self):
        quest = Quest(
            id="streak-5", title="Streak", description="",
            quest_type=QuestType.STREAK, target=5, reward_xp=40,
        )
        state = _with_quest(default_state(), quest)
        state, _ = apply_entry_to_quests(
            state, entry("2024-01-01"), StreakResult(3, True), MONDAY,
        )
        assert state.quests["streak-5"].progress == 3

    def test_streak_quest_clamped(self):
        quest = Quest(
            id="streak-5", title="Streak", description="",
            quest_type=QuestType.STREAK, target=5, reward_xp=40,
        )
        state = _with_quest(default_state(), quest)
        state, done = apply_entry_to_quests(
            state, entry("2024-01-01"), StreakResult(9, True), MONDAY,
        )
        q = state.quests["streak-5"]
        assert q.progress == 5
        assert q.completed
        assert done == ["streak-5"]

    def test_completed_quest_is_frozen(self):
        state = default_state()
        quests = dict(state.quests)
        quests["math-tags-5"] = replace(
            quests["math-tags-5"], progress=5, completed=True,
        )
        state = replace(state, quests=quests)
        state, done = apply_entry_to_quests(
            state, entry("2024-01-01", "math"), NEW_DAY, MONDAY,
        )
        assert state.quests["math-tags-5"].progress == 5
        assert "math-tags-5" not in done

    @pytest.mark.parametrize("days", range(1, 8))
    def test_progress_stays_in_bounds(self, days):
        state = default_state()
        for day in range(1, days + 1):
            state, _ = apply_entry_to_quests(
                state, entry(f"2024-01-0{day}", "math", focus_level=9),
                NEW_DAY, datetime(2024, 1, day, 20),
            )
        for q in state.quests.values():
            assert 0 <= q.progress <= q.target
            assert q.completed == (q.progress >= q.target)


# ═══════════════════════════════════════════════════════════════════════════
#  CLAIMING
# ═══════════════════════════════════════════════════════════════════════════


class TestClaim:

    def test_unknown_quest(self):
        assert claim(default_state(), "nope") is None

    def test_incomplete_quest(self):
        assert claim(default_state(), "math-tags-5") is None

    def test_completed_quest(self):
        state = default_state()
        quests = dict(state.quests)
        quests["math-tags-5"] = replace(
            quests["math-tags-5"], progress=5, completed=True,
        )
        claimed = claim(replace(state, quests=quests), "math-tags-5")
        assert claimed is not None
        assert claimed.claimed and claimed.completed

    def test_already_claimed(self):
        state = default_state()
        quests = dict(state.quests)
        quests["math-tags-5"] = replace(
            quests["math-tags-5"], progress=5, completed=True, claimed=True,
        )
        assert claim(replace(state, quests=quests), "math-tags-5") is None
