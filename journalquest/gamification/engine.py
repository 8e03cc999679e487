"""The progression engine: turns journal entries into XP, streaks and loot.

Transactions
------------
Every public mutator reads the current state exactly once, builds a new
frozen state and commits it in one step.  Nothing in between is ever
visible to listeners.  ``register_entry`` is the one exception to "one
call, one commit": after the main commit it runs the quest update as a
second transaction against the freshly committed state.

register_entry steps
--------------------
1. weekly quest roll-over check
2. streak calculation against the previous entry date
3. counters (entries / math entries on a new day, focus minutes always)
4. XP reward
5. new XP, level and longest streak
6. achievement and feature-unlock evaluation
7. commit
8. quest update (second commit)

Signals
-------
* **state_committed(state)**    — after every commit; persistence hooks here
* **xp_awarded(data)**          — ``amount``, ``reason``, ``total_xp``, ``level``
* **level_up(data)**            — ``old_level``, ``new_level``, ``new_title``,
  ``unlocks_earned``
* **achievement_unlocked(data)** — ``id``, ``title``, ``icon``
* **feature_unlocked(data)**    — ``id``, ``title``, ``required_level``
* **quest_completed(data)**     — ``id``, ``title``, ``reward_xp``
* **streak_updated(current, longest)**

Time
----
The engine never reads the wall clock directly; it calls the injected
``clock`` so tests can pin "now" anywhere they like.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Mapping

from PyQt6.QtCore import QObject, pyqtSignal

from .achievements import AchievementCounters, evaluate_achievements
from .dates import parse_entry_date, to_iso
from .quests import apply_entry_to_quests, apply_weekly_reset, claim
from .state import (
    EntryEvent,
    ProgressionSnapshot,
    ProgressionState,
    Quest,
    default_state,
)
from .streak import calculate_streak, is_streak_stale
from .unlockables import evaluate_unlocks
from .xp import entry_xp_reward, level_for_xp, title_for_level

logger = logging.getLogger(__name__)

MATH_TAG = "math"

Clock = Callable[[], datetime]


class ProgressionEngine(QObject):
    """Owns the progression state and applies every change to it."""

    state_committed = pyqtSignal(object)
    xp_awarded = pyqtSignal(object)
    level_up = pyqtSignal(object)
    achievement_unlocked = pyqtSignal(object)
    feature_unlocked = pyqtSignal(object)
    quest_completed = pyqtSignal(object)
    streak_updated = pyqtSignal(int, int)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store=None,
        clock: Clock | None = None,
        initial_state: ProgressionState | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock: Clock = clock or datetime.now
        self._store = store

        state = initial_state
        if state is None and store is not None:
            state = store.load()
        self._state: ProgressionState = state or default_state()

        if store is not None:
            self.state_committed.connect(store.save)

    # ══════════════════════════════════════════════════════════════════
    #  READ API
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> ProgressionState:
        return self._state

    @property
    def xp(self) -> int:
        return self._state.xp

    @property
    def level(self) -> int:
        return self._state.level

    @property
    def streak(self) -> int:
        return self._state.streak

    def snapshot(self) -> ProgressionSnapshot:
        return ProgressionSnapshot.from_state(self._state)

    def quests(self) -> list[Quest]:
        return list(self._state.quests.values())

    # ══════════════════════════════════════════════════════════════════
    #  MUTATORS
    # ══════════════════════════════════════════════════════════════════

    def add_xp(self, amount: int, reason: str = "") -> int | None:
        """Add *amount* XP.  Returns the new total, or ``None`` if ignored."""
        if amount <= 0:
            logger.debug("Ignoring non-positive XP award: %s", amount)
            return None

        prior = self._state
        old_level = prior.level
        new_xp = prior.xp + amount
        new_level = level_for_xp(new_xp)
        unlocks, new_unlocks = evaluate_unlocks(prior.unlocks, new_level)

        self._commit(replace(prior, xp=new_xp, unlocks=unlocks))
        self._announce_xp(amount, reason or f"+{amount} XP")
        self._announce_unlocks(new_unlocks)
        self._announce_level(old_level, new_level, new_unlocks)
        return new_xp

    def register_entry(
        self, entry: EntryEvent | Mapping[str, Any],
    ) -> dict | None:
        """Apply one journal entry to the progression state.

        Returns a summary dict with ``xp_earned``, ``streak``,
        ``is_new_day``, ``level_up``, ``old_level``, ``new_level``,
        ``achievements_unlocked``, ``features_unlocked`` and
        ``quests_completed``; or ``None`` if the entry's date could not
        be read.
        """
        if not isinstance(entry, EntryEvent):
            entry = EntryEvent.from_dict(entry)

        entry_date = parse_entry_date(entry.date)
        if entry_date is None:
            logger.warning(
                "Ignoring entry %r with unreadable date %r", entry.id, entry.date,
            )
            return None
        stored_date = entry.date if isinstance(entry.date, str) else to_iso(entry_date)

        now = self._clock()
        prior = self._state

        # ── 1. weekly roll-over ──────────────────────────────────────
        state, _ = apply_weekly_reset(prior, now)

        # ── 2. streak ────────────────────────────────────────────────
        outcome = calculate_streak(state.last_entry_date, state.streak, entry.date)
        new_streak, is_new_day = outcome

        # ── 3. counters ──────────────────────────────────────────────
        focus_minutes = max(entry.focus_minutes or 0, 0)
        total_entries = state.total_entries + (1 if is_new_day else 0)
        math_entries = state.math_tagged_entries
        if is_new_day and entry.has_tag(MATH_TAG):
            math_entries += 1
        total_focus = state.total_focus_minutes + focus_minutes

        # ── 4. reward ────────────────────────────────────────────────
        reward = entry_xp_reward(
            is_new_day=is_new_day,
            streak_grew=new_streak > state.streak,
            new_streak=new_streak,
            focus_minutes=focus_minutes,
        )

        # ── 5. xp / level / longest streak ───────────────────────────
        old_level = state.level
        new_xp = state.xp + reward
        new_level = level_for_xp(new_xp)
        longest = max(state.longest_streak, new_streak)

        # ── 6. achievements and unlocks ──────────────────────────────
        achievements, new_achievements = evaluate_achievements(
            state.achievements,
            AchievementCounters(
                streak=new_streak,
                math_tagged_entries=math_entries,
                total_focus_minutes=total_focus,
                total_entries=total_entries,
            ),
            now,
        )
        unlocks, new_unlocks = evaluate_unlocks(state.unlocks, new_level)

        # ── 7. commit ────────────────────────────────────────────────
        self._commit(replace(
            state,
            xp=new_xp,
            streak=new_streak,
            last_entry_date=stored_date,
            longest_streak=longest,
            total_entries=total_entries,
            math_tagged_entries=math_entries,
            total_focus_minutes=total_focus,
            achievements=achievements,
            unlocks=unlocks,
        ))
        logger.debug(
            "Entry %s: +%d XP, streak %d, new day=%s",
            entry.id, reward, new_streak, is_new_day,
        )

        # ── 8. quests (separate transaction) ─────────────────────────
        quest_state, completed = apply_entry_to_quests(
            self._state, entry, outcome, now,
        )
        self._commit(quest_state)

        if reward > 0:
            self._announce_xp(reward, f"+{reward} XP")
        self.streak_updated.emit(new_streak, longest)
        for key in new_achievements:
            a = achievements[key]
            self.achievement_unlocked.emit(
                {"id": a.id, "title": a.title, "icon": a.icon},
            )
        self._announce_unlocks(new_unlocks)
        self._announce_level(old_level, new_level, new_unlocks)
        for key in completed:
            q = quest_state.quests[key]
            self.quest_completed.emit(
                {"id": q.id, "title": q.title, "reward_xp": q.reward_xp},
            )

        return {
            "xp_earned": reward,
            "streak": new_streak,
            "is_new_day": is_new_day,
            "level_up": new_level > old_level,
            "old_level": old_level,
            "new_level": new_level,
            "achievements_unlocked": new_achievements,
            "features_unlocked": new_unlocks,
            "quests_completed": completed,
        }

    def claim_quest(self, quest_id: str) -> bool:
        """Mark a completed quest as claimed and pay out its reward.

        Returns ``False`` (and changes nothing) if the quest doesn't
        exist, isn't completed yet, or was already claimed.
        """
        claimed = claim(self._state, quest_id)
        if claimed is None:
            logger.debug("Quest %r is not claimable", quest_id)
            return False

        quests = dict(self._state.quests)
        quests[quest_id] = claimed
        self._commit(replace(self._state, quests=quests))
        self.add_xp(claimed.reward_xp, reason=f"Quest: {claimed.title}")
        return True

    def reset_streak(self) -> None:
        self._commit(replace(self._state, streak=0))
        self.streak_updated.emit(0, self._state.longest_streak)

    def reset_weekly_quests(self) -> bool:
        """Run the weekly roll-over check.  Returns ``True`` if it reset."""
        state, did_reset = apply_weekly_reset(self._state, self._clock())
        self._commit(state)
        return did_reset

    def reset_state(self) -> None:
        logger.info("Progression state reset")
        self._commit(default_state())

    def start_session(self) -> None:
        """Checks to run whenever the journal app starts up.

        Decays a streak that wasn't renewed yesterday or today, then
        rolls weekly quests over if a new week has begun.
        """
        state = self._state
        if (
            state.streak > 0
            and is_streak_stale(state.last_entry_date, self._clock())
        ):
            logger.info(
                "Streak of %d expired (last entry %s)",
                state.streak, state.last_entry_date,
            )
            self._commit(replace(state, streak=0))
            self.streak_updated.emit(0, state.longest_streak)
        self.reset_weekly_quests()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _commit(self, new_state: ProgressionState) -> None:
        self._state = new_state
        self.state_committed.emit(new_state)

    def _announce_xp(self, amount: int, reason: str) -> None:
        self.xp_awarded.emit({
            "amount": amount,
            "reason": reason,
            "total_xp": self._state.xp,
            "level": self._state.level,
        })

    def _announce_unlocks(self, keys: list[str]) -> None:
        for key in keys:
            u = self._state.unlocks[key]
            self.feature_unlocked.emit({
                "id": u.id,
                "title": u.title,
                "required_level": u.required_level,
            })

    def _announce_level(
        self, old_level: int, new_level: int, unlocks: list[str],
    ) -> None:
        if new_level <= old_level:
            return
        logger.info("Level up: %d -> %d", old_level, new_level)
        self.level_up.emit({
            "old_level": old_level,
            "new_level": new_level,
            "new_title": title_for_level(new_level),
            "unlocks_earned": list(unlocks),
        })
