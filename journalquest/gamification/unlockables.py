"""Level-gated feature unlocks for JournalQuest.

Unlock Catalog
--------------
    Lv 3   Dark Mode        dark theme for the journal
    Lv 5   Themes           custom colour themes
    Lv 7   Advanced Stats   extra statistics and analytics

Unlocks only ever go from locked to unlocked.  The journal app decides
what each one actually turns on; this module just keeps the flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .state import Unlock

logger = logging.getLogger(__name__)


# ── catalog ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UnlockDef:
    key: str
    name: str
    required_level: int
    description: str


UNLOCKS: list[UnlockDef] = [
    UnlockDef("dark-mode", "Dark Mode", 3, "Unlock dark mode theme"),
    UnlockDef("themes", "Themes", 5, "Unlock custom color themes"),
    UnlockDef(
        "advanced-stats", "Advanced Stats", 7,
        "Unlock advanced statistics and analytics",
    ),
]


def default_unlocks() -> dict[str, Unlock]:
    return {
        d.key: Unlock(
            id=d.key,
            title=d.name,
            description=d.description,
            required_level=d.required_level,
        )
        for d in UNLOCKS
    }


# ── evaluator ────────────────────────────────────────────────────────────


def evaluate_unlocks(
    unlocks: dict[str, Unlock], level: int,
) -> tuple[dict[str, Unlock], list[str]]:
    """Unlock everything *level* qualifies for that isn't unlocked yet.

    Returns ``(updated_map, newly_unlocked_ids)``.
    """
    updated = dict(unlocks)
    newly_unlocked: list[str] = []

    for key, unlock in unlocks.items():
        if unlock.unlocked:
            continue
        if level >= unlock.required_level:
            updated[key] = replace(unlock, unlocked=True)
            newly_unlocked.append(key)
            logger.info("Feature unlocked at level %d: %s", level, key)

    return updated, newly_unlocked


def next_unlock(unlocks: dict[str, Unlock], level: int) -> Unlock | None:
    """Return the lowest-level locked unlock the player hasn't reached yet."""
    candidates = [
        u for u in unlocks.values()
        if not u.unlocked and u.required_level > level
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda u: u.required_level)
