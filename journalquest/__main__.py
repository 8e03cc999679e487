"""Allow running JournalQuest as a module: python -m journalquest.

    python -m journalquest                          # progress summary
    python -m journalquest --entry 2024-01-02 --tags math --focus-minutes 30
    python -m journalquest --claim weekly-entries-3
    python -m journalquest --json                   # persisted record
"""

import argparse
import json
import sys
import uuid

from PyQt6.QtCore import QCoreApplication

from .database.db import configure_engine, init_db
from .database.store import ProgressionStore
from .gamification.engine import ProgressionEngine
from .gamification.state import EntryEvent, ProgressionSnapshot, state_to_record
from .gamification.xp import title_for_level
from .log import configure_logging
from .settings import load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="journalquest")
    parser.add_argument("--entry", metavar="DATE", help="register an entry dated DATE")
    parser.add_argument("--tags", nargs="*", default=[], help="tags for --entry")
    parser.add_argument("--focus-minutes", type=float, default=None)
    parser.add_argument("--focus-level", type=int, default=None)
    parser.add_argument("--claim", metavar="QUEST_ID", help="claim a completed quest")
    parser.add_argument("--reset", action="store_true", help="wipe all progress")
    parser.add_argument("--json", action="store_true", help="print the saved record")
    return parser


def _print_summary(snap: ProgressionSnapshot) -> None:
    p = snap.xp_progress
    print(f"Level {snap.level} — {title_for_level(snap.level)}")
    print(f"XP {snap.xp}  ({p.current}/{p.required}, {p.percentage:.0f}%)")
    print(f"Streak {snap.streak} day(s), longest {snap.longest_streak}")
    print(f"Entries {snap.total_entries}, focus {snap.total_focus_minutes:g} min")
    print("Achievements:")
    for a in snap.achievements:
        mark = "x" if a.unlocked else " "
        print(f"  [{mark}] {a.icon} {a.title} ({a.progress:g}/{a.requirement})")
    print("Quests:")
    for q in snap.quests:
        status = "claimed" if q.claimed else "done" if q.completed else "active"
        print(f"  {q.id}: {q.progress}/{q.target} {status} (+{q.reward_xp} XP)")
    print("Unlocks:")
    for u in snap.unlocks:
        mark = "x" if u.unlocked else " "
        print(f"  [{mark}] {u.title} (level {u.required_level})")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    configure_engine(settings.resolved_database_url())
    init_db()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("JournalQuest")

    store = ProgressionStore() if settings.persist_enabled else None
    engine = ProgressionEngine(store=store)
    if settings.check_streak_on_start:
        engine.start_session()
    else:
        engine.reset_weekly_quests()

    if args.reset:
        engine.reset_state()

    if args.entry:
        result = engine.register_entry(EntryEvent(
            id=uuid.uuid4().hex,
            date=args.entry,
            tags=tuple(args.tags),
            focus_minutes=args.focus_minutes,
            focus_level=args.focus_level,
        ))
        if result is None:
            print(f"Could not read entry date {args.entry!r}", file=sys.stderr)
            return 1
        print(f"+{result['xp_earned']} XP, streak {result['streak']}")

    if args.claim and not engine.claim_quest(args.claim):
        print(f"Quest {args.claim!r} is not claimable", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(state_to_record(engine.state), indent=2, ensure_ascii=False))
    else:
        _print_summary(engine.snapshot())
    return 0


if __name__ == "__main__":
    sys.exit(main())
