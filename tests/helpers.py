"""Shared test helpers for JournalQuest."""

from datetime import datetime, timedelta

from journalquest.gamification.state import EntryEvent


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Callable stand-in for ``datetime.now`` that only moves when told."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


_counter = 0


def entry(date: str, *tags: str, focus_minutes=None, focus_level=None) -> EntryEvent:
    """Build an EntryEvent with a unique id."""
    global _counter
    _counter += 1
    return EntryEvent(
        id=f"entry-{_counter}",
        date=date,
        tags=tuple(tags),
        focus_minutes=focus_minutes,
        focus_level=focus_level,
    )
