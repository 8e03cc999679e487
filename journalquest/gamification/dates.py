"""Calendar-day and ISO-week primitives.

Everything here compares *calendar days* in local time, never elapsed
seconds: 23:59 on Monday and 00:01 on Tuesday are consecutive days even
though they are two minutes apart.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_entry_date(value: str | date | datetime | None) -> datetime | None:
    """Turn an entry's date into a local, naive ``datetime``.

    Accepts date-only strings (``"2024-01-01"``), naive timestamps and
    offset-aware timestamps (including a trailing ``Z``).  Aware values
    are converted to local time first.  Returns ``None`` for anything
    that cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def to_iso(value: datetime) -> str:
    return value.isoformat()


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return _as_date(a) == _as_date(b)


def is_yesterday(a: date | datetime, b: date | datetime) -> bool:
    """True when *a* falls on the calendar day right before *b*."""
    return _as_date(a) == _as_date(b) - timedelta(days=1)


def week_start(value: date | datetime) -> datetime:
    """Monday 00:00 of the ISO week containing *value*."""
    day = _as_date(value)
    monday = day - timedelta(days=day.weekday())
    return datetime.combine(monday, time.min)


def is_same_week(a: date | datetime, b: date | datetime) -> bool:
    return week_start(a) == week_start(b)
