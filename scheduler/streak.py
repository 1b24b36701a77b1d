"""Daily practice streak bookkeeping.

Calendar days are UTC dates derived from epoch-millisecond timestamps.
"""
import datetime as dt
from datetime import date, timedelta
from typing import Optional


def day_of(ts_ms: int) -> date:
    """UTC calendar day of an epoch-millisecond timestamp."""
    return dt.datetime.fromtimestamp(ts_ms / 1000, tz=dt.timezone.utc).date()


def iso_date(value: date) -> str:
    return value.isoformat()


def _parse_day(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def advance_streak(last_activity_date: str, streak_count: int, today: date) -> tuple[str, int]:
    """Apply one activity on `today` and return the new (date, count).

    Same day leaves the streak unchanged, the next calendar day extends it,
    anything else restarts it at 1.
    """
    last = _parse_day(last_activity_date)
    if last == today:
        return last_activity_date, streak_count
    if last == today - timedelta(days=1):
        return iso_date(today), streak_count + 1
    return iso_date(today), 1


def live_streak(last_activity_date: str, streak_count: int, today: date) -> int:
    """Streak as seen on `today` without recording activity.

    A streak whose last activity is older than yesterday has lapsed.
    """
    last = _parse_day(last_activity_date)
    if last is None:
        return 0
    # Allow today or yesterday as the latest active day
    if last == today or last == today - timedelta(days=1):
        return streak_count
    return 0
