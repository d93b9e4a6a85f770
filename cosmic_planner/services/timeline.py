"""Calendar range helpers and read-only queries over a caller-owned session store."""
from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

from cosmic_planner.schemas.session import Session


def start_of_day(day: date | datetime) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def end_of_day(day: date | datetime) -> datetime:
    """Last representable instant of the day (23:59:59.999999)."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.max)


def at_hour(day: date, hour: int) -> datetime:
    """Instant at hour:00 on day; hour 24 is the following midnight."""
    return start_of_day(day) + timedelta(hours=hour)


def week_bounds(day: date | datetime) -> Tuple[datetime, datetime]:
    """Sunday-start week containing day."""
    if isinstance(day, datetime):
        day = day.date()
    # date.weekday(): Monday == 0 ... Sunday == 6
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start_of_day(start), end_of_day(start + timedelta(days=6))


def week_days(day: date | datetime) -> List[date]:
    start, _ = week_bounds(day)
    return [start.date() + timedelta(days=offset) for offset in range(7)]


def month_bounds(day: date | datetime) -> Tuple[datetime, datetime]:
    if isinstance(day, datetime):
        day = day.date()
    last = calendar.monthrange(day.year, day.month)[1]
    return start_of_day(day.replace(day=1)), end_of_day(day.replace(day=last))


def day_range(start_day: date, days: int) -> List[date]:
    if days < 0:
        raise ValueError("days must be non-negative")
    return [start_day + timedelta(days=offset) for offset in range(days)]


def sort_by_start(sessions: Iterable[Session]) -> List[Session]:
    """Stable sort by start time, then end time."""
    return sorted(sessions, key=lambda session: (session.start_time, session.end_time))


def sessions_on(day: date, sessions: Iterable[Session]) -> List[Session]:
    """Sessions starting on the given calendar day, ordered by start."""
    return sort_by_start(session for session in sessions if session.start_time.date() == day)


def sessions_between(start: datetime, end: datetime, sessions: Iterable[Session]) -> List[Session]:
    """Sessions intersecting [start, end), ordered by start."""
    if end <= start:
        return []
    return sort_by_start(session for session in sessions if session.overlaps(start, end))


def format_duration(minutes: int) -> str:
    """Human readable duration: 45m, 2h, 1h 30m."""
    if minutes < 0:
        raise ValueError("minutes must be non-negative")
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
