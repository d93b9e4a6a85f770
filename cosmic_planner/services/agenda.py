"""Relative-time classification and agenda grouping."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Literal

from cosmic_planner.core.clock import Clock, resolve_now
from cosmic_planner.schemas.agenda import AgendaGroup, TimeBucket
from cosmic_planner.schemas.session import Session
from cosmic_planner.services.timeline import sort_by_start

logger = logging.getLogger(__name__)

SessionStatus = Literal["completed", "missed", "active", "upcoming"]

NEXT_HOURS_WINDOW = timedelta(hours=2)
WEEK_WINDOW = timedelta(days=7)
MONTH_WINDOW = timedelta(days=30)


def classify(now: datetime, session: Session) -> TimeBucket:
    """
    Assign a session to exactly one relative-time bucket.

    Predicates are evaluated in bucket order and the first match wins, so the
    buckets partition any set of sessions. Completion state is ignored.
    """
    start = session.start_time
    today = now.date()
    if start < now:
        if start.date() == today:
            return TimeBucket.EARLIER_TODAY
        return TimeBucket.PAST

    ahead = start - now
    if ahead < NEXT_HOURS_WINDOW:
        return TimeBucket.NEXT_2_HOURS
    if start.date() == today:
        return TimeBucket.LATER_TODAY
    if start.date() == today + timedelta(days=1):
        return TimeBucket.TOMORROW
    if ahead <= WEEK_WINDOW:
        return TimeBucket.THIS_WEEK
    if ahead <= MONTH_WINDOW:
        return TimeBucket.THIS_MONTH
    return TimeBucket.FUTURE


def group_sessions(
    sessions: Iterable[Session],
    now: datetime | None = None,
    *,
    clock: Clock | None = None,
    include_empty: bool = False,
) -> List[AgendaGroup]:
    """Group sessions by bucket, in bucket order, each group ascending by start time."""
    current = resolve_now(now, clock)
    grouped: Dict[TimeBucket, List[Session]] = {bucket: [] for bucket in TimeBucket}
    for session in sort_by_start(sessions):
        grouped[classify(current, session)].append(session)

    groups = [
        AgendaGroup(bucket=bucket, label=bucket.label, sessions=members)
        for bucket, members in grouped.items()
        if members or include_empty
    ]
    logger.debug("Grouped agenda into %s bucket(s) at %s", len(groups), current.isoformat())
    return groups


def session_status(now: datetime, session: Session) -> SessionStatus:
    if session.completed:
        return "completed"
    if session.end_time <= now:
        return "missed"
    if session.start_time <= now:
        return "active"
    return "upcoming"


def relative_time_label(now: datetime, instant: datetime) -> str:
    """Short relative description such as 'In 5m', '3h ago' or 'In 2d'."""
    diff_seconds = (instant - now).total_seconds()
    diff_hours = diff_seconds / 3600

    if abs(diff_hours) < 1:
        minutes = _round_half_up(diff_seconds / 60)
        if minutes == 0:
            return "Now"
        if minutes > 0:
            return f"In {minutes}m"
        return f"{abs(minutes)}m ago"

    if abs(diff_hours) < 24:
        hours = _round_half_up(abs(diff_hours))
        return f"In {hours}h" if diff_hours > 0 else f"{hours}h ago"

    days = _round_half_up(abs(diff_hours / 24))
    return f"In {days}d" if diff_hours > 0 else f"{days}d ago"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
