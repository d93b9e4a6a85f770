"""Free-slot search and the planning assistant built on top of it."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cosmic_planner.core.clock import Clock, resolve_now
from cosmic_planner.core.config import settings
from cosmic_planner.observability.metrics import log_metric
from cosmic_planner.observability.tracing import trace
from cosmic_planner.schemas.session import FreeSlot, Session, minutes_between
from cosmic_planner.services.session_types import build_session
from cosmic_planner.services.timeline import at_hour, day_range

logger = logging.getLogger(__name__)

TIME_PREFERENCES: Dict[str, List[int]] = {
    "morning": [9, 10, 11],
    "afternoon": [14, 15, 16],
    "evening": [19, 20],
}

FOCUS_SESSION_TYPES: Dict[str, str] = {
    "learning": "focus",
    "practice": "practice",
    "review": "review",
    "mixed": "explore",
}


def find_slots(
    day: date,
    duration_minutes: int,
    existing_sessions: Iterable[Session],
    window_start_hour: int | None = None,
    window_end_hour: int | None = None,
    *,
    now: datetime | None = None,
    clock: Clock | None = None,
) -> List[FreeSlot]:
    """
    Return every free gap on ``day`` that fits ``duration_minutes``.

    Gaps lie inside ``[window_start_hour:00, window_end_hour:00)``, never
    overlap an existing session, and never start at or before ``now``. They
    are returned earliest first; a gap longer than required is reported whole
    and its booking is placed at the gap's beginning (greedy earliest-fit).
    """
    start_hour = settings.search_window_start_hour if window_start_hour is None else window_start_hour
    end_hour = settings.search_window_end_hour if window_end_hour is None else window_end_hour
    _validate_request(duration_minutes, start_hour, end_hour)
    current = resolve_now(now, clock)

    with trace(
        "slot_search.find_slots",
        metadata={
            "day": day.isoformat(),
            "duration_minutes": duration_minutes,
            "window": f"{start_hour}-{end_hour}",
        },
    ):
        if start_hour >= end_hour:
            logger.debug("Empty search window %s-%s on %s", start_hour, end_hour, day)
            slots: List[FreeSlot] = []
            obstacles: List[Tuple[datetime, datetime]] = []
        else:
            window = (at_hour(day, start_hour), at_hour(day, end_hour))
            obstacles = _union_intervals(
                [
                    (session.start_time, session.end_time)
                    for session in existing_sessions
                    if session.start_time < window[1] and window[0] < session.end_time
                ]
            )
            earliest = max(window[0], _first_minute_after(current))
            slots = [
                FreeSlot(start=gap_start, end=gap_end, requested_minutes=duration_minutes)
                for gap_start, gap_end in _free_gaps(window, obstacles, earliest)
                if minutes_between(gap_start, gap_end) >= duration_minutes
            ]

    logger.debug(
        "Found %s slot(s) for %s minutes on %s (%s obstacle(s))",
        len(slots),
        duration_minutes,
        day,
        len(obstacles),
    )
    log_metric("slot_search.slots_found", len(slots), metadata={"day": day.isoformat()})
    return slots


def find_first_slot(
    days: Iterable[date],
    duration_minutes: int,
    existing_sessions: Iterable[Session],
    window_start_hour: int | None = None,
    window_end_hour: int | None = None,
    *,
    now: datetime | None = None,
    clock: Clock | None = None,
) -> Optional[FreeSlot]:
    """Return the first slot of the first day (in caller order) that has room."""
    _validate_request(
        duration_minutes,
        settings.search_window_start_hour if window_start_hour is None else window_start_hour,
        settings.search_window_end_hour if window_end_hour is None else window_end_hour,
    )
    current = resolve_now(now, clock)
    sessions = list(existing_sessions)
    for day in days:
        slots = find_slots(
            day,
            duration_minutes,
            sessions,
            window_start_hour,
            window_end_hour,
            now=current,
        )
        if slots:
            return slots[0]
    return None


def preferred_window(preferred_times: Sequence[str]) -> Tuple[int, int]:
    """Map time-of-day preferences to a contiguous [start, end) hour window."""
    if not preferred_times:
        raise ValueError("at least one preferred time is required")
    hours: List[int] = []
    for label in preferred_times:
        if label not in TIME_PREFERENCES:
            raise ValueError(f"unknown preferred time {label!r}")
        hours.extend(TIME_PREFERENCES[label])
    return min(hours), max(hours) + 1


def suggest_sessions(
    duration_minutes: int,
    existing_sessions: Iterable[Session],
    *,
    preferred_times: Sequence[str] = ("morning",),
    focus: str = "learning",
    start_day: date | None = None,
    horizon_days: int | None = None,
    now: datetime | None = None,
    clock: Clock | None = None,
) -> List[Session]:
    """
    Draft one session per day over the horizon, at each day's earliest free slot.

    Days without room are skipped. The drafts are not added to the caller's
    store; the caller decides whether to keep them.
    """
    if focus not in FOCUS_SESSION_TYPES:
        raise ValueError(f"unknown session focus {focus!r}")
    start_hour, end_hour = preferred_window(preferred_times)
    current = resolve_now(now, clock)
    horizon = settings.assistant_horizon_days if horizon_days is None else horizon_days
    sessions = list(existing_sessions)
    title = "Balanced Session" if focus == "mixed" else f"{focus.capitalize()} Session"

    suggestions: List[Session] = []
    for offset, day in enumerate(day_range(start_day or current.date(), horizon)):
        slots = find_slots(day, duration_minutes, sessions, start_hour, end_hour, now=current)
        if not slots:
            logger.debug("No room on %s for a %s-minute %s session", day, duration_minutes, focus)
            continue
        slot = slots[0]
        suggestions.append(
            build_session(
                session_id=f"suggestion-{offset}",
                title=title,
                description=(
                    f"Optimized {duration_minutes}-minute session for "
                    f"{' & '.join(preferred_times)} learner"
                ),
                start_time=slot.start,
                type_id=FOCUS_SESSION_TYPES[focus],
                duration_minutes=duration_minutes,
                tags=[focus],
            )
        )
    return suggestions


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _validate_request(duration_minutes: int, start_hour: int, end_hour: int) -> None:
    if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool):
        raise ValueError("duration_minutes must be an integer")
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    for label, hour in (("window_start_hour", start_hour), ("window_end_hour", end_hour)):
        if not 0 <= hour <= 24:
            raise ValueError(f"{label} must be within 0..24, got {hour}")


def _first_minute_after(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0) + timedelta(minutes=1)


def _union_intervals(intervals: List[Tuple[datetime, datetime]]) -> List[Tuple[datetime, datetime]]:
    if not intervals:
        return []
    intervals = sorted(intervals)
    out: List[Tuple[datetime, datetime]] = []
    cur_s, cur_e = intervals[0]
    for s, e in intervals[1:]:
        if s <= cur_e:
            cur_e = max(cur_e, e)
        else:
            out.append((cur_s, cur_e))
            cur_s, cur_e = s, e
    out.append((cur_s, cur_e))
    return out


def _free_gaps(
    window: Tuple[datetime, datetime],
    blocks: List[Tuple[datetime, datetime]],
    earliest: datetime,
) -> List[Tuple[datetime, datetime]]:
    """Walk the window left to right and return the gaps between unioned blocks."""
    cursor, end = earliest, window[1]
    if cursor >= end:
        return []
    out: List[Tuple[datetime, datetime]] = []
    for s, e in blocks:
        if e <= cursor:
            continue
        if s >= end:
            break
        if s > cursor:
            out.append((cursor, s))
        cursor = max(cursor, e)
        if cursor >= end:
            break
    if cursor < end:
        out.append((cursor, end))
    return out
