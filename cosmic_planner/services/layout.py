"""Projection of sessions onto the 1-D time axis of the day and week grids."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from cosmic_planner.core.config import settings
from cosmic_planner.schemas.layout import LanePlacement, Projection
from cosmic_planner.schemas.session import Session
from cosmic_planner.services.timeline import sort_by_start


def project(
    session: Session,
    window_start_hour: int | None = None,
    window_end_hour: int | None = None,
    pixels_per_hour: float | None = None,
    *,
    minimum_visible_length: float | None = None,
) -> Projection:
    """
    Map a session to an offset/length pair within the visible window.

    Window hours and scale default to the day-grid settings. Only the
    rendering is clipped; the session itself is left untouched. Sessions
    entirely outside the window project to ``Projection(0, 0)``.
    """
    window_start_hour, window_end_hour, pixels_per_hour = _resolve_window(
        window_start_hour, window_end_hour, pixels_per_hour
    )
    if minimum_visible_length is None:
        minimum_visible_length = settings.minimum_visible_hours * pixels_per_hour
    if minimum_visible_length < 0:
        raise ValueError("minimum_visible_length must be non-negative")

    start_hours = _hour_of_day(session.start_time)
    end_hours = start_hours + session.duration.total_seconds() / 3600
    if end_hours <= window_start_hour or start_hours >= window_end_hour:
        return Projection(offset=0, length=0)

    total = (window_end_hour - window_start_hour) * pixels_per_hour
    minimum = min(minimum_visible_length, total)
    offset = max(0.0, (start_hours - window_start_hour) * pixels_per_hour)
    # Length covers only the part inside the window, not the full duration.
    visible = (min(end_hours, window_end_hour) - max(start_hours, window_start_hour)) * pixels_per_hour
    length = max(minimum, visible)

    if offset + length > total:
        if total - offset >= minimum:
            length = total - offset
        else:
            # Pull the block up to keep the minimum length inside the window;
            # offset then sits above the session's start hour.
            length = minimum
            offset = total - minimum
    return Projection(offset=offset, length=length)


def assign_lanes(sessions: Iterable[Session]) -> List[LanePlacement]:
    """
    Stack overlapping sessions into side-by-side lanes.

    Sessions that overlap transitively form a cluster sharing one lane count;
    each session takes the lowest lane free at its start.
    """
    placements: List[LanePlacement] = []
    cluster: List[tuple[Session, int]] = []
    lane_ends: List[datetime] = []
    cluster_end: Optional[datetime] = None

    def flush() -> None:
        width = len(lane_ends)
        placements.extend(
            LanePlacement(session=member, lane=lane, lane_count=width) for member, lane in cluster
        )

    for session in sort_by_start(sessions):
        if cluster_end is not None and session.start_time >= cluster_end:
            flush()
            cluster, lane_ends, cluster_end = [], [], None

        for lane, lane_end in enumerate(lane_ends):
            if lane_end <= session.start_time:
                lane_ends[lane] = session.end_time
                break
        else:
            lane = len(lane_ends)
            lane_ends.append(session.end_time)

        cluster.append((session, lane))
        cluster_end = session.end_time if cluster_end is None else max(cluster_end, session.end_time)

    if cluster:
        flush()
    return placements


def current_time_offset(
    now: datetime,
    window_start_hour: int | None = None,
    window_end_hour: int | None = None,
    pixels_per_hour: float | None = None,
) -> float | None:
    """Offset of the 'now' indicator, or None when now is outside the window."""
    window_start_hour, window_end_hour, pixels_per_hour = _resolve_window(
        window_start_hour, window_end_hour, pixels_per_hour
    )
    hours = _hour_of_day(now)
    if hours < window_start_hour or hours > window_end_hour:
        return None
    return (hours - window_start_hour) * pixels_per_hour


def _hour_of_day(instant: datetime) -> float:
    return instant.hour + instant.minute / 60


def _resolve_window(
    window_start_hour: int | None,
    window_end_hour: int | None,
    pixels_per_hour: float | None,
) -> Tuple[int, int, float]:
    start = settings.day_window_start_hour if window_start_hour is None else window_start_hour
    end = settings.day_window_end_hour if window_end_hour is None else window_end_hour
    scale = settings.pixels_per_hour if pixels_per_hour is None else pixels_per_hour
    _validate_window(start, end, scale)
    return start, end, scale


def _validate_window(window_start_hour: int, window_end_hour: int, pixels_per_hour: float) -> None:
    if not 0 <= window_start_hour < window_end_hour <= 24:
        raise ValueError(
            f"window must satisfy 0 <= start < end <= 24, got {window_start_hour}-{window_end_hour}"
        )
    if pixels_per_hour <= 0:
        raise ValueError("pixels_per_hour must be positive")
