"""Session-type registry and duration suggestions."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from cosmic_planner.core.config import settings
from cosmic_planner.schemas.session import Difficulty, Session, SessionType
from cosmic_planner.services.effectiveness import TIME_EFFECTIVENESS, SessionCategory, TimeOfDay

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TYPES: List[SessionType] = [
    SessionType(
        id="focus",
        name="Focus",
        color="cosmic-aurora",
        icon="Brain",
        default_duration=45,
        description="Deep learning session",
    ),
    SessionType(
        id="review",
        name="Review",
        color="cosmic-starlight",
        icon="RefreshCw",
        default_duration=20,
        description="Quick knowledge refresh",
    ),
    SessionType(
        id="practice",
        name="Practice",
        color="cosmic-quasar",
        icon="Target",
        default_duration=30,
        description="Apply what you learned",
    ),
    SessionType(
        id="explore",
        name="Explore",
        color="cosmic-nebula",
        icon="Compass",
        default_duration=60,
        description="Discover new concepts",
    ),
]

DIFFICULTY_MULTIPLIERS: Dict[str, float] = {
    "easy": 0.8,
    "medium": 1.0,
    "hard": 1.3,
}

MIN_SUGGESTED_MINUTES = 15


class SessionTypeRegistry:
    """Read-only lookup of session types by id."""

    def __init__(self, types: Optional[Iterable[SessionType]] = None) -> None:
        self._types: Dict[str, SessionType] = {
            entry.id: entry for entry in (DEFAULT_SESSION_TYPES if types is None else types)
        }

    def get(self, type_id: str) -> SessionType | None:
        return self._types.get(type_id)

    def all(self) -> List[SessionType]:
        return list(self._types.values())

    def default_duration(self, type_id: str) -> int:
        session_type = self.get(type_id)
        if session_type is None:
            return settings.default_session_minutes
        return session_type.default_duration


default_registry = SessionTypeRegistry()


def category_for(type_id: str) -> SessionCategory:
    if type_id == "review":
        return "review"
    if type_id == "practice":
        return "practice"
    return "focused"


def suggest_duration(
    type_id: str,
    difficulty: Difficulty,
    time_of_day: TimeOfDay,
    available_time: int | None = None,
    *,
    registry: SessionTypeRegistry | None = None,
) -> int:
    """
    Suggest a session length in minutes.

    Starts from the type's default, scales by difficulty, shortens by 20% when
    the time of day is a weak fit for the session category, and never exceeds
    the available time (floored at 15 minutes).
    """
    registry = registry or default_registry
    session_type = registry.get(type_id)
    if session_type is None:
        return settings.default_session_minutes

    duration = session_type.default_duration * DIFFICULTY_MULTIPLIERS[difficulty]
    modifier = TIME_EFFECTIVENESS[time_of_day].get(category_for(type_id), 1.0)
    if modifier < 0.9:
        duration *= 0.8

    if available_time and duration > available_time:
        duration = max(MIN_SUGGESTED_MINUTES, available_time)

    return int(math.floor(duration + 0.5))


def build_session(
    *,
    title: str,
    start_time: datetime,
    type_id: str,
    duration_minutes: int | None = None,
    session_id: str | None = None,
    registry: SessionTypeRegistry | None = None,
    **fields: object,
) -> Session:
    """Create a Session, falling back to the type's default duration when none is given."""
    if duration_minutes is None:
        duration_minutes = (registry or default_registry).default_duration(type_id)
        logger.debug("Using default duration %s for type %s", duration_minutes, type_id)
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    return Session(
        id=session_id or str(uuid4()),
        title=title,
        start_time=start_time,
        end_time=start_time + timedelta(minutes=duration_minutes),
        estimated_duration=duration_minutes,
        type_id=type_id,
        **fields,
    )
