"""Learning-session scheduling engine for the cosmic planner."""

from cosmic_planner.core.clock import Clock, FixedClock, SystemClock
from cosmic_planner.core.logging import configure_logging
from cosmic_planner.schemas.agenda import AgendaGroup, TimeBucket
from cosmic_planner.schemas.layout import LanePlacement, Projection
from cosmic_planner.schemas.session import FreeSlot, Session, SessionType
from cosmic_planner.services.agenda import classify, group_sessions, relative_time_label, session_status
from cosmic_planner.services.effectiveness import effectiveness_of, is_optimal, optimal_study_times
from cosmic_planner.services.layout import assign_lanes, current_time_offset, project
from cosmic_planner.services.session_types import SessionTypeRegistry, build_session, suggest_duration
from cosmic_planner.services.slot_search import find_first_slot, find_slots, suggest_sessions

__version__ = "0.1.0"

__all__ = [
    "AgendaGroup",
    "Clock",
    "FixedClock",
    "FreeSlot",
    "LanePlacement",
    "Projection",
    "Session",
    "SessionType",
    "SessionTypeRegistry",
    "SystemClock",
    "TimeBucket",
    "assign_lanes",
    "build_session",
    "classify",
    "configure_logging",
    "current_time_offset",
    "effectiveness_of",
    "find_first_slot",
    "find_slots",
    "group_sessions",
    "is_optimal",
    "optimal_study_times",
    "project",
    "relative_time_label",
    "session_status",
    "suggest_duration",
    "suggest_sessions",
]
