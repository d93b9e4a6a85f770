"""Hour-of-day learning effectiveness model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal

from cosmic_planner.core.config import settings

TimeOfDay = Literal["morning", "afternoon", "evening"]
SessionCategory = Literal["focused", "review", "practice"]

BASELINE_EFFECTIVENESS = 0.5


@dataclass(frozen=True)
class OptimalStudyTime:
    hour: int
    label: str
    effectiveness: float


OPTIMAL_STUDY_TIMES: List[OptimalStudyTime] = [
    OptimalStudyTime(hour=9, label="Morning Focus", effectiveness=0.95),
    OptimalStudyTime(hour=10, label="Peak Morning", effectiveness=1.0),
    OptimalStudyTime(hour=11, label="Late Morning", effectiveness=0.9),
    OptimalStudyTime(hour=14, label="Post-Lunch", effectiveness=0.7),
    OptimalStudyTime(hour=15, label="Afternoon", effectiveness=0.8),
    OptimalStudyTime(hour=16, label="Late Afternoon", effectiveness=0.85),
    OptimalStudyTime(hour=19, label="Evening Review", effectiveness=0.75),
    OptimalStudyTime(hour=20, label="Night Study", effectiveness=0.6),
]

_SCORES: Dict[int, float] = {entry.hour: entry.effectiveness for entry in OPTIMAL_STUDY_TIMES}

# Relative modifiers (1.0 = neutral) per time of day and session category.
TIME_EFFECTIVENESS: Dict[TimeOfDay, Dict[SessionCategory, float]] = {
    "morning": {"focused": 1.2, "review": 1.0, "practice": 1.1},
    "afternoon": {"focused": 0.9, "review": 1.1, "practice": 1.2},
    "evening": {"focused": 0.8, "review": 1.2, "practice": 0.9},
}


def _check_hour(hour: int) -> None:
    if not isinstance(hour, int) or isinstance(hour, bool) or not 0 <= hour <= 23:
        raise ValueError(f"hour must be an integer in 0..23, got {hour!r}")


def effectiveness_of(hour: int) -> float:
    """Return the modeled learning effectiveness of an hour, in [0, 1]."""
    _check_hour(hour)
    return _SCORES.get(hour, BASELINE_EFFECTIVENESS)


def is_optimal(hour: int, threshold: float | None = None) -> bool:
    """True when the hour scores strictly above the optimal threshold."""
    limit = settings.optimal_threshold if threshold is None else threshold
    return effectiveness_of(hour) > limit


def optimal_study_times() -> List[OptimalStudyTime]:
    return sorted(OPTIMAL_STUDY_TIMES, key=lambda entry: entry.hour)


def time_of_day(hour: int) -> TimeOfDay:
    """Coarse bucket used for duration suggestions."""
    _check_hour(hour)
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"
