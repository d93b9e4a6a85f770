"""Schemas for agenda grouping."""
from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel

from cosmic_planner.schemas.session import Session


class TimeBucket(str, Enum):
    EARLIER_TODAY = "earlier-today"
    PAST = "past"
    NEXT_2_HOURS = "next-2-hours"
    LATER_TODAY = "later-today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    FUTURE = "future"

    @property
    def label(self) -> str:
        return BUCKET_LABELS[self]


BUCKET_LABELS = {
    TimeBucket.EARLIER_TODAY: "Earlier Today",
    TimeBucket.PAST: "Past Sessions",
    TimeBucket.NEXT_2_HOURS: "Next 2 Hours",
    TimeBucket.LATER_TODAY: "Later Today",
    TimeBucket.TOMORROW: "Tomorrow",
    TimeBucket.THIS_WEEK: "This Week",
    TimeBucket.THIS_MONTH: "This Month",
    TimeBucket.FUTURE: "Future",
}


class AgendaGroup(BaseModel):
    bucket: TimeBucket
    label: str
    sessions: List[Session]
