"""Schemas for learning sessions and free capacity."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

Difficulty = Literal["easy", "medium", "hard"]

_DATETIME = TypeAdapter(datetime)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end."""
    return int((end - start).total_seconds() // 60)


class SessionType(BaseModel):
    id: str
    name: str
    color: str
    icon: str
    default_duration: int = Field(..., ge=1)
    description: str


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    type_id: str
    completed: bool = False
    lesson_id: Optional[str] = None
    constellation_id: Optional[str] = None
    difficulty: Difficulty = "medium"
    tags: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def derive_estimated_duration(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("estimated_duration") is not None:
            return data
        try:
            start = _DATETIME.validate_python(data.get("start_time"))
            end = _DATETIME.validate_python(data.get("end_time"))
        except ValidationError:
            # Field validation reports the bad timestamp.
            return data
        if end <= start:
            return data
        return {**data, "estimated_duration": minutes_between(start, end)}

    @model_validator(mode="after")
    def check_interval(self) -> "Session":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be later than start_time")
        span = minutes_between(self.start_time, self.end_time)
        if self.estimated_duration is None:
            raise ValueError("estimated_duration could not be derived from the interval")
        if self.estimated_duration != span:
            raise ValueError(
                f"estimated_duration={self.estimated_duration} contradicts the {span}-minute interval"
            )
        return self

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open overlap test against [start, end)."""
        return self.start_time < end and start < self.end_time


class FreeSlot(BaseModel):
    """A free gap inside a search window, large enough for the requested duration."""

    start: datetime
    end: datetime
    requested_minutes: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_capacity(self) -> "FreeSlot":
        if minutes_between(self.start, self.end) < self.requested_minutes:
            raise ValueError("slot is shorter than the requested duration")
        return self

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    @property
    def booking_end(self) -> datetime:
        """End of the earliest-fit booking placed at the start of the gap."""
        return self.start + timedelta(minutes=self.requested_minutes)
