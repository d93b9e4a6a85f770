"""Schemas for grid projection."""
from __future__ import annotations

from pydantic import BaseModel, Field

from cosmic_planner.schemas.session import Session


class Projection(BaseModel):
    offset: float = Field(..., ge=0)
    length: float = Field(..., ge=0)

    @property
    def end(self) -> float:
        return self.offset + self.length


class LanePlacement(BaseModel):
    session: Session
    lane: int
    lane_count: int
