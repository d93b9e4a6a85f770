"""Clock collaborators supplying the current local instant."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in naive local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant; the host advances it explicitly."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, *, minutes: int = 0, hours: int = 0, days: int = 0) -> datetime:
        self._instant = self._instant + timedelta(minutes=minutes, hours=hours, days=days)
        return self._instant


default_clock: Clock = SystemClock()


def resolve_now(now: datetime | None = None, clock: Clock | None = None) -> datetime:
    """Return the explicit instant if given, otherwise query the clock."""
    if now is not None:
        return now
    return (clock or default_clock).now()
