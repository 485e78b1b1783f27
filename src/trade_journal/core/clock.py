"""Clock abstraction for "today"-relative analytics.

WallClock: real local wall-clock time (dashboard, CLI)
FixedClock: deterministic time (tests, ``--as-of`` reports)

Analytics never call datetime.now() directly when a clock is available.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class IClock(Protocol):
    """Clock interface used by all time-dependent code."""

    def now(self) -> datetime:
        """Current time as a timezone-aware datetime."""
        ...

    def today(self) -> date:
        """Current calendar date in the clock's zone."""
        ...


class WallClock:
    """Real wall-clock time in the system local zone."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock that only moves when told to.

    Naive start values are treated as local wall time.
    """

    def __init__(self, start: datetime | None = None) -> None:
        start = start or datetime(2024, 1, 1, 12, 0, 0)
        if start.tzinfo is None:
            start = start.astimezone()
        self._time = start

    def now(self) -> datetime:
        return self._time

    def today(self) -> date:
        return self._time.date()

    def set_time(self, t: datetime) -> None:
        """Move the clock. Must not go backwards."""
        if t.tzinfo is None:
            t = t.astimezone()
        if t < self._time:
            raise ValueError(
                f"FixedClock cannot go backwards: {t} < {self._time}"
            )
        self._time = t

    def advance_days(self, days: int) -> None:
        self.set_time(self._time + timedelta(days=days))

    @classmethod
    def on_date(cls, day: date) -> FixedClock:
        """Clock pinned to noon local time on ``day``."""
        return cls(datetime(day.year, day.month, day.day, 12, 0, 0))
