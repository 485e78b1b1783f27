"""Day-of-week and hour-of-day performance analysis.

Breaks closed-trade results down by the local weekday and local hour in
which each trade was exited, to answer questions like "Am I better in
the morning?" or "Should I avoid Fridays?"

Usage::

    perf = time_based_performance(trades)
    print(perf.by_day[0].name, perf.by_day[0].win_rate)   # Monday
    print(perf.by_hour[14].label, perf.by_hour[14].pnl)   # "14:00"
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any

from .record import TradeRecord, local_time

logger = logging.getLogger(__name__)

# Monday first, matching datetime.weekday()
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass
class _BucketStats:
    """Accumulator for a time bucket."""

    pnl: float = 0.0
    wins: int = 0
    total: int = 0

    def record(self, trade: TradeRecord) -> None:
        pnl = trade.pnl if trade.pnl is not None else 0.0
        self.pnl += pnl
        self.total += 1
        if pnl > 0:
            self.wins += 1

    @property
    def win_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.wins / self.total * 100.0


@dataclass(frozen=True)
class DayBucket:
    name: str
    weekday: int  # 0=Monday
    pnl: float
    wins: int
    total: int
    win_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pnl": self.pnl,
            "wins": self.wins,
            "total": self.total,
            "win_rate": self.win_rate,
        }


@dataclass(frozen=True)
class HourBucket:
    hour: int
    label: str  # "HH:00"
    pnl: float
    wins: int
    total: int
    win_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "label": self.label,
            "pnl": self.pnl,
            "wins": self.wins,
            "total": self.total,
            "win_rate": self.win_rate,
        }


@dataclass(frozen=True)
class TimeBasedPerformance:
    by_day: list[DayBucket] = field(default_factory=list)   # 7, Monday..Sunday
    by_hour: list[HourBucket] = field(default_factory=list)  # 24, 00:00..23:00

    def to_dict(self) -> dict[str, Any]:
        return {
            "by_day": [d.to_dict() for d in self.by_day],
            "by_hour": [h.to_dict() for h in self.by_hour],
        }


def time_based_performance(
    trades: Sequence[TradeRecord],
    *,
    tz: str | tzinfo | None = None,
) -> TimeBasedPerformance:
    """Bucket closed trades by exit weekday and exit hour.

    Every bucket is present even when empty.  Closed trades without a
    numeric PnL count toward ``total`` with zero PnL.  Trades without a
    usable exit time cannot be placed and are skipped.
    """
    days = [_BucketStats() for _ in range(7)]
    hours = [_BucketStats() for _ in range(24)]
    skipped = 0

    for trade in trades:
        if not trade.is_closed:
            continue
        exit_local = None
        if trade.exit_timestamp is not None:
            exit_local = local_time(trade.exit_timestamp, tz)
        if exit_local is None:
            skipped += 1
            continue
        days[exit_local.weekday()].record(trade)
        hours[exit_local.hour].record(trade)

    if skipped:
        logger.debug("Skipped %d closed trades without a valid exit time", skipped)

    by_day = [
        DayBucket(
            name=DAY_NAMES[i],
            weekday=i,
            pnl=b.pnl,
            wins=b.wins,
            total=b.total,
            win_rate=b.win_rate,
        )
        for i, b in enumerate(days)
    ]
    by_hour = [
        HourBucket(
            hour=h,
            label=f"{h:02d}:00",
            pnl=b.pnl,
            wins=b.wins,
            total=b.total,
            win_rate=b.win_rate,
        )
        for h, b in enumerate(hours)
    ]
    return TimeBasedPerformance(by_day=by_day, by_hour=by_hour)


def _best(buckets: Sequence[DayBucket] | Sequence[HourBucket]) -> Any:
    traded = [b for b in buckets if b.total > 0]
    if not traded:
        return None
    return max(traded, key=lambda b: b.pnl)


def best_day(perf: TimeBasedPerformance) -> DayBucket | None:
    """Weekday with the highest PnL among days that saw trades."""
    return _best(perf.by_day)


def best_hour(perf: TimeBasedPerformance) -> HourBucket | None:
    """Hour with the highest PnL among hours that saw trades."""
    return _best(perf.by_hour)
