"""Daily PnL heatmap (calendar view).

Aggregates closed trades by the local calendar day they were exited and
lays the result out as a fixed-length trailing window ending today,
oldest day first.  Days without trades are present with zero PnL so the
caller can render a continuous calendar grid.

Usage::

    days = daily_performance(trades, days_to_show=90)
    for day in days:
        print(day.date_key, day.pnl, day.color_category, day.intensity)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from typing import Any

from trade_journal.core.clock import IClock, WallClock
from trade_journal.core.enums import DayColor

from .record import INVALID_DATE_KEY, TradeRecord, local_time

logger = logging.getLogger(__name__)

DEFAULT_DAYS_TO_SHOW = 365

# PnL magnitude above which a day reaches intensity 4, 3, 2 (else 1)
INTENSITY_THRESHOLDS = (500.0, 200.0, 50.0)


@dataclass
class _DayAccumulator:
    pnl: float = 0.0
    trade_count: int = 0
    trades: list[TradeRecord] = field(default_factory=list)

    def record(self, trade: TradeRecord) -> None:
        if trade.pnl is not None:
            self.pnl += trade.pnl
        self.trade_count += 1
        self.trades.append(trade)


@dataclass(frozen=True)
class DailyBucket:
    """One cell of the calendar heatmap."""

    date: date
    date_key: str  # YYYY-MM-DD
    pnl: float
    trade_count: int
    trades: tuple[TradeRecord, ...]
    color_category: DayColor
    intensity: int  # 0-4

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_key,
            "pnl": self.pnl,
            "trade_count": self.trade_count,
            "trade_ids": [t.id for t in self.trades],
            "color_category": self.color_category.value,
            "intensity": self.intensity,
        }


def day_key(trade: TradeRecord, tz: str | tzinfo | None = None) -> str:
    """Local calendar day of the trade's exit, or ``"Invalid Date"``."""
    if trade.exit_timestamp is None:
        return INVALID_DATE_KEY
    exit_local = local_time(trade.exit_timestamp, tz)
    if exit_local is None:
        return INVALID_DATE_KEY
    return exit_local.date().isoformat()


def classify_day(pnl: float, trade_count: int) -> tuple[DayColor, int]:
    """Colour category and intensity (0-4) for a day's aggregate PnL."""
    if trade_count == 0:
        return DayColor.NEUTRAL, 0
    if pnl == 0:
        return DayColor.NEUTRAL, 1

    color = DayColor.PROFIT if pnl > 0 else DayColor.LOSS
    magnitude = abs(pnl)
    intensity = 1
    for level, threshold in zip((4, 3, 2), INTENSITY_THRESHOLDS):
        if magnitude > threshold:
            intensity = level
            break
    return color, intensity


def _today(tz: str | tzinfo | None, clock: IClock | None) -> date:
    now = (clock or WallClock()).now()
    return (local_time(now, tz) or now).date()


def daily_performance(
    trades: Sequence[TradeRecord],
    days_to_show: int = DEFAULT_DAYS_TO_SHOW,
    *,
    today: date | None = None,
    tz: str | tzinfo | None = None,
    clock: IClock | None = None,
) -> list[DailyBucket]:
    """Per-day PnL for the ``days_to_show`` days ending ``today``.

    Parameters
    ----------
    trades : Sequence[TradeRecord]
        Any mix of trades; only CLOSED ones are counted.  A closed trade
        without a numeric PnL adds to the day's trade count only.
    days_to_show : int
        Length of the window.  Zero or negative yields an empty list.
    today : date | None
        Last day of the window.  Defaults to the current date of
        ``clock``.
    tz : str | tzinfo | None
        Zone used to turn aware exit times into calendar days.
    clock : IClock | None
        Source of "today" when ``today`` is omitted.  Defaults to
        WallClock.
    """
    by_day: dict[str, _DayAccumulator] = {}
    for trade in trades:
        if not trade.is_closed:
            continue
        key = day_key(trade, tz)
        acc = by_day.get(key)
        if acc is None:
            acc = by_day[key] = _DayAccumulator()
        acc.record(trade)

    if INVALID_DATE_KEY in by_day:
        logger.debug(
            "%d closed trades have no valid exit time",
            by_day[INVALID_DATE_KEY].trade_count,
        )

    if days_to_show <= 0:
        return []

    end = today or _today(tz, clock)
    empty = _DayAccumulator()
    result: list[DailyBucket] = []
    for offset in range(days_to_show - 1, -1, -1):
        day = end - timedelta(days=offset)
        key = day.isoformat()
        acc = by_day.get(key, empty)
        color, intensity = classify_day(acc.pnl, acc.trade_count)
        result.append(DailyBucket(
            date=day,
            date_key=key,
            pnl=acc.pnl,
            trade_count=acc.trade_count,
            trades=tuple(acc.trades),
            color_category=color,
            intensity=intensity,
        ))
    return result
