"""Cumulative PnL curve and drawdown.

Both walk the eligible trades in exit-time order.  Cumulative PnL starts
at zero before the first trade, and so does the running peak: a journal
whose very first trade loses money is already in drawdown.

Example::

    curve = cumulative_pnl(trades)
    print(curve[-1].cumulative_pnl, max_drawdown(trades))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .metrics import chronological_trades
from .record import TradeRecord


@dataclass(frozen=True)
class CumulativePoint:
    """Equity-curve sample taken right after one trade closed."""

    date: datetime | None  # None when the exit time is invalid
    cumulative_pnl: float
    trade: TradeRecord

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat() if self.date else None,
            "cumulative_pnl": self.cumulative_pnl,
            "trade_id": self.trade.id,
        }


def cumulative_pnl(trades: Sequence[TradeRecord]) -> list[CumulativePoint]:
    """Running PnL total, one point per eligible trade, oldest first."""
    points: list[CumulativePoint] = []
    running = 0.0
    for trade in chronological_trades(trades):
        running += trade.pnl
        points.append(CumulativePoint(trade.exit_timestamp, running, trade))
    return points


def drawdown_series(trades: Sequence[TradeRecord]) -> list[float]:
    """Distance below the running peak after each eligible trade."""
    drawdowns: list[float] = []
    running = 0.0
    peak = 0.0
    for trade in chronological_trades(trades):
        running += trade.pnl
        if running > peak:
            peak = running
        # Zero at the peak, including a peak that overflowed to inf.
        drawdowns.append(0.0 if running == peak else peak - running)
    return drawdowns


def max_drawdown(trades: Sequence[TradeRecord]) -> float:
    """Largest peak-to-trough drop of cumulative PnL (absolute, >= 0)."""
    return max(drawdown_series(trades), default=0.0)
