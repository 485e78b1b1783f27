"""Aggregate PnL, rate and ratio metrics.

Every function here is a pure reduction over a sequence of trade
records.  Only CLOSED trades take part in profit/loss analytics, and a
trade without a numeric PnL is left out of every sum and average rather
than being counted as zero.  Fees and funding are the exception: they
are summed across all trades regardless of status.

Ratios never return ``inf`` or ``nan``.  When the denominator is zero
they return :data:`RATIO_CAP` if the numerator is positive and ``0.0``
otherwise; the same applies when a sum or quotient overflows.  The cap is a display-friendly stand-in for "no losses yet",
not a real ratio.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

from trade_journal.core.enums import TradeStatus

from .record import TradeRecord

RATIO_CAP = 100.0


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def closed_trades(trades: Sequence[TradeRecord]) -> list[TradeRecord]:
    """CLOSED trades, in input order, with or without a numeric PnL."""
    return [t for t in trades if t.is_closed]


def eligible_trades(trades: Sequence[TradeRecord]) -> list[TradeRecord]:
    """CLOSED trades that carry a numeric PnL, in input order."""
    return [t for t in trades if t.is_eligible]


def chronological_trades(trades: Sequence[TradeRecord]) -> list[TradeRecord]:
    """Eligible trades ordered by exit time.

    The sort is stable, so trades sharing an exit time keep their input
    order.  Trades with a missing or invalid exit time go last.
    """
    return sorted(eligible_trades(trades), key=lambda t: t.exit_sort_key)


def count_by_status(trades: Sequence[TradeRecord]) -> dict[str, int]:
    counts = Counter(t.status for t in trades)
    return {status.value: counts.get(status, 0) for status in TradeStatus}


# ---------------------------------------------------------------------------
# Totals and rates
# ---------------------------------------------------------------------------

def total_pnl(trades: Sequence[TradeRecord]) -> float:
    """Sum of PnL over closed trades with a numeric PnL."""
    return sum((t.pnl for t in eligible_trades(trades)), 0.0)


def win_rate(trades: Sequence[TradeRecord]) -> float:
    """Percentage (0-100) of closed trades with a positive PnL.

    The denominator is every closed trade, including ones whose PnL is
    missing.  Returns 0.0 when there are no closed trades.
    """
    closed = closed_trades(trades)
    if not closed:
        return 0.0
    wins = sum(1 for t in closed if t.pnl is not None and t.pnl > 0)
    return wins / len(closed) * 100.0


def average_profit(trades: Sequence[TradeRecord]) -> float:
    """Mean PnL of winning closed trades, 0.0 if there are none."""
    wins = [t.pnl for t in eligible_trades(trades) if t.pnl > 0]
    if not wins:
        return 0.0
    return sum(wins) / len(wins)


def average_loss(trades: Sequence[TradeRecord]) -> float:
    """Mean PnL of losing closed trades (negative), 0.0 if there are none."""
    losses = [t.pnl for t in eligible_trades(trades) if t.pnl < 0]
    if not losses:
        return 0.0
    return sum(losses) / len(losses)


def expectancy(trades: Sequence[TradeRecord]) -> float:
    """Mean PnL per eligible trade."""
    eligible = eligible_trades(trades)
    if not eligible:
        return 0.0
    return total_pnl(eligible) / len(eligible)


# ---------------------------------------------------------------------------
# Extremes
# ---------------------------------------------------------------------------

def best_trade(trades: Sequence[TradeRecord]) -> TradeRecord | None:
    """Eligible trade with the highest PnL; first one wins a tie."""
    best: TradeRecord | None = None
    for trade in eligible_trades(trades):
        if best is None or trade.pnl > best.pnl:
            best = trade
    return best


def worst_trade(trades: Sequence[TradeRecord]) -> TradeRecord | None:
    """Eligible trade with the lowest PnL; first one wins a tie."""
    worst: TradeRecord | None = None
    for trade in eligible_trades(trades):
        if worst is None or trade.pnl < worst.pnl:
            worst = trade
    return worst


# ---------------------------------------------------------------------------
# Costs
# ---------------------------------------------------------------------------

def total_fees(trades: Sequence[TradeRecord]) -> float:
    """Trading fees across all trades, open or closed."""
    return sum((t.trading_fees for t in trades if t.trading_fees is not None), 0.0)


def total_funding(trades: Sequence[TradeRecord]) -> float:
    """Funding charges across all trades, open or closed."""
    return sum(
        (t.funding_charges for t in trades if t.funding_charges is not None), 0.0
    )


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------

def _capped_ratio(numerator: float, denominator: float) -> float:
    # Sums and quotients of finite PnL can still overflow to inf.
    if denominator == 0 or not math.isfinite(numerator):
        return RATIO_CAP if numerator > 0 else 0.0
    ratio = numerator / denominator
    if not math.isfinite(ratio):
        return RATIO_CAP if ratio > 0 else 0.0
    return ratio


def gross_profit(trades: Sequence[TradeRecord]) -> float:
    return sum((t.pnl for t in eligible_trades(trades) if t.pnl > 0), 0.0)


def gross_loss(trades: Sequence[TradeRecord]) -> float:
    """Magnitude (positive) of all losing closed PnL."""
    return sum((abs(t.pnl) for t in eligible_trades(trades) if t.pnl < 0), 0.0)


def profit_factor(trades: Sequence[TradeRecord]) -> float:
    """Gross profit divided by gross loss magnitude."""
    return _capped_ratio(gross_profit(trades), gross_loss(trades))


def risk_reward_ratio(trades: Sequence[TradeRecord]) -> float:
    """Realised reward per unit of risk: ``|avg win / avg loss|``."""
    return abs(_capped_ratio(average_profit(trades), abs(average_loss(trades))))
