"""Per-strategy performance breakdown.

Groups closed trades by their strategy label and accumulates counts and
PnL per group.  Trades without a strategy name are grouped under
``"Unknown"``.  The returned dict preserves the order in which each
strategy first appears in the input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .record import UNKNOWN_STRATEGY, TradeRecord

logger = logging.getLogger(__name__)


@dataclass
class StrategyStats:
    """Accumulated results for one strategy."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    total_pnl: float = 0.0
    win_rate: float = 0.0
    average_pnl: float = 0.0

    def record(self, trade: TradeRecord) -> None:
        # A closed trade always counts; PnL only when it is numeric.
        # Break-even trades are neither wins nor losses.
        self.total_trades += 1
        if trade.pnl is None:
            return
        self.total_pnl += trade.pnl
        if trade.pnl > 0:
            self.winning_trades += 1
        elif trade.pnl < 0:
            self.losing_trades += 1

    def finalize(self) -> None:
        if self.total_trades == 0:
            self.win_rate = 0.0
            self.average_pnl = 0.0
            return
        self.win_rate = self.winning_trades / self.total_trades * 100.0
        self.average_pnl = self.total_pnl / self.total_trades

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_trades": self.total_trades,
            "winning_trades": self.winning_trades,
            "losing_trades": self.losing_trades,
            "total_pnl": self.total_pnl,
            "win_rate": self.win_rate,
            "average_pnl": self.average_pnl,
        }


def strategy_stats(
    trades: Sequence[TradeRecord],
    *,
    unknown_label: str = UNKNOWN_STRATEGY,
) -> dict[str, StrategyStats]:
    """Group closed trades by strategy and compute per-group stats."""
    groups: dict[str, StrategyStats] = {}
    for trade in trades:
        if not trade.is_closed:
            continue
        label = trade.strategy_name or unknown_label
        stats = groups.get(label)
        if stats is None:
            stats = groups[label] = StrategyStats()
        stats.record(trade)

    for stats in groups.values():
        stats.finalize()

    logger.debug("Strategy breakdown: %d groups", len(groups))
    return groups


def best_strategy(stats: dict[str, StrategyStats]) -> str | None:
    """Label with the highest total PnL; the first one wins a tie."""
    best: str | None = None
    for label, group in stats.items():
        if best is None or group.total_pnl > stats[best].total_pnl:
            best = label
    return best
