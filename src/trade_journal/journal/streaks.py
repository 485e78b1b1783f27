"""Win / loss streaks in exit-time order.

A trade is a win only when its PnL is strictly positive.  Break-even
trades (PnL exactly 0) extend a losing streak, matching how the journal
has always scored them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from trade_journal.core.enums import StreakType

from .metrics import chronological_trades
from .record import TradeRecord


@dataclass(frozen=True)
class StreakStats:
    current_streak: int = 0
    current_streak_type: StreakType | None = None
    longest_win_streak: int = 0
    longest_loss_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "current_streak_type": (
                self.current_streak_type.value if self.current_streak_type else None
            ),
            "longest_win_streak": self.longest_win_streak,
            "longest_loss_streak": self.longest_loss_streak,
        }


@dataclass(frozen=True)
class StreakSummary:
    """Human-readable view of the streak in progress."""

    count: int
    type: StreakType | None
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "type": self.type.value if self.type else None,
            "label": self.label,
        }


def streaks(trades: Sequence[TradeRecord]) -> StreakStats:
    """Current and longest win/loss streaks over eligible trades."""
    ordered = chronological_trades(trades)
    if not ordered:
        return StreakStats()

    win_run = 0
    loss_run = 0
    longest_win = 0
    longest_loss = 0
    for trade in ordered:
        if trade.pnl > 0:
            win_run += 1
            loss_run = 0
            longest_win = max(longest_win, win_run)
        else:
            loss_run += 1
            win_run = 0
            longest_loss = max(longest_loss, loss_run)

    # Exactly one of the runs is non-zero after the last trade.
    if win_run:
        current, current_type = win_run, StreakType.WIN
    else:
        current, current_type = loss_run, StreakType.LOSS

    return StreakStats(
        current_streak=current,
        current_streak_type=current_type,
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
    )


def current_streak_summary(trades: Sequence[TradeRecord]) -> StreakSummary:
    stats = streaks(trades)
    if stats.current_streak_type == StreakType.WIN:
        label = f"{stats.current_streak} consecutive wins!"
    elif stats.current_streak_type == StreakType.LOSS:
        label = f"{stats.current_streak} consecutive losses"
    else:
        label = "No trades yet"
    return StreakSummary(stats.current_streak, stats.current_streak_type, label)
