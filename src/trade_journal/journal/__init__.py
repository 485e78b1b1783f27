"""Trade journal analytics engine.

Pure functions over a sequence of :class:`TradeRecord`.  None of them
mutate their input or keep state between calls.

Key components
--------------
**Aggregates & ratios** (``metrics``)

total_pnl, win_rate, average_profit, average_loss, best_trade,
worst_trade, total_fees, total_funding, profit_factor, risk_reward_ratio

**Breakdowns**

strategy_stats          Per-strategy counts and PnL
daily_performance       Calendar heatmap over a trailing window
time_based_performance  Weekday / hour-of-day buckets

**Sequential**

cumulative_pnl, max_drawdown, streaks, current_streak_summary

**Dashboard**

build_summary / DashboardService   Everything above for one snapshot
"""

from .record import TradeRecord, normalize_timestamp
from .metrics import (
    RATIO_CAP,
    average_loss,
    average_profit,
    best_trade,
    expectancy,
    profit_factor,
    risk_reward_ratio,
    total_fees,
    total_funding,
    total_pnl,
    win_rate,
    worst_trade,
)
from .strategy_stats import StrategyStats, strategy_stats
from .equity_curve import CumulativePoint, cumulative_pnl, drawdown_series, max_drawdown
from .streaks import StreakStats, StreakSummary, current_streak_summary, streaks
from .heatmap import DailyBucket, daily_performance
from .session_analysis import TimeBasedPerformance, time_based_performance
from .dashboard import DashboardService, DashboardSummary, build_summary

__all__ = [
    "TradeRecord",
    "normalize_timestamp",
    "RATIO_CAP",
    "total_pnl",
    "win_rate",
    "average_profit",
    "average_loss",
    "expectancy",
    "best_trade",
    "worst_trade",
    "total_fees",
    "total_funding",
    "profit_factor",
    "risk_reward_ratio",
    "StrategyStats",
    "strategy_stats",
    "CumulativePoint",
    "cumulative_pnl",
    "drawdown_series",
    "max_drawdown",
    "StreakStats",
    "StreakSummary",
    "streaks",
    "current_streak_summary",
    "DailyBucket",
    "daily_performance",
    "TimeBasedPerformance",
    "time_based_performance",
    "DashboardService",
    "DashboardSummary",
    "build_summary",
]
