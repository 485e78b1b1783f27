"""Dashboard summary — every journal metric for one snapshot of trades.

:func:`build_summary` computes the whole dashboard from a list of
records in one call.  :class:`DashboardService` wires it to a trade
source: each snapshot the source pushes is turned into a fresh summary
and handed to the registered listeners.  Nothing is cached between
snapshots; every summary is recomputed from scratch.

Usage::

    service = DashboardService(InMemoryTradeStore(docs))
    unsubscribe = service.on_update(lambda s: print(s.total_pnl))
    ...
    service.close()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any

from trade_journal.core.clock import IClock, WallClock
from trade_journal.core.config import Settings
from trade_journal.core.enums import TradeStatus
from trade_journal.core.interfaces import ITradeSource, Unsubscribe

from . import metrics
from .equity_curve import CumulativePoint, cumulative_pnl, max_drawdown
from .heatmap import DEFAULT_DAYS_TO_SHOW, DailyBucket, daily_performance
from .record import UNKNOWN_STRATEGY, TradeRecord
from .session_analysis import TimeBasedPerformance, time_based_performance
from .streaks import StreakStats, StreakSummary, current_streak_summary, streaks
from .strategy_stats import StrategyStats, strategy_stats

logger = logging.getLogger(__name__)

SummaryListener = Callable[["DashboardSummary"], None]


@dataclass
class DashboardSummary:
    """All dashboard metrics for one snapshot."""

    as_of: date
    total_trades: int = 0
    open_trades: int = 0
    closed_trades: int = 0

    total_pnl: float = 0.0
    win_rate: float = 0.0
    average_profit: float = 0.0
    average_loss: float = 0.0
    expectancy: float = 0.0
    best_trade: TradeRecord | None = None
    worst_trade: TradeRecord | None = None
    total_fees: float = 0.0
    total_funding: float = 0.0
    profit_factor: float = 0.0
    risk_reward_ratio: float = 0.0
    max_drawdown: float = 0.0

    strategies: dict[str, StrategyStats] = field(default_factory=dict)
    equity_curve: list[CumulativePoint] = field(default_factory=list)
    streaks: StreakStats = field(default_factory=StreakStats)
    current_streak: StreakSummary | None = None
    daily: list[DailyBucket] = field(default_factory=list)
    time_based: TimeBasedPerformance = field(default_factory=TimeBasedPerformance)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe export; trades are referenced by id."""
        return {
            "as_of": self.as_of.isoformat(),
            "total_trades": self.total_trades,
            "open_trades": self.open_trades,
            "closed_trades": self.closed_trades,
            "total_pnl": self.total_pnl,
            "win_rate": self.win_rate,
            "average_profit": self.average_profit,
            "average_loss": self.average_loss,
            "expectancy": self.expectancy,
            "best_trade": self.best_trade.to_dict() if self.best_trade else None,
            "worst_trade": self.worst_trade.to_dict() if self.worst_trade else None,
            "total_fees": self.total_fees,
            "total_funding": self.total_funding,
            "profit_factor": self.profit_factor,
            "risk_reward_ratio": self.risk_reward_ratio,
            "max_drawdown": self.max_drawdown,
            "strategies": {k: v.to_dict() for k, v in self.strategies.items()},
            "equity_curve": [p.to_dict() for p in self.equity_curve],
            "streaks": self.streaks.to_dict(),
            "current_streak": self.current_streak.to_dict() if self.current_streak else None,
            "daily": [d.to_dict() for d in self.daily],
            "time_based": self.time_based.to_dict(),
        }


def build_summary(
    trades: Sequence[TradeRecord],
    *,
    today: date,
    days_to_show: int = DEFAULT_DAYS_TO_SHOW,
    tz: str | tzinfo | None = None,
    unknown_label: str = UNKNOWN_STRATEGY,
) -> DashboardSummary:
    """Compute every dashboard metric for ``trades``."""
    status_counts = metrics.count_by_status(trades)
    return DashboardSummary(
        as_of=today,
        total_trades=len(trades),
        open_trades=status_counts[TradeStatus.OPEN.value],
        closed_trades=status_counts[TradeStatus.CLOSED.value],
        total_pnl=metrics.total_pnl(trades),
        win_rate=metrics.win_rate(trades),
        average_profit=metrics.average_profit(trades),
        average_loss=metrics.average_loss(trades),
        expectancy=metrics.expectancy(trades),
        best_trade=metrics.best_trade(trades),
        worst_trade=metrics.worst_trade(trades),
        total_fees=metrics.total_fees(trades),
        total_funding=metrics.total_funding(trades),
        profit_factor=metrics.profit_factor(trades),
        risk_reward_ratio=metrics.risk_reward_ratio(trades),
        max_drawdown=max_drawdown(trades),
        strategies=strategy_stats(trades, unknown_label=unknown_label),
        equity_curve=cumulative_pnl(trades),
        streaks=streaks(trades),
        current_streak=current_streak_summary(trades),
        daily=daily_performance(trades, days_to_show, today=today, tz=tz),
        time_based=time_based_performance(trades, tz=tz),
    )


class DashboardService:
    """Keeps a dashboard summary in step with a trade source.

    Parameters
    ----------
    source : ITradeSource
        Where trades come from.  The service subscribes on construction.
    settings : Settings | None
        Heatmap window, timezone and strategy label.  Defaults apply
        when omitted.
    clock : IClock | None
        Supplies "today" for the heatmap window.  Defaults to WallClock.
    """

    def __init__(
        self,
        source: ITradeSource,
        *,
        settings: Settings | None = None,
        clock: IClock | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._clock = clock or WallClock()
        self._listeners: dict[int, SummaryListener] = {}
        self._next_token = 0
        self._trades: list[TradeRecord] = []
        self._updates = 0
        self._unsubscribe: Unsubscribe | None = source.subscribe(self._on_trades)

    # ------------------------------------------------------------------ #
    # Source callback                                                      #
    # ------------------------------------------------------------------ #

    def _on_trades(self, trades: list[TradeRecord]) -> None:
        self._trades = list(trades)
        self._updates += 1
        logger.debug("Trade snapshot #%d: %d trades", self._updates, len(trades))
        if not self._listeners:
            return
        summary = self.summary()
        for listener in list(self._listeners.values()):
            try:
                listener(summary)
            except Exception:
                logger.exception("Dashboard listener %r failed", listener)

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    @property
    def trades(self) -> list[TradeRecord]:
        """Latest snapshot received from the source."""
        return list(self._trades)

    @property
    def update_count(self) -> int:
        return self._updates

    def summary(self) -> DashboardSummary:
        """Summary of the latest snapshot, computed now."""
        cfg = self._settings.analytics
        return build_summary(
            self._trades,
            today=self._clock.today(),
            days_to_show=cfg.heatmap_days,
            tz=cfg.timezone,
            unknown_label=cfg.unknown_strategy_label,
        )

    def on_update(self, listener: SummaryListener) -> Unsubscribe:
        """Call ``listener`` with a new summary after every snapshot."""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener

        def remove() -> None:
            self._listeners.pop(token, None)

        return remove

    def close(self) -> None:
        """Stop listening to the source."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
