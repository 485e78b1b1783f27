"""Property tests: journal analytics invariants.

Uses hypothesis to generate arbitrary journals (open and closed trades,
missing PnL, missing strategy names, shared exit times) and checks that
the aggregate views stay consistent with each other.
"""

import math
from datetime import date, datetime, timedelta

import pytest
from hypothesis import given, settings, strategies as st

from trade_journal.journal import (
    RATIO_CAP,
    TradeRecord,
    best_trade,
    cumulative_pnl,
    daily_performance,
    max_drawdown,
    profit_factor,
    risk_reward_ratio,
    strategy_stats,
    streaks,
    time_based_performance,
    total_pnl,
    win_rate,
    worst_trade,
)

BASE = datetime(2024, 1, 1)
MINUTES_IN_WINDOW = 30 * 24 * 60

pnls = st.one_of(
    st.none(),
    st.floats(min_value=-10_000, max_value=10_000, allow_nan=False, allow_infinity=False),
)

trade_specs = st.tuples(
    st.sampled_from(["CLOSED", "CLOSED", "OPEN"]),
    pnls,
    st.sampled_from([None, "breakout", "scalp"]),
    st.integers(min_value=0, max_value=MINUTES_IN_WINDOW - 1),
)

# Any finite float: sums and quotients may overflow even when inputs do not.
wide_trade_specs = st.tuples(
    st.sampled_from(["CLOSED", "CLOSED", "OPEN"]),
    st.one_of(st.none(), st.floats(allow_nan=False, allow_infinity=False)),
    st.sampled_from([None, "breakout", "scalp"]),
    st.integers(min_value=0, max_value=MINUTES_IN_WINDOW - 1),
)


def _build(specs):
    return [
        TradeRecord(
            id=f"p{i}",
            status=status,
            pnl=pnl,
            strategy_name=strategy,
            exit_timestamp=BASE + timedelta(minutes=offset) if status == "CLOSED" else None,
        )
        for i, (status, pnl, strategy, offset) in enumerate(specs)
    ]


def _close(a, b):
    return a == pytest.approx(b, rel=1e-9, abs=1e-6)


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_equity_curve_ends_at_total_pnl(specs):
    trades = _build(specs)
    curve = cumulative_pnl(trades)
    eligible = [t for t in trades if t.is_eligible]
    assert len(curve) == len(eligible)
    if curve:
        assert _close(curve[-1].cumulative_pnl, total_pnl(trades))
    else:
        assert total_pnl(trades) == 0.0


@given(specs=st.lists(st.one_of(trade_specs, wide_trade_specs), max_size=40))
@settings(max_examples=150)
def test_rates_and_ratios_bounded(specs):
    trades = _build(specs)
    assert 0.0 <= win_rate(trades) <= 100.0
    assert max_drawdown(trades) >= 0.0
    for ratio in (profit_factor(trades), risk_reward_ratio(trades)):
        assert math.isfinite(ratio)
        assert ratio >= 0.0
    if not any(t.is_eligible and t.pnl < 0 for t in trades):
        assert profit_factor(trades) in (0.0, RATIO_CAP)


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_best_not_below_worst(specs):
    trades = _build(specs)
    best, worst = best_trade(trades), worst_trade(trades)
    assert (best is None) == (worst is None)
    if best is not None:
        assert best.pnl >= worst.pnl


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_strategy_groups_partition_closed_trades(specs):
    trades = _build(specs)
    groups = strategy_stats(trades)
    closed = [t for t in trades if t.is_closed]
    assert sum(g.total_trades for g in groups.values()) == len(closed)
    assert _close(sum(g.total_pnl for g in groups.values()), total_pnl(trades))
    for g in groups.values():
        assert g.winning_trades + g.losing_trades <= g.total_trades
        assert 0.0 <= g.win_rate <= 100.0


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_streaks_bounded_by_eligible_trades(specs):
    trades = _build(specs)
    stats = streaks(trades)
    eligible = sum(1 for t in trades if t.is_eligible)
    assert stats.longest_win_streak + stats.longest_loss_streak <= eligible
    if eligible:
        assert stats.current_streak >= 1
        longest = (
            stats.longest_win_streak
            if stats.current_streak_type.value == "win"
            else stats.longest_loss_streak
        )
        assert stats.current_streak <= longest
    else:
        assert stats.current_streak == 0
        assert stats.current_streak_type is None


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_daily_window_accounts_for_every_closed_trade(specs):
    trades = _build(specs)
    days = daily_performance(trades, 31, today=date(2024, 1, 31))
    closed = [t for t in trades if t.is_closed]
    assert len(days) == 31
    assert sum(d.trade_count for d in days) == len(closed)
    assert _close(sum(d.pnl for d in days), total_pnl(trades))
    for d in days:
        assert 0 <= d.intensity <= 4
        assert (d.intensity == 0) == (d.trade_count == 0)


@given(specs=st.lists(trade_specs, max_size=40))
@settings(max_examples=150)
def test_weekday_and_hour_totals_agree(specs):
    trades = _build(specs)
    perf = time_based_performance(trades)
    closed = sum(1 for t in trades if t.is_closed)
    assert sum(d.total for d in perf.by_day) == closed
    assert sum(h.total for h in perf.by_hour) == closed
    assert _close(
        sum(d.pnl for d in perf.by_day), sum(h.pnl for h in perf.by_hour)
    )


@given(specs=st.lists(trade_specs, max_size=30, unique_by=lambda s: s[3]))
@settings(max_examples=100)
def test_input_order_does_not_matter(specs):
    trades = _build(specs)
    shuffled = list(reversed(trades))
    assert _close(max_drawdown(trades), max_drawdown(shuffled))
    assert streaks(trades) == streaks(shuffled)
    assert _close(total_pnl(trades), total_pnl(shuffled))
