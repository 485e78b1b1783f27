"""Tests for the aggregate PnL metrics."""

import pytest

from trade_journal.core.enums import TradeStatus
from trade_journal.journal.metrics import (
    RATIO_CAP,
    average_loss,
    average_profit,
    best_trade,
    chronological_trades,
    closed_trades,
    count_by_status,
    eligible_trades,
    expectancy,
    gross_loss,
    gross_profit,
    profit_factor,
    risk_reward_ratio,
    total_fees,
    total_funding,
    total_pnl,
    win_rate,
    worst_trade,
)

from .conftest import BASE_TIME, make_sequence, make_trade


class TestFilters:
    def test_closed_and_eligible(self, mixed_trades):
        assert [t.id for t in closed_trades(mixed_trades)] == ["w1", "l1", "nopnl", "w2"]
        assert [t.id for t in eligible_trades(mixed_trades)] == ["w1", "l1", "w2"]

    def test_chronological_order(self):
        from datetime import timedelta

        late = make_trade(1.0, trade_id="late", exit_time=BASE_TIME + timedelta(days=2))
        early = make_trade(2.0, trade_id="early", exit_time=BASE_TIME)
        assert [t.id for t in chronological_trades([late, early])] == ["early", "late"]

    def test_chronological_stable_for_ties(self):
        a = make_trade(1.0, trade_id="a")
        b = make_trade(2.0, trade_id="b")
        assert [t.id for t in chronological_trades([a, b])] == ["a", "b"]

    def test_invalid_exit_sorts_last(self):
        bad = make_trade(1.0, trade_id="bad", exit_time="not-a-date")
        good = make_trade(2.0, trade_id="good")
        assert [t.id for t in chronological_trades([bad, good])] == ["good", "bad"]

    def test_count_by_status(self, mixed_trades):
        counts = count_by_status(mixed_trades + [make_trade(status="weird")])
        assert counts == {"OPEN": 1, "CLOSED": 4, "UNKNOWN": 1}


class TestTotalPnL:
    def test_three_trades(self, three_trades):
        assert total_pnl(three_trades) == pytest.approx(120.0)

    def test_ignores_open_and_missing(self, mixed_trades):
        assert total_pnl(mixed_trades) == pytest.approx(60.0)

    def test_empty(self):
        assert total_pnl([]) == 0.0


class TestWinRate:
    def test_three_trades(self, three_trades):
        assert win_rate(three_trades) == pytest.approx(66.6667, abs=1e-3)

    def test_missing_pnl_in_denominator(self, mixed_trades):
        # 2 winners out of 4 closed trades
        assert win_rate(mixed_trades) == pytest.approx(50.0)

    def test_break_even_is_not_a_win(self):
        assert win_rate(make_sequence([0.0, 10.0])) == pytest.approx(50.0)

    def test_no_closed_trades(self):
        assert win_rate([make_trade(5.0, status=TradeStatus.OPEN)]) == 0.0


class TestAverages:
    def test_average_profit_and_loss(self, three_trades):
        assert average_profit(three_trades) == pytest.approx(80.0)
        assert average_loss(three_trades) == pytest.approx(-40.0)

    def test_zero_when_none(self):
        wins = make_sequence([10.0, 20.0])
        assert average_loss(wins) == 0.0
        assert average_profit(make_sequence([-5.0])) == 0.0

    def test_expectancy(self, mixed_trades):
        assert expectancy(mixed_trades) == pytest.approx(20.0)
        assert expectancy([]) == 0.0


class TestExtremes:
    def test_best_and_worst(self, three_trades):
        assert best_trade(three_trades).pnl == 100.0
        assert worst_trade(three_trades).pnl == -40.0

    def test_first_wins_tie(self):
        first, second = make_sequence([50.0, 50.0])
        assert best_trade([first, second]) is first
        assert worst_trade([first, second]) is first

    def test_open_trade_excluded(self, mixed_trades):
        assert best_trade(mixed_trades).id == "w1"

    def test_none_without_eligible(self):
        assert best_trade([]) is None
        assert worst_trade([make_trade(None)]) is None


class TestCosts:
    def test_fees_across_all_statuses(self, mixed_trades):
        assert total_fees(mixed_trades) == pytest.approx(6.5)

    def test_funding_across_all_statuses(self, mixed_trades):
        assert total_funding(mixed_trades) == pytest.approx(2.0)

    def test_non_numeric_fees_skipped(self):
        trade = make_trade(1.0, trading_fees="1.5", funding_charges=float("nan"))
        assert total_fees([trade]) == 0.0
        assert total_funding([trade]) == 0.0


class TestRatios:
    def test_gross_totals(self, three_trades):
        assert gross_profit(three_trades) == pytest.approx(160.0)
        assert gross_loss(three_trades) == pytest.approx(40.0)

    def test_profit_factor(self, three_trades):
        assert profit_factor(three_trades) == pytest.approx(4.0)

    def test_profit_factor_no_losses_capped(self):
        assert profit_factor(make_sequence([10.0, 5.0])) == RATIO_CAP

    def test_profit_factor_nothing(self):
        assert profit_factor([]) == 0.0
        assert profit_factor(make_sequence([-10.0])) == 0.0

    def test_risk_reward(self, three_trades):
        assert risk_reward_ratio(three_trades) == pytest.approx(2.0)

    def test_risk_reward_no_losses_capped(self):
        assert risk_reward_ratio(make_sequence([10.0])) == RATIO_CAP

    def test_risk_reward_no_wins(self):
        assert risk_reward_ratio(make_sequence([-10.0])) == 0.0

    def test_overflowing_profit_capped(self):
        trades = make_sequence([1e308, 1e308, -1e-300])
        assert profit_factor(trades) == RATIO_CAP
        assert risk_reward_ratio(trades) == RATIO_CAP

    def test_overflowing_quotient_capped(self):
        trades = make_sequence([1e308, -1e-308])
        assert profit_factor(trades) == RATIO_CAP
        assert risk_reward_ratio(trades) == RATIO_CAP

    def test_overflowing_loss_gives_zero(self):
        trades = make_sequence([1.0, -1e308, -1e308])
        assert profit_factor(trades) == 0.0
        assert risk_reward_ratio(trades) == 0.0
