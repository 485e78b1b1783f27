"""Shared fixtures and factories for journal tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import pytest

from trade_journal.core.enums import TradeStatus
from trade_journal.journal.record import TradeRecord

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)  # Monday

_counter = 0


def make_trade(
    pnl: Any = 10.0,
    *,
    status: TradeStatus | str = TradeStatus.CLOSED,
    exit_time: Any = None,
    entry_time: Any = None,
    strategy_name: str | None = "trend",
    symbol: str = "ETHUSD",
    trade_id: str | None = None,
    **extra: Any,
) -> TradeRecord:
    """Create a trade record with sensible defaults.

    Closed trades without an explicit exit time exit at BASE_TIME.
    """
    global _counter
    _counter += 1
    if exit_time is None and str(getattr(status, "value", status)).upper() == "CLOSED":
        exit_time = BASE_TIME
    return TradeRecord(
        id=trade_id or f"trade_{_counter}",
        status=status,
        symbol=symbol,
        strategy_name=strategy_name,
        pnl=pnl,
        entry_timestamp=entry_time,
        exit_timestamp=exit_time,
        **extra,
    )


def make_sequence(pnls: list[float], *, start: datetime = BASE_TIME) -> list[TradeRecord]:
    """Closed trades exiting one day apart, in the given order."""
    return [
        make_trade(pnl, exit_time=start + timedelta(days=i), trade_id=f"seq_{i}")
        for i, pnl in enumerate(pnls)
    ]


@pytest.fixture
def three_trades() -> list[TradeRecord]:
    """+100, -40, +60 on three consecutive days."""
    return make_sequence([100.0, -40.0, 60.0])


@pytest.fixture
def mixed_trades() -> list[TradeRecord]:
    """Closed wins/losses plus an open trade and a closed trade without PnL."""
    return [
        make_trade(50.0, trade_id="w1", trading_fees=1.0),
        make_trade(-20.0, trade_id="l1", trading_fees=2.0, funding_charges=0.5),
        make_trade(None, trade_id="nopnl", trading_fees=0.5),
        make_trade(
            999.0,
            status=TradeStatus.OPEN,
            trade_id="open1",
            trading_fees=3.0,
            funding_charges=1.5,
        ),
        make_trade(30.0, trade_id="w2"),
    ]
