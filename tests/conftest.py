"""Shared fixtures for the trade-journal test suite."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from trade_journal.core.clock import FixedClock
from trade_journal.core.config import Settings


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock pinned to noon local time on 2024-03-15 (a Friday)."""
    return FixedClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def report_date() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def trade_docs() -> list[dict]:
    """Raw documents as the store delivers them (snake_case fields)."""
    return [
        {
            "id": "t1",
            "status": "CLOSED",
            "symbol": "ETHUSD",
            "strategy_name": "breakout",
            "pnl": 100.0,
            "trading_fees": 1.5,
            "funding_charges": 0.25,
            "entry_timestamp": "2024-03-11T09:00:00",
            "exit_timestamp": "2024-03-11T15:30:00",
        },
        {
            "id": "t2",
            "status": "CLOSED",
            "symbol": "BTCUSD",
            "strategy_name": "breakout",
            "pnl": -40.0,
            "trading_fees": 2.0,
            "entry_timestamp": "2024-03-12T10:00:00",
            "exit_timestamp": "2024-03-12T11:00:00",
        },
        {
            "id": "t3",
            "status": "CLOSED",
            "symbol": "ETHUSD",
            "pnl": 60.0,
            "trading_fees": 1.0,
            "entry_timestamp": "2024-03-13T08:00:00",
            "exit_timestamp": "2024-03-13T09:15:00",
        },
        {
            "id": "t4",
            "status": "OPEN",
            "symbol": "SOLUSD",
            "strategy_name": "mean_reversion",
            "trading_fees": 0.5,
            "funding_charges": 0.75,
            "entry_timestamp": "2024-03-14T12:00:00",
        },
    ]
