"""Query filter and ordering shared by trade sources."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, field_validator

from trade_journal.core.enums import TradeStatus
from trade_journal.journal.record import TradeRecord, normalize_timestamp


class TradeFilter(BaseModel):
    """Equality filters plus an inclusive entry-time range.

    Unset fields match everything.
    """

    status: TradeStatus | None = None
    symbol: str | None = None
    strategy_name: str | None = None
    entry_from: datetime | None = None
    entry_to: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("entry_from", "entry_to", mode="before")
    @classmethod
    def _coerce_bound(cls, v: object) -> datetime | None:
        return normalize_timestamp(v)

    def matches(self, record: TradeRecord) -> bool:
        if self.status is not None and record.status != self.status:
            return False
        if self.symbol is not None and record.symbol != self.symbol:
            return False
        if self.strategy_name is not None and record.strategy_name != self.strategy_name:
            return False
        if self.entry_from is None and self.entry_to is None:
            return True

        if record.entry_timestamp is None:
            return False
        entry = _epoch(record.entry_timestamp)
        if self.entry_from is not None and entry < _epoch(self.entry_from):
            return False
        if self.entry_to is not None and entry > _epoch(self.entry_to):
            return False
        return True


def _epoch(ts: datetime) -> float:
    # Naive and aware values compare through their epoch seconds.
    try:
        return ts.timestamp()
    except (OverflowError, OSError, ValueError):
        return math.inf


def entry_desc_key(record: TradeRecord) -> tuple[int, float]:
    """Sort key for newest-entry-first ordering; undated entries last."""
    if record.entry_timestamp is None:
        return (1, 0.0)
    return (0, -_epoch(record.entry_timestamp))


def apply_filter(
    records: list[TradeRecord], trade_filter: TradeFilter | None
) -> list[TradeRecord]:
    """Filter then order newest entry first."""
    if trade_filter is not None:
        records = [r for r in records if trade_filter.matches(r)]
    return sorted(records, key=entry_desc_key)
