"""In-memory trade store for tests, the CLI and local dashboards.

No external dependencies.  Mirrors the query surface of the hosted
``trades`` collection: filtered snapshots ordered newest entry first,
and subscriptions that receive the full filtered snapshot on every
change.  Subscribers are called synchronously in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from trade_journal.core.enums import TradeStatus
from trade_journal.core.errors import RecordError
from trade_journal.core.interfaces import TradesCallback, Unsubscribe
from trade_journal.journal.record import TradeRecord

from .base import TradeFilter, apply_filter

logger = logging.getLogger(__name__)


class InMemoryTradeStore:
    """Dict-backed trade collection with change notifications."""

    def __init__(self, documents: Iterable[Mapping[str, Any] | TradeRecord] = ()) -> None:
        self._records: dict[str, TradeRecord] = {}
        self._subscribers: dict[int, tuple[TradesCallback, TradeFilter | None]] = {}
        self._next_token = 0
        for doc in documents:
            self._put(doc, None)

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    def _put(self, doc: Mapping[str, Any] | TradeRecord, doc_id: str | None) -> TradeRecord:
        if isinstance(doc, TradeRecord):
            record = doc if doc_id is None else doc.model_copy(update={"id": doc_id})
        else:
            record = TradeRecord.from_document(doc, doc_id)
        if not record.id:
            raise RecordError("Trade document has no id")
        self._records[record.id] = record
        return record

    def upsert(
        self, doc: Mapping[str, Any] | TradeRecord, doc_id: str | None = None
    ) -> TradeRecord:
        """Insert or replace one trade and notify subscribers."""
        record = self._put(doc, doc_id)
        self._notify()
        return record

    def upsert_many(self, docs: Iterable[Mapping[str, Any] | TradeRecord]) -> int:
        """Insert or replace several trades with a single notification."""
        count = 0
        for doc in docs:
            self._put(doc, None)
            count += 1
        if count:
            self._notify()
        return count

    def replace_all(self, docs: Iterable[Mapping[str, Any] | TradeRecord]) -> int:
        """Swap the whole collection for ``docs`` with a single notification."""
        previous = self._records
        self._records = {}
        try:
            for doc in docs:
                self._put(doc, None)
        except Exception:
            self._records = previous
            raise
        self._notify()
        return len(self._records)

    def delete(self, doc_id: str) -> bool:
        if self._records.pop(doc_id, None) is None:
            return False
        self._notify()
        return True

    def clear(self) -> None:
        self._records.clear()
        self._notify()

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def get(self, doc_id: str) -> TradeRecord | None:
        return self._records.get(doc_id)

    def fetch(self, trade_filter: TradeFilter | None = None) -> list[TradeRecord]:
        return apply_filter(list(self._records.values()), trade_filter)

    def fetch_closed(self) -> list[TradeRecord]:
        """All closed trades, for statistics."""
        return self.fetch(TradeFilter(status=TradeStatus.CLOSED))

    def fetch_by_entry_range(self, start: datetime, end: datetime) -> list[TradeRecord]:
        """Trades entered within ``[start, end]``."""
        return self.fetch(TradeFilter(entry_from=start, entry_to=end))

    # ------------------------------------------------------------------ #
    # Subscriptions                                                        #
    # ------------------------------------------------------------------ #

    def subscribe(
        self,
        callback: TradesCallback,
        trade_filter: TradeFilter | None = None,
    ) -> Unsubscribe:
        """Deliver the current snapshot now and again after every change."""
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = (callback, trade_filter)
        self._deliver(callback, trade_filter)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def subscribe_by_status(self, status: TradeStatus | str, callback: TradesCallback) -> Unsubscribe:
        return self.subscribe(callback, TradeFilter(status=status))

    def subscribe_by_symbol(self, symbol: str, callback: TradesCallback) -> Unsubscribe:
        return self.subscribe(callback, TradeFilter(symbol=symbol))

    def subscribe_by_strategy(self, strategy_name: str, callback: TradesCallback) -> Unsubscribe:
        return self.subscribe(callback, TradeFilter(strategy_name=strategy_name))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _deliver(self, callback: TradesCallback, trade_filter: TradeFilter | None) -> None:
        try:
            callback(self.fetch(trade_filter))
        except Exception:
            logger.exception("Trade subscriber %r failed", callback)

    def _notify(self) -> None:
        for callback, trade_filter in list(self._subscribers.values()):
            self._deliver(callback, trade_filter)
