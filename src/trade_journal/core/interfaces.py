"""Protocol interfaces for the trade journal.

The analytics engine never queries a database itself.  Anything that can
hand it a finite list of trade records (a live document store, an
in-memory store, a file export) implements :class:`ITradeSource`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from trade_journal.journal.record import TradeRecord
    from trade_journal.store.base import TradeFilter


TradesCallback = Callable[["list[TradeRecord]"], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class ITradeSource(Protocol):
    """Fetch/subscribe access to trade records.

    Filtering and ordering done by a source is an optimisation only;
    the analytics re-filter by status wherever it matters.
    """

    def fetch(self, trade_filter: TradeFilter | None = None) -> list[TradeRecord]: ...

    def subscribe(
        self,
        callback: TradesCallback,
        trade_filter: TradeFilter | None = None,
    ) -> Unsubscribe: ...
