"""Trade record — the data model the analytics engine consumes.

A TradeRecord is one document from the ``trades`` collection, taken as
given.  The store owns the schema; this module only decides how loosely
typed document values become Python values:

* optional money fields become ``float`` or ``None``, never a silent 0,
  so a trade with a missing PnL still counts as a trade;
* every temporal representation the store (or a JSON export of it) can
  produce goes through :func:`normalize_timestamp` exactly once.

Records are frozen.  Nothing in the journal mutates them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, time, timezone, tzinfo
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from trade_journal.core.enums import TradeStatus

logger = logging.getLogger(__name__)

UNKNOWN_STRATEGY = "Unknown"
INVALID_DATE_KEY = "Invalid Date"


# ---------------------------------------------------------------------------
# Value normalization
# ---------------------------------------------------------------------------

def to_number(value: Any) -> float | None:
    """Return ``value`` as a float if it is a finite real number, else None.

    Booleans and numeric-looking strings are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return None
        return number if math.isfinite(number) else None
    return None


def _from_epoch_seconds(seconds: float, nanos: float = 0) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def normalize_timestamp(value: Any) -> datetime | None:
    """Coerce any supported temporal representation into a ``datetime``.

    Supported: ``datetime`` (returned as-is, naive or aware), ``date``
    (local midnight), objects with ``to_datetime()`` / ``ToDatetime()`` /
    ``toDate()``, ``{"seconds", "nanoseconds"}`` mappings (with or without
    a leading underscore), epoch milliseconds, and ISO-8601 strings.

    Returns None for anything else.  None is the invalid-date marker; the
    analytics sort it last and bucket it under ``"Invalid Date"``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    for method in ("to_datetime", "ToDatetime", "toDate"):
        converter = getattr(value, method, None)
        if callable(converter):
            try:
                converted = converter()
            except (TypeError, ValueError, OverflowError, OSError):
                return None
            return converted if isinstance(converted, datetime) else None

    if isinstance(value, Mapping):
        for sec_key, nano_key in (("seconds", "nanoseconds"), ("_seconds", "_nanoseconds")):
            seconds = to_number(value.get(sec_key))
            if seconds is not None:
                nanos = to_number(value.get(nano_key)) or 0.0
                return _from_epoch_seconds(seconds, nanos)
        return None

    number = to_number(value)
    if number is not None:
        return _from_epoch_seconds(number / 1000.0)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None

    return None


def local_time(ts: datetime, tz: str | tzinfo | None = None) -> datetime | None:
    """Express ``ts`` as local wall time for calendar bucketing.

    Naive datetimes are already local wall time and are returned as-is.
    Aware datetimes are converted to ``tz`` (zone name or tzinfo), or to
    the system local zone when ``tz`` is None.  Returns None when the
    converted time falls outside the representable date range.
    """
    if ts.tzinfo is None:
        return ts
    if isinstance(tz, str):
        from zoneinfo import ZoneInfo

        tz = ZoneInfo(tz)
    try:
        return ts.astimezone() if tz is None else ts.astimezone(tz)
    except (OverflowError, ValueError, OSError):
        return None


# ---------------------------------------------------------------------------
# TradeRecord
# ---------------------------------------------------------------------------

class TradeRecord(BaseModel):
    """One trade document as the analytics engine sees it.

    Attribute names follow the store's document field names.
    Unknown document keys are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    # Identity
    id: str = ""
    status: TradeStatus = TradeStatus.UNKNOWN
    symbol: str = ""
    strategy_name: str | None = None

    # Money
    pnl: float | None = None
    trading_fees: float | None = None
    funding_charges: float | None = None

    # Timing
    entry_timestamp: datetime | None = None
    exit_timestamp: datetime | None = None

    # Display-only context
    side: str | None = None
    mode: str | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    quantity: float | None = None

    # ------------------------------------------------------------------ #
    # Coercion                                                             #
    # ------------------------------------------------------------------ #

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> TradeStatus:
        if isinstance(v, TradeStatus):
            return v
        if isinstance(v, str):
            try:
                return TradeStatus(v.strip().upper())
            except ValueError:
                pass
        return TradeStatus.UNKNOWN

    @field_validator("symbol", mode="before")
    @classmethod
    def _coerce_symbol(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("strategy_name", "side", "mode", mode="before")
    @classmethod
    def _coerce_label(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator(
        "pnl", "trading_fees", "funding_charges",
        "entry_price", "exit_price", "quantity",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, v: Any) -> float | None:
        return to_number(v)

    @field_validator("entry_timestamp", "exit_timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, v: Any) -> datetime | None:
        return normalize_timestamp(v)

    @classmethod
    def from_document(
        cls, doc: Mapping[str, Any], doc_id: str | None = None
    ) -> TradeRecord:
        """Build a record from a raw store document.

        ``doc_id`` wins over an ``id`` field inside the document, the way
        a snapshot's document id does.
        """
        data = dict(doc)
        if doc_id is not None:
            data["id"] = doc_id
        return cls(**data)

    # ------------------------------------------------------------------ #
    # Derived properties                                                   #
    # ------------------------------------------------------------------ #

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @property
    def has_pnl(self) -> bool:
        return self.pnl is not None

    @property
    def is_eligible(self) -> bool:
        """Closed with a numeric PnL, usable by every PnL metric."""
        return self.is_closed and self.pnl is not None

    @property
    def strategy_label(self) -> str:
        return self.strategy_name or UNKNOWN_STRATEGY

    @property
    def exit_sort_key(self) -> float:
        """Epoch seconds of the exit; invalid or missing sorts last."""
        if self.exit_timestamp is None:
            return math.inf
        try:
            return self.exit_timestamp.timestamp()
        except (OverflowError, OSError, ValueError):
            return math.inf

    # ------------------------------------------------------------------ #
    # Serialisation                                                        #
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Export to a flat dictionary for logging / JSON output."""
        return {
            "id": self.id,
            "status": self.status.value,
            "symbol": self.symbol,
            "strategy_name": self.strategy_name,
            "pnl": self.pnl,
            "trading_fees": self.trading_fees,
            "funding_charges": self.funding_charges,
            "entry_timestamp": self.entry_timestamp.isoformat() if self.entry_timestamp else None,
            "exit_timestamp": self.exit_timestamp.isoformat() if self.exit_timestamp else None,
            "side": self.side,
            "mode": self.mode,
        }


def as_records(items: Any) -> list[TradeRecord]:
    """Turn an iterable of records and/or raw documents into records."""
    records: list[TradeRecord] = []
    for item in items:
        if isinstance(item, TradeRecord):
            records.append(item)
        else:
            records.append(TradeRecord.from_document(item))
    return records
