"""Display formatting for dashboard values.

Turns the analytics' numeric results and raw trade fields into short
strings plus a CSS-style class name.  Nothing here does arithmetic on
trades; bad input renders as a neutral placeholder instead of raising.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, NamedTuple

from trade_journal.journal.record import normalize_timestamp, to_number

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%b %d, %Y %H:%M"
SHORT_DATE_FORMAT = "%b %d, %Y"
TIME_FORMAT = "%H:%M:%S"


class Styled(NamedTuple):
    text: str
    class_name: str


def format_currency(value: Any, currency: str = "$") -> str:
    """``-$12.50`` style; non-numbers render as ``$0.00``."""
    number = to_number(value)
    if number is None:
        return f"{currency}0.00"
    sign = "-" if number < 0 else ""
    return f"{sign}{currency}{abs(number):.2f}"


def format_pnl(value: Any, currency: str = "$") -> Styled:
    number = to_number(value) or 0.0
    if number > 0:
        class_name = "profit"
    elif number < 0:
        class_name = "loss"
    else:
        class_name = "neutral"
    return Styled(format_currency(value, currency), class_name)


def format_percentage(value: Any, decimals: int = 2) -> str:
    number = to_number(value)
    if number is None:
        return f"{0:.{decimals}f}%"
    return f"{number:.{decimals}f}%"


def format_date(timestamp: Any, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Render any supported timestamp; ``N/A`` if absent."""
    if timestamp is None or timestamp == "":
        return "N/A"
    ts = normalize_timestamp(timestamp)
    if ts is None:
        return "Invalid Date"
    try:
        if ts.tzinfo is not None:
            ts = ts.astimezone()
        return ts.strftime(fmt)
    except (ValueError, OverflowError, OSError):
        logger.warning("Cannot format %r with %r", timestamp, fmt)
        return "Invalid Date"


def format_short_date(timestamp: Any) -> str:
    return format_date(timestamp, SHORT_DATE_FORMAT)


def format_time(timestamp: Any) -> str:
    return format_date(timestamp, TIME_FORMAT)


def format_trade_status(status: Any) -> Styled:
    text = str(getattr(status, "value", status) or "UNKNOWN").upper()
    return Styled(text, "status-open" if text == "OPEN" else "status-closed")


def format_trade_side(side: Any) -> Styled:
    text = str(side or "").upper()
    return Styled(text, "side-buy" if text == "BUY" else "side-sell")


def format_mode(mode: Any) -> Styled:
    text = str(mode or "UNKNOWN").upper()
    return Styled(text, "mode-paper" if text == "PAPER" else "mode-live")


def format_large_number(value: Any) -> str:
    """Compact ``1.50K`` / ``2.00M`` notation."""
    number = to_number(value)
    if number is None:
        return "0"
    sign = "-" if number < 0 else ""
    magnitude = abs(number)
    if magnitude >= 1_000_000:
        return f"{sign}{magnitude / 1_000_000:.2f}M"
    if magnitude >= 1_000:
        return f"{sign}{magnitude / 1_000:.2f}K"
    return f"{sign}{magnitude:.2f}"


def format_days_held(
    entry_timestamp: Any,
    exit_timestamp: Any = None,
    *,
    now: datetime | None = None,
) -> str:
    """Holding time as ``3d 4h`` or ``5h``; open trades run to ``now``."""
    if not entry_timestamp:
        return "N/A"
    entry = normalize_timestamp(entry_timestamp)
    if entry is None:
        return "Invalid Date"
    if exit_timestamp:
        end = normalize_timestamp(exit_timestamp)
        if end is None:
            return "Invalid Date"
    else:
        end = now or datetime.now(timezone.utc)

    # Mixed naive/aware pairs are compared through epoch seconds.
    held_seconds = end.timestamp() - entry.timestamp()
    days, remainder = divmod(int(held_seconds), 86_400)
    hours = remainder // 3_600
    if days > 0:
        return f"{days}d {hours}h"
    return f"{hours}h"
