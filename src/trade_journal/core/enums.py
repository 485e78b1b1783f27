"""Enumerations used across the trade journal."""

from enum import Enum


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"  # Anything the store sends that is neither


class StreakType(str, Enum):
    WIN = "win"
    LOSS = "loss"


class DayColor(str, Enum):
    """Heatmap colour category of a calendar day."""

    PROFIT = "profit"
    LOSS = "loss"
    NEUTRAL = "neutral"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
