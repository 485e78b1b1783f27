"""Trade sources: where the analytics get their records from."""

from .base import TradeFilter
from .file_source import FileTradeSource
from .memory import InMemoryTradeStore

__all__ = ["TradeFilter", "FileTradeSource", "InMemoryTradeStore"]
