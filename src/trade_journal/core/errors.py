"""Custom exception hierarchy for the trade journal."""


class JournalError(Exception):
    """Base exception for all trade journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(JournalError):
    """Trade data could not be obtained or interpreted."""


class TradeSourceError(DataError):
    """A trade source (file, store) could not be read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Trade source [{source}]: {reason}")


class RecordError(DataError):
    """A document cannot be turned into a trade record at all."""
