"""Trade source backed by an exported file.

Reads a snapshot of the ``trades`` collection from disk.  Supported
layouts, picked by file extension:

``.json``   a list of documents, an object mapping document id to
            document, or an object with a ``"trades"`` list
``.jsonl``  one document per line
``.csv``    one document per row, header row required; numeric
            timestamp cells are epoch milliseconds

Documents without an id get ``"<file stem>-<index>"``.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import Any

from trade_journal.core.errors import TradeSourceError
from trade_journal.core.interfaces import TradesCallback, Unsubscribe
from trade_journal.journal.record import TradeRecord

from .base import TradeFilter
from .memory import InMemoryTradeStore

logger = logging.getLogger(__name__)

# CSV cells arrive as text; these columns are parsed as numbers.
_NUMERIC_COLUMNS = {
    "pnl",
    "trading_fees",
    "funding_charges",
    "entry_price",
    "exit_price",
    "quantity",
}

# Timestamp columns hold ISO strings or epoch milliseconds.
_TIMESTAMP_COLUMNS = {"entry_timestamp", "exit_timestamp"}
_EPOCH_MS = re.compile(r"-?\d+(\.\d+)?")


def _csv_cell(column: str, value: str | None) -> Any:
    if value is None:
        return None
    value = value.strip()
    if value == "":
        return None
    if column in _NUMERIC_COLUMNS:
        try:
            return float(value)
        except ValueError:
            return value
    if column in _TIMESTAMP_COLUMNS and _EPOCH_MS.fullmatch(value):
        return float(value) if "." in value else int(value)
    return value


class FileTradeSource:
    """Read-only :class:`ITradeSource` over an exported trades file.

    The file is read on first access and again on :meth:`reload`, which
    also notifies subscribers.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._store = InMemoryTradeStore()
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------ #
    # ITradeSource                                                         #
    # ------------------------------------------------------------------ #

    def fetch(self, trade_filter: TradeFilter | None = None) -> list[TradeRecord]:
        self._ensure_loaded()
        return self._store.fetch(trade_filter)

    def subscribe(
        self,
        callback: TradesCallback,
        trade_filter: TradeFilter | None = None,
    ) -> Unsubscribe:
        self._ensure_loaded()
        return self._store.subscribe(callback, trade_filter)

    def reload(self) -> int:
        """Re-read the file; returns the number of trades loaded."""
        documents = self._read()
        count = self._store.replace_all(documents)
        self._loaded = True
        logger.info("Loaded %d trades from %s", count, self._path)
        return count

    # ------------------------------------------------------------------ #
    # Parsing                                                              #
    # ------------------------------------------------------------------ #

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.reload()

    def _read(self) -> list[TradeRecord]:
        if not self._path.is_file():
            raise TradeSourceError(str(self._path), "file not found")
        suffix = self._path.suffix.lower()
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TradeSourceError(str(self._path), str(exc)) from exc

        if suffix == ".csv":
            raw = self._parse_csv(text)
        elif suffix in (".jsonl", ".ndjson"):
            raw = self._parse_jsonl(text)
        elif suffix == ".json":
            raw = self._parse_json(text)
        else:
            raise TradeSourceError(str(self._path), f"unsupported file type '{suffix}'")

        records: list[TradeRecord] = []
        for index, (doc_id, doc) in enumerate(raw):
            if not isinstance(doc, dict):
                raise TradeSourceError(
                    str(self._path), f"entry {index} is not an object"
                )
            if doc_id is None and not doc.get("id"):
                doc_id = f"{self._path.stem}-{index}"
            records.append(TradeRecord.from_document(doc, doc_id))
        return records

    def _parse_json(self, text: str) -> list[tuple[str | None, Any]]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TradeSourceError(str(self._path), f"invalid JSON: {exc}") from exc

        if isinstance(data, dict) and isinstance(data.get("trades"), list):
            data = data["trades"]
        if isinstance(data, list):
            return [(None, doc) for doc in data]
        if isinstance(data, dict) and all(isinstance(v, dict) for v in data.values()):
            return [(str(key), doc) for key, doc in data.items()]
        raise TradeSourceError(
            str(self._path), "expected a list of trades or an object keyed by id"
        )

    def _parse_jsonl(self, text: str) -> list[tuple[str | None, Any]]:
        docs: list[tuple[str | None, Any]] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                docs.append((None, json.loads(line)))
            except json.JSONDecodeError as exc:
                raise TradeSourceError(
                    str(self._path), f"invalid JSON on line {lineno}: {exc}"
                ) from exc
        return docs

    def _parse_csv(self, text: str) -> list[tuple[str | None, Any]]:
        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            return []
        return [
            (None, {col: _csv_cell(col, val) for col, val in row.items() if col})
            for row in reader
        ]
