"""Append-only analysis history persisted as one JSON list."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path

from models import AnalysisResult, HistoryItem

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class JsonHistoryStore:
    """Most-recent-first list of past results mirrored to a JSON file.

    Every append rewrites the whole file through a temp file and
    ``os.replace``, so a crash never leaves a half-written list behind.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._items: list[HistoryItem] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def items(self) -> list[HistoryItem]:
        with self._lock:
            return list(self._items)

    def load(self) -> list[HistoryItem]:
        with self._lock:
            self._items = self._read_all()
            return list(self._items)

    def append(self, result: AnalysisResult) -> HistoryItem:
        item = HistoryItem(id=uuid.uuid4().hex, timestamp=now_ms(), result=result)
        with self._lock:
            updated = [item, *self._items]
            self._write_all(updated)
            self._items = updated
        return item

    def get(self, item_id: str) -> HistoryItem | None:
        with self._lock:
            return next((item for item in self._items if item.id == item_id), None)

    def clear(self) -> None:
        with self._lock:
            self._write_all([])
            self._items = []

    def _read_all(self) -> list[HistoryItem]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("History file %s is unreadable, starting empty: %s", self._path, exc)
            return []
        if not isinstance(raw, list):
            logger.warning("History file %s does not hold a list, starting empty", self._path)
            return []

        items: list[HistoryItem] = []
        for index, record in enumerate(raw):
            try:
                items.append(HistoryItem.from_dict(record))
            except ValueError as exc:
                logger.warning("Skipping history record %d: %s", index, exc)
        return items

    def _write_all(self, items: list[HistoryItem]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)
