from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol

from pydantic import ValidationError

from .config import HISTORY_LIMIT, HISTORY_PATH
from .schemas import AnalysisResult, HistoryItem

logger = logging.getLogger("disinfo.history")

HISTORY_KEY = "disinformation-history"
PREVIEW_CHARS = 100


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Key-value pairs kept in one JSON object on disk."""

    def __init__(self, path: str = HISTORY_PATH):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            logger.warning("history.file.unreadable", extra={"path": str(self.path)})
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        tmp.replace(self.path)


def preview_content(content: str, n: int = PREVIEW_CHARS) -> str:
    return content[:n] + ("..." if len(content) > n else "")


class HistoryStore:
    """The last `limit` analyses, newest first. Loaded once, rewritten wholesale on add."""

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = HISTORY_KEY,
        limit: int = HISTORY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.kv = kv
        self.key = key
        self.limit = limit
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._items: List[HistoryItem] = self._load()

    def _load(self) -> List[HistoryItem]:
        try:
            raw = self.kv.get(self.key)
            if not raw:
                return []
            items = [HistoryItem.model_validate(x) for x in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("history.load.failed", extra={"err": repr(e)[:300]})
            return []
        return items[:self.limit]

    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def _new_id(self) -> str:
        n = int(self.clock().timestamp() * 1000)
        taken = {i.id for i in self._items}
        while str(n) in taken:
            n += 1
        return str(n)

    def add(self, result: AnalysisResult, content: str) -> HistoryItem:
        item = HistoryItem(
            **result.model_dump(),
            id=self._new_id(),
            content=preview_content(content),
        )
        self._items = [item, *self._items][:self.limit]
        self.kv.set(self.key, json.dumps([i.to_wire() for i in self._items], ensure_ascii=False))
        logger.info("history.saved", extra={"count": len(self._items)})
        return item
