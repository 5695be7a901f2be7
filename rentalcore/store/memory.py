"""Embedded in-process store.

Mirrors the browser-side store the web client used to keep: string uuid
ids, every call persisted on its own, nothing grouped or rolled back.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from threading import Lock
from typing import Any, Optional

from ..errors import NotFoundError
from .base import COLLECTIONS, Collection, Store, same_id


def _utc_now() -> str:
    return datetime.utcnow().isoformat()


class MemoryCollection(Collection):
    def __init__(self, name: str, lock: Lock) -> None:
        super().__init__(name)
        self._lock = lock
        self._rows: dict[str, dict[str, Any]] = {}

    def list(self, filter: Optional[dict] = None) -> list[dict]:
        match = self._check_filter(filter)
        rows = list(self._rows.values())
        if match:
            field, value = match
            rows = [r for r in rows if same_id(r.get(field), value)]
        return [dict(r) for r in rows]

    def get(self, record_id: Any) -> dict:
        row = self._rows.get(str(record_id))
        if row is None:
            raise NotFoundError(self.name, record_id)
        return dict(row)

    def insert(self, record: dict) -> dict:
        with self._lock:
            row = self._normalize(record)
            self._check_unique(row)
            if "createdAt" in row and not row["createdAt"]:
                row["createdAt"] = _utc_now()
            row["id"] = str(uuid.uuid4())
            self._rows[row["id"]] = row
            return dict(row)

    def update(self, record_id: Any, record: dict) -> dict:
        with self._lock:
            current = self._rows.get(str(record_id))
            if current is None:
                raise NotFoundError(self.name, record_id)
            row = self._merge_update(current, record)
            self._check_unique(row, exclude_id=current["id"])
            row["id"] = current["id"]
            self._rows[current["id"]] = row
            return dict(row)

    def delete(self, record_id: Any) -> None:
        with self._lock:
            self._rows.pop(str(record_id), None)

    def count(self) -> int:
        return len(self._rows)

    def first(self, field: str, value: Any) -> Optional[dict]:
        for row in self._rows.values():
            if row.get(field) == value:
                return dict(row)
        return None


class MemoryStore(Store):
    atomic = False

    def __init__(self) -> None:
        self._lock = Lock()
        self._collections = {name: MemoryCollection(name, self._lock) for name in COLLECTIONS}

    def collection(self, name: str) -> MemoryCollection:
        return self._collections[name]
