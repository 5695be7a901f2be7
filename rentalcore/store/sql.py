"""Relational store on Flask-SQLAlchemy.

Integer primary keys. Outside :meth:`SqlStore.transaction` every write
commits immediately; inside it writes are only flushed and the outermost
block commits once, or rolls everything back on error.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import MODELS
from .base import COLLECTIONS, REFERENCE_FIELDS, SERVER_FIELDS, Collection, Store

logger = logging.getLogger(__name__)


def _as_key(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SqlCollection(Collection):
    def __init__(self, name: str, model, store: "SqlStore") -> None:
        super().__init__(name)
        self.model = model
        self.store = store

    def _column(self, field: str):
        return getattr(self.model, self.model.__api_fields__[field])

    def _coerce(self, row: dict) -> dict:
        errors = {}
        for field in REFERENCE_FIELDS[self.name]:
            value = row.get(field)
            if value is None:
                continue
            key = _as_key(value)
            if key is None:
                errors[field] = "must be an integer id"
            row[field] = key
        if errors:
            raise ValidationError("invalid reference", fields=errors)
        return row

    def _load(self, record_id: Any):
        key = _as_key(record_id)
        row = db.session.get(self.model, key) if key is not None else None
        if row is None:
            raise NotFoundError(self.name, record_id)
        return row

    def list(self, filter: Optional[dict] = None) -> list[dict]:
        match = self._check_filter(filter)
        query = self.model.query
        if match:
            field, value = match
            key = _as_key(value)
            if key is None:
                return []
            query = query.filter(self._column(field) == key)
        return [row.serialize() for row in query.order_by(self.model.id).all()]

    def get(self, record_id: Any) -> dict:
        return self._load(record_id).serialize()

    def insert(self, record: dict) -> dict:
        values = self._coerce(self._normalize(record))
        self._check_unique(values)
        for f in SERVER_FIELDS.get(self.name, ()):
            if values.get(f) is None:
                values.pop(f)
        row = self.model()
        row.apply(values)
        db.session.add(row)
        self.store.write()
        return row.serialize()

    def update(self, record_id: Any, record: dict) -> dict:
        row = self._load(record_id)
        values = self._coerce(self._merge_update(row.serialize(), record))
        self._check_unique(values, exclude_id=row.id)
        row.apply(values)
        self.store.write()
        return row.serialize()

    def delete(self, record_id: Any) -> None:
        key = _as_key(record_id)
        row = db.session.get(self.model, key) if key is not None else None
        if row is None:
            return
        db.session.delete(row)
        self.store.write()

    def count(self) -> int:
        return self.model.query.count()

    def first(self, field: str, value: Any) -> Optional[dict]:
        row = self.model.query.filter(self._column(field) == value).first()
        return row.serialize() if row else None


class SqlStore(Store):
    atomic = True

    def __init__(self) -> None:
        self._local = threading.local()
        self._collections = {name: SqlCollection(name, MODELS[name], self) for name in COLLECTIONS}

    def collection(self, name: str) -> SqlCollection:
        return self._collections[name]

    @property
    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @_depth.setter
    def _depth(self, value: int) -> None:
        self._local.depth = value

    def write(self) -> None:
        """Flush inside a transaction block, commit outside of one."""
        try:
            if self._depth:
                db.session.flush()
            else:
                db.session.commit()
        except IntegrityError as e:
            if not self._depth:
                db.session.rollback()
            logger.info("Integrity error: %s", e.orig)
            raise ConflictError("integrity constraint violated") from e

    @contextmanager
    def transaction(self) -> Iterator["SqlStore"]:
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if not self._depth:
                db.session.rollback()
            raise
        self._depth -= 1
        if not self._depth:
            self.write()
