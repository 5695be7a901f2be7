"""Storage contract shared by every backend.

A store hands out one :class:`Collection` per entity type. Collections speak
plain dicts keyed by the camelCase field names used on the wire, so the
coordinator and the API never see backend objects.
"""

from __future__ import annotations

import abc
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..errors import ConflictError, ValidationError

FIELDS: dict[str, tuple[str, ...]] = {
    "tenants": (
        "firstName",
        "lastName",
        "phoneNumber",
        "email",
        "personalNumber",
        "moveInDate",
        "resiliationDate",
        "apartmentId",
    ),
    "apartments": (
        "street",
        "number",
        "apartmentNumber",
        "floor",
        "postalCode",
        "city",
        "tenantId",
    ),
    "keys": ("type", "number", "amount", "apartmentId", "tenantId"),
    "users": ("firstName", "lastName", "email", "password", "role", "createdAt", "lastLogin"),
}

REFERENCE_FIELDS: dict[str, tuple[str, ...]] = {
    "tenants": ("apartmentId",),
    "apartments": ("tenantId",),
    "keys": ("apartmentId", "tenantId"),
    "users": (),
}

UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {"users": ("email",)}

# Assigned by the store; a full update that omits them keeps the stored value.
SERVER_FIELDS: dict[str, tuple[str, ...]] = {"users": ("createdAt", "lastLogin")}

COLLECTIONS = tuple(FIELDS)


def same_id(a: Any, b: Any) -> bool:
    """Compare two opaque ids, tolerating int/str spellings of the same id."""
    if a is None or b is None:
        return False
    return str(a) == str(b)


class Collection(abc.ABC):
    def __init__(self, name: str) -> None:
        if name not in FIELDS:
            raise KeyError(name)
        self.name = name
        self.fields = FIELDS[name]

    # -- contract -------------------------------------------------------------
    @abc.abstractmethod
    def list(self, filter: Optional[dict] = None) -> list[dict]:
        """Records in insertion order, optionally narrowed by one reference field."""

    @abc.abstractmethod
    def get(self, record_id: Any) -> dict:
        """The record, or :class:`NotFoundError`."""

    @abc.abstractmethod
    def insert(self, record: dict) -> dict:
        """Store ``record`` under a new id and return it with that id."""

    @abc.abstractmethod
    def update(self, record_id: Any, record: dict) -> dict:
        """Replace every field of an existing record."""

    @abc.abstractmethod
    def delete(self, record_id: Any) -> None:
        """Remove a record; absent ids are not an error."""

    @abc.abstractmethod
    def count(self) -> int: ...

    @abc.abstractmethod
    def first(self, field: str, value: Any) -> Optional[dict]:
        """First record whose ``field`` equals ``value``, or None."""

    def find_by_email(self, email: str) -> Optional[dict]:
        return self.first("email", email)

    # -- helpers for backends ---------------------------------------------------
    def _check_filter(self, filter: Optional[dict]) -> Optional[tuple[str, Any]]:
        if not filter:
            return None
        if len(filter) != 1:
            raise ValidationError("filter on exactly one reference field", fields={k: "ambiguous" for k in filter})
        (field, value), = filter.items()
        if field not in REFERENCE_FIELDS[self.name]:
            raise ValidationError(f"{self.name} cannot be filtered by {field}", fields={field: "not a reference field"})
        return field, value

    def _normalize(self, record: dict) -> dict:
        return {f: record.get(f) for f in self.fields}

    def _merge_update(self, current: dict, record: dict) -> dict:
        row = self._normalize(record)
        for f in SERVER_FIELDS.get(self.name, ()):
            if row.get(f) is None:
                row[f] = current.get(f)
        return row

    def _check_unique(self, record: dict, exclude_id: Any = None) -> None:
        for f in UNIQUE_FIELDS.get(self.name, ()):
            value = record.get(f)
            if value is None:
                continue
            existing = self.first(f, value)
            if existing and not same_id(existing["id"], exclude_id):
                raise ConflictError(f"{f} already exists", field=f)


class Store(abc.ABC):
    """A set of collections plus an optional grouping of writes."""

    #: True when :meth:`transaction` is all-or-nothing.
    atomic = False

    @abc.abstractmethod
    def collection(self, name: str) -> Collection: ...

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        yield self

    @property
    def tenants(self) -> Collection:
        return self.collection("tenants")

    @property
    def apartments(self) -> Collection:
        return self.collection("apartments")

    @property
    def keys(self) -> Collection:
        return self.collection("keys")

    @property
    def users(self) -> Collection:
        return self.collection("users")
