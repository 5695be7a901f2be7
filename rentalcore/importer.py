"""Bulk import of tenants and their apartments from already-parsed rows.

Each row carries tenant columns (firstName, lastName, phoneNumber, email,
personalNumber, moveInDate, resiliationDate) and, optionally, the address of
the apartment the tenant lives in (street, number, apartmentNumber, floor,
postalCode, city). Apartments are de-duplicated on street/number/
apartmentNumber and created before any tenant so tenants can be linked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .coordinator import Coordinator
from .validation import validate

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    apartments: int = 0
    tenants: int = 0
    skipped: int = 0


def _cell(row: dict, name: str) -> str:
    return str(row.get(name) or "").strip()


def _apartment_key(row: dict):
    parts = (_cell(row, "street"), _cell(row, "number"), _cell(row, "apartmentNumber"))
    return parts if all(parts) else None


def import_rows(coordinator: Coordinator, rows: Iterable[dict]) -> ImportResult:
    rows = list(rows)
    result = ImportResult()

    apartment_ids = {}
    for row in rows:
        key = _apartment_key(row)
        if key is None or key in apartment_ids:
            continue
        apartment = validate("apartments", {
            "street": key[0],
            "number": key[1],
            "apartmentNumber": key[2],
            "floor": _cell(row, "floor") or "1",
            "postalCode": _cell(row, "postalCode") or "-",
            "city": _cell(row, "city") or "-",
        })
        apartment_ids[key] = coordinator.create_apartment(apartment)["id"]
        result.apartments += 1

    for row in rows:
        if not (_cell(row, "firstName") and _cell(row, "lastName") and _cell(row, "personalNumber")):
            result.skipped += 1
            continue
        key = _apartment_key(row)
        data = {
            "firstName": _cell(row, "firstName"),
            "lastName": _cell(row, "lastName"),
            "phoneNumber": _cell(row, "phoneNumber") or "-",
            "email": _cell(row, "email") or "-",
            "personalNumber": _cell(row, "personalNumber"),
            "moveInDate": _cell(row, "moveInDate"),
            "resiliationDate": _cell(row, "resiliationDate"),
            "apartmentId": apartment_ids.get(key) if key else None,
        }
        coordinator.create_tenant(validate("tenants", data))
        result.tenants += 1

    logger.info(
        "Imported %d apartment(s), %d tenant(s), skipped %d row(s)",
        result.apartments, result.tenants, result.skipped,
    )
    return result
