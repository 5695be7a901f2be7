"""Request payload checks, run before anything reaches a store."""

from __future__ import annotations

from typing import Any, Optional

from passlib.hash import pbkdf2_sha256

from .errors import ValidationError
from .security import ROLES
from .store import FIELDS, REFERENCE_FIELDS

REQUIRED = {
    "tenants": ("firstName", "lastName", "phoneNumber", "email", "personalNumber"),
    "apartments": ("street", "number", "apartmentNumber", "floor", "postalCode", "city"),
    "keys": ("type", "number"),
    "users": ("firstName", "lastName", "email", "role"),
}

# Written by the server, never taken from a request body
READ_ONLY = {"users": ("createdAt", "lastLogin")}


def hash_password(raw: str) -> str:
    return pbkdf2_sha256.hash(raw)


def verify_password(raw: str, hashed: Optional[str]) -> bool:
    if not raw or not hashed:
        return False
    try:
        return pbkdf2_sha256.verify(raw, hashed)
    except ValueError:
        return False


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _amount(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        value = int(value)
    amount = int(value)
    if amount < 1:
        raise ValueError(value)
    return amount


def validate(collection: str, data: Any, current: Optional[dict] = None) -> dict:
    """Return a clean full record for ``collection`` or raise ValidationError.

    ``current`` is the stored record when validating an update; for users an
    empty password then keeps the stored hash.
    """
    if not isinstance(data, dict):
        raise ValidationError("body must be a JSON object")

    errors: dict[str, str] = {}
    record: dict[str, Any] = {}
    for field in FIELDS[collection]:
        if field in READ_ONLY.get(collection, ()):
            continue
        if field == "password":
            continue
        value = data.get(field)
        if field in REFERENCE_FIELDS[collection]:
            record[field] = None if value in (None, "") else value
        elif field == "amount":
            try:
                record[field] = _amount(value)
            except (TypeError, ValueError):
                errors[field] = "must be a positive integer"
        else:
            record[field] = _text(value)

    for field in REQUIRED[collection]:
        if field not in errors and not record.get(field):
            errors[field] = "is required"

    if collection == "users":
        if record.get("email"):
            record["email"] = record["email"].lower()
        if record.get("role") and record["role"] not in ROLES:
            errors["role"] = f"must be one of {', '.join(ROLES)}"
        password = data.get("password") or ""
        if password:
            record["password"] = hash_password(password)
        elif current is not None and current.get("password"):
            record["password"] = current["password"]
        else:
            errors["password"] = "is required"

    if errors:
        raise ValidationError("invalid " + collection[:-1], fields=errors)
    return record


def public_user(record: dict) -> dict:
    """User record as the API returns it: everything but the password hash."""
    return {k: v for k, v in record.items() if k != "password"}
