from flask import request

from ..errors import ValidationError
from ..store import REFERENCE_FIELDS


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("body must be a JSON object")
    return data


def reference_filter(collection: str):
    """``?apartmentId=..`` / ``?tenantId=..`` query args as a store filter."""
    found = {f: request.args[f] for f in REFERENCE_FIELDS[collection] if request.args.get(f)}
    return found or None
