# rentalcore/security.py
from functools import wraps
from typing import Iterable, Optional

from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request

ROLE_HIERARCHY = {
    "superuser": 4,
    "admin": 3,
    "maintenance": 2,
    "viewer": 1,
}

ROLES = tuple(ROLE_HIERARCHY)


def role_level(role: Optional[str]) -> int:
    """Level of ``role`` in the hierarchy; 0 for anything unknown."""
    return ROLE_HIERARCHY.get(role or "", 0)


def is_authorized(user_role: Optional[str], required_roles: Iterable[str]) -> bool:
    """True when ``user_role`` dominates at least one of ``required_roles``.

    Listing several roles therefore only sets a floor: the lowest listed
    level is what counts, and every role above it is let through too.
    """
    user_level = role_level(user_role)
    if not user_level:
        return False
    levels = [role_level(r) for r in required_roles if role_level(r)]
    if not levels:
        return False
    return user_level >= min(levels)


def roles_required(*allowed):
    """Usage: @roles_required("admin")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()
            if not is_authorized(claims.get("role"), allowed):
                return jsonify({"error": "forbidden", "message": "insufficient role"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return deco
