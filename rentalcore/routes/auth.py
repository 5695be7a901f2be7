# rentalcore/routes/auth.py
from flask import Blueprint, jsonify
from flask_jwt_extended import (
    create_access_token, create_refresh_token,
    get_jwt, get_jwt_identity, jwt_required,
)

from .. import get_store
from ..auth import AuthSession
from ..errors import NotFoundError
from ..extensions import revoke_token
from ..validation import public_user
from .common import json_body

bp = Blueprint("auth", __name__)


def _claims(user: dict) -> dict:
    return {"email": user.get("email"), "role": user.get("role")}


@bp.post("/auth/login")
def login():
    data = json_body()
    email = data.get("email") or data.get("username") or ""
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"error": "invalid_payload", "message": "email and password required"}), 400

    session = AuthSession(get_store().users)
    user = session.login(email, password)

    access = create_access_token(identity=str(user["id"]), additional_claims=_claims(user))
    refresh = create_refresh_token(identity=str(user["id"]))
    return jsonify(access_token=access, refresh_token=refresh, user=user), 200


@bp.post("/auth/refresh")
@jwt_required(refresh=True)
def refresh():
    ident = get_jwt_identity()
    try:
        user = get_store().users.get(ident)
    except NotFoundError:
        return jsonify({"error": "unauthorized", "message": "user no longer exists"}), 401
    return jsonify(access_token=create_access_token(identity=ident, additional_claims=_claims(user))), 200


@bp.get("/auth/me")
@jwt_required()
def me():
    return jsonify(public_user(get_store().users.get(get_jwt_identity()))), 200


@bp.post("/auth/logout")
@jwt_required(verify_type=False)
def logout():
    revoke_token(get_jwt())
    return jsonify({"success": True}), 200
