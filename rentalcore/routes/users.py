# rentalcore/routes/users.py
import logging

from flask import Blueprint, jsonify

from .. import get_store
from ..security import roles_required
from ..validation import public_user, validate
from .common import json_body

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)


@bp.get("/users")
@roles_required("superuser")
def list_users():
    return jsonify([public_user(u) for u in get_store().users.list()]), 200


@bp.get("/users/<record_id>")
@roles_required("superuser")
def get_user(record_id):
    return jsonify(public_user(get_store().users.get(record_id))), 200


@bp.post("/users")
@roles_required("superuser")
def create_user():
    user = get_store().users.insert(validate("users", json_body()))
    logger.info("Created user %s (%s)", user["id"], user["role"])
    return jsonify(public_user(user)), 201


@bp.put("/users/<record_id>")
@roles_required("superuser")
def update_user(record_id):
    users = get_store().users
    current = users.get(record_id)
    user = users.update(record_id, validate("users", json_body(), current=current))
    return jsonify(public_user(user)), 200


@bp.delete("/users/<record_id>")
@roles_required("superuser")
def delete_user(record_id):
    get_store().users.delete(record_id)
    return jsonify({"success": True}), 200
