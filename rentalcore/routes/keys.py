# rentalcore/routes/keys.py
from flask import Blueprint, jsonify

from .. import get_coordinator
from ..security import roles_required
from ..validation import validate
from .common import json_body, reference_filter

bp = Blueprint("keys", __name__)


@bp.get("/keys")
@roles_required("maintenance")
def list_keys():
    return jsonify(get_coordinator().list("keys", reference_filter("keys"))), 200


@bp.get("/keys/<record_id>")
@roles_required("maintenance")
def get_key(record_id):
    return jsonify(get_coordinator().get("keys", record_id)), 200


@bp.post("/keys")
@roles_required("admin")
def create_key():
    return jsonify(get_coordinator().create_key(validate("keys", json_body()))), 201


@bp.put("/keys/<record_id>")
@roles_required("admin")
def update_key(record_id):
    return jsonify(get_coordinator().update_key(record_id, validate("keys", json_body()))), 200


@bp.delete("/keys/<record_id>")
@roles_required("admin")
def delete_key(record_id):
    get_coordinator().delete_key(record_id)
    return jsonify({"success": True}), 200
