# rentalcore/routes/apartments.py
from flask import Blueprint, jsonify, request

from .. import get_coordinator
from ..security import roles_required
from ..validation import validate
from .common import json_body, reference_filter

bp = Blueprint("apartments", __name__)


@bp.get("/apartments")
@roles_required("maintenance")
def list_apartments():
    coordinator = get_coordinator()
    key_id = request.args.get("keyId")
    if key_id:
        return jsonify(coordinator.apartments_for_key(key_id)), 200
    return jsonify(coordinator.list("apartments", reference_filter("apartments"))), 200


@bp.get("/apartments/<record_id>")
@roles_required("maintenance")
def get_apartment(record_id):
    return jsonify(get_coordinator().get("apartments", record_id)), 200


@bp.post("/apartments")
@roles_required("admin")
def create_apartment():
    apartment = get_coordinator().create_apartment(validate("apartments", json_body()))
    return jsonify(apartment), 201


@bp.put("/apartments/<record_id>")
@roles_required("admin")
def update_apartment(record_id):
    apartment = get_coordinator().update_apartment(record_id, validate("apartments", json_body()))
    return jsonify(apartment), 200


@bp.delete("/apartments/<record_id>")
@roles_required("admin")
def delete_apartment(record_id):
    get_coordinator().delete_apartment(record_id)
    return jsonify({"success": True}), 200
