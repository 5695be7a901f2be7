# rentalcore/routes/tenants.py
from flask import Blueprint, jsonify, request

from .. import get_coordinator
from ..security import roles_required
from ..validation import validate
from .common import json_body, reference_filter

bp = Blueprint("tenants", __name__)


@bp.get("/tenants")
@roles_required("maintenance")
def list_tenants():
    coordinator = get_coordinator()
    key_id = request.args.get("keyId")
    if key_id:
        return jsonify(coordinator.tenants_for_key(key_id)), 200
    return jsonify(coordinator.list("tenants", reference_filter("tenants"))), 200


@bp.get("/tenants/<record_id>")
@roles_required("maintenance")
def get_tenant(record_id):
    return jsonify(get_coordinator().get("tenants", record_id)), 200


@bp.post("/tenants")
@roles_required("admin")
def create_tenant():
    tenant = get_coordinator().create_tenant(validate("tenants", json_body()))
    return jsonify(tenant), 201


@bp.put("/tenants/<record_id>")
@roles_required("admin")
def update_tenant(record_id):
    tenant = get_coordinator().update_tenant(record_id, validate("tenants", json_body()))
    return jsonify(tenant), 200


@bp.delete("/tenants/<record_id>")
@roles_required("admin")
def delete_tenant(record_id):
    get_coordinator().delete_tenant(record_id)
    return jsonify({"success": True}), 200
