from flask import Blueprint, jsonify

from .. import get_coordinator
from ..security import roles_required

bp = Blueprint("dashboard", __name__)


@bp.get("/dashboard/summary")
@roles_required("viewer")
def summary():
    return jsonify(get_coordinator().summary()), 200
