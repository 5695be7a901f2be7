# rentalcore/errors.py
from __future__ import annotations

from typing import Any, Optional

from flask import current_app, jsonify


class RentalError(Exception):
    """Base for every error the record layer raises on purpose."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": self.message}
        payload.update(self.details)
        return payload


class ValidationError(RentalError):
    status_code = 400
    code = "invalid_payload"

    def __init__(self, message: str = "invalid payload", fields: Optional[dict] = None) -> None:
        super().__init__(message, fields=fields or {})
        self.fields = fields or {}


class AuthenticationError(RentalError):
    status_code = 401
    code = "invalid_credentials"


class NotFoundError(RentalError):
    status_code = 404
    code = "not_found"

    def __init__(self, collection: str, record_id: Any) -> None:
        super().__init__(f"{collection} {record_id} not found")
        self.collection = collection
        self.record_id = record_id


class ConflictError(RentalError):
    status_code = 409
    code = "conflict"


class PartialConsistencyFailure(RentalError):
    """A multi-step write stopped after some of its steps were persisted.

    ``completed`` lists the persisted steps; the triggering error is
    available as ``cause`` and as ``__cause__``.
    """

    code = "partial_consistency_failure"

    def __init__(self, operation: str, completed: list[str], cause: Exception) -> None:
        super().__init__(
            f"{operation} failed after {len(completed)} step(s): {cause}",
            completed=list(completed),
        )
        self.operation = operation
        self.completed = list(completed)
        self.cause = cause
        self.status_code = getattr(cause, "status_code", 500)


def register_error_handlers(app):
    @app.errorhandler(RentalError)
    def rental_error(e):
        if e.status_code >= 500:
            current_app.logger.warning("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify(error="bad_request", message=getattr(e, "description", "Bad Request")), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(error="unauthorized"), 401

    @app.errorhandler(403)
    def forbidden(e): return jsonify(error="forbidden"), 403

    @app.errorhandler(404)
    def not_found(e): return jsonify(error="not_found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e): return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(500)
    def server_error(e):
        current_app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error"), 500
