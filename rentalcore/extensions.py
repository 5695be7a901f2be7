import time

from flask import current_app
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()

REVOKED_TOKENS = "rentalcore.revoked_tokens"


def revoked_tokens() -> dict:
    """jti -> expiry of tokens revoked through /api/auth/logout, per app."""
    return current_app.extensions.setdefault(REVOKED_TOKENS, {})


def revoke_token(payload: dict) -> None:
    revoked = revoked_tokens()
    now = time.time()
    for jti, exp in list(revoked.items()):
        if exp is not None and exp <= now:
            del revoked[jti]
    revoked[payload["jti"]] = payload.get("exp")


@jwt.token_in_blocklist_loader
def _token_revoked(jwt_header, jwt_payload) -> bool:
    return jwt_payload.get("jti") in revoked_tokens()
