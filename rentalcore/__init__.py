# rentalcore/__init__.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, current_app, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from .coordinator import Coordinator
from .errors import register_error_handlers
from .extensions import REVOKED_TOKENS, cors, db, jwt, migrate
from .store import make_store

load_dotenv()


# --- Config ------------------------------------------------------------------
def _get_allowed_origins() -> list[str]:
    """Allowed CORS origins from env plus the local dev servers."""
    default = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    # Support comma-separated list in env
    extra = os.getenv("CORS_ALLOWED_ORIGINS", "")
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins()}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* when running behind a reverse proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    app.extensions[REVOKED_TOKENS] = {}


def _init_store(app: Flask) -> None:
    backend = app.config.get("STORE_BACKEND", "sql")
    store = make_store(backend)
    app.extensions["rentalcore.store"] = store
    app.extensions["rentalcore.coordinator"] = Coordinator(
        store, symmetric=bool(app.config.get("SYMMETRIC_TENANT_LINKS")),
    )
    app.logger.info("Using %s store (symmetric tenant links: %s)",
                    backend, bool(app.config.get("SYMMETRIC_TENANT_LINKS")))


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    from .routes import apartments, auth, dashboard, keys, tenants, users

    for mod in (auth, tenants, apartments, keys, users, dashboard):
        app.register_blueprint(mod.bp, url_prefix=app.config["API_PREFIX"])
        app.logger.debug("Registered blueprint %s", mod.bp.name)


def _register_cli(app: Flask) -> None:
    from .cli import register_commands

    register_commands(app)


def get_store():
    return current_app.extensions["rentalcore.store"]


def get_coordinator() -> Coordinator:
    return current_app.extensions["rentalcore.coordinator"]


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config object
      - dotted path to a config class (e.g., "rentalcore.config.DevelopmentConfig")
      - None (then CONFIG_CLASS env, defaulting to rentalcore.config.Config)
    """
    app = Flask(__name__, instance_relative_config=True)
    os.makedirs(app.instance_path, exist_ok=True)

    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "rentalcore.config.Config")
    if isinstance(config_object, str):
        module, _, cls = config_object.rpartition(".")
        config_object = getattr(__import__(module, fromlist=[cls]), cls)
    app.config.from_object(config_object)

    if not app.config.get("SECRET_KEY"):
        raise ValueError("SECRET_KEY environment variable must be set")
    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = app.config["SECRET_KEY"]
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(app.instance_path, "rentalcore.db")

    # Ensure API url prefix setting exists for other modules if they need it
    app.config.setdefault("API_PREFIX", "/api")

    # Core middleware/logging/CORS
    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    # Init extensions, store & blueprints
    _init_extensions(app)
    _init_store(app)
    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    # --------- Health & root routes ----------
    @app.get(app.config["API_PREFIX"] + "/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "time": datetime.utcnow().isoformat() + "Z",
                "service": "rentalcore",
                "store": app.config.get("STORE_BACKEND", "sql"),
            }
        ), 200

    @app.get("/")
    def root():
        return jsonify({"service": "rentalcore", "message": "See /api/health"}), 200

    return app
