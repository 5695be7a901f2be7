import os
from datetime import timedelta


def _flag(name, default="false"):
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Secret key for sessions / JWT - REQUIRED outside development
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # None lets the app factory fall back to a sqlite file in the instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", 60)))

    # "sql" (relational tables) or "memory" (embedded, process-local)
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql")
    # Tenant writes also repair apartment.tenantId when enabled
    SYMMETRIC_TENANT_LINKS = _flag("SYMMETRIC_TENANT_LINKS")

    DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STORE_BACKEND = "sql"
    SYMMETRIC_TENANT_LINKS = False
