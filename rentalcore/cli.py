# rentalcore/cli.py
import csv
from pathlib import Path

import click
from flask import current_app

from . import get_coordinator, get_store
from .extensions import db
from .importer import import_rows
from .validation import hash_password


def load_csv(path):
    with open(path, newline="", encoding="utf-8-sig") as f:
        return list(csv.DictReader(f))


def ensure_admin(store, email, password, role="superuser"):
    """Create the admin user unless one with ``email`` exists; returns (user, created)."""
    users = store.users
    existing = users.find_by_email(email.lower())
    if existing:
        return existing, False
    user = users.insert({
        "firstName": "Admin",
        "lastName": "User",
        "email": email.lower(),
        "password": hash_password(password),
        "role": role,
    })
    return user, True


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables (development; use `flask db upgrade` elsewhere)."""
        db.create_all()
        click.echo("Tables created.")

    @app.cli.command("seed-admin")
    @click.option("--email", default=None, help="Defaults to DEFAULT_ADMIN_EMAIL.")
    @click.option("--password", default=None, help="Defaults to DEFAULT_ADMIN_PASSWORD.")
    def seed_admin(email, password):
        """Ensure a superuser exists."""
        email = email or current_app.config["DEFAULT_ADMIN_EMAIL"]
        password = password or current_app.config.get("DEFAULT_ADMIN_PASSWORD")
        if not password:
            raise click.UsageError("no password: pass --password or set DEFAULT_ADMIN_PASSWORD")
        user, created = ensure_admin(get_store(), email, password)
        click.echo(("Created " if created else "Already present: ") + f"{user['email']} ({user['role']})")

    @app.cli.command("import-csv")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
    def import_csv(path):
        """Import tenants and apartments from a CSV file with a header row."""
        result = import_rows(get_coordinator(), load_csv(path))
        click.echo(
            f"[{path.name}] {result.apartments} apartment(s), "
            f"{result.tenants} tenant(s), {result.skipped} skipped"
        )
