# scripts/make_admin.py
import os
import sys

from rentalcore import create_app, get_store
from rentalcore.cli import ensure_admin
from rentalcore.extensions import db

EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD")

if not PASSWORD:
    print("Set DEFAULT_ADMIN_PASSWORD first.")
    sys.exit(1)

app = create_app()
with app.app_context():
    db.create_all()
    user, created = ensure_admin(get_store(), EMAIL, PASSWORD)
    print("Admin created:" if created else "Admin ensured:", user["email"])
