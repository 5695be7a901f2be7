from datetime import datetime

from . import db
from .base import RecordMixin


class User(RecordMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="viewer")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    __api_fields__ = {
        "firstName": "first_name",
        "lastName": "last_name",
        "email": "email",
        "password": "password_hash",
        "role": "role",
        "createdAt": "created_at",
        "lastLogin": "last_login",
    }
    __datetime_fields__ = ("created_at", "last_login")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
