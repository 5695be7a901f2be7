"""Login state held in an explicit object instead of a process global."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from .errors import AuthenticationError
from .security import is_authorized
from .store import Collection
from .validation import public_user, verify_password

logger = logging.getLogger(__name__)


class AuthSession:
    """One user's session: ``login`` starts it, ``logout`` ends it."""

    def __init__(self, users: Collection) -> None:
        self.users = users
        self.current_user: Optional[dict] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, email: str, password: str) -> dict:
        email = (email or "").strip().lower()
        user = self.users.find_by_email(email) if email else None
        if not user or not verify_password(password, user.get("password")):
            logger.info("Failed login for %s", email or "<empty>")
            raise AuthenticationError("Invalid email or password")

        user = self.users.update(user["id"], dict(user, lastLogin=datetime.utcnow().isoformat()))
        self.current_user = public_user(user)
        logger.info("User %s logged in as %s", user["id"], user.get("role"))
        return self.current_user

    def logout(self) -> None:
        self.current_user = None

    def is_authorized(self, required_roles: Iterable[str]) -> bool:
        if self.current_user is None:
            return False
        return is_authorized(self.current_user.get("role"), required_roles)
