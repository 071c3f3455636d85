"""Password authentication against the users table."""

from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from restaurant_pos.errors import AuthError
from restaurant_pos.models import Identity
from restaurant_pos.persistence import SqliteStore

logger = logging.getLogger(__name__)


class PasswordAuth:
    """Sign users in and up; every failure is an ``AuthError``."""

    def __init__(self, store: SqliteStore) -> None:
        self.store = store

    def sign_in(self, username: str, password: str) -> Identity:
        username = username.strip()
        if not username or not password:
            raise AuthError("Username and password are required")

        row = self.store.find_user_credentials(username)
        if row is None:
            logger.info("sign_in_failed username=%s reason=unknown_user", username)
            raise AuthError("Invalid username or password")
        if not check_password_hash(row["password_hash"], password):
            logger.info("sign_in_failed username=%s reason=bad_password", username)
            raise AuthError("Invalid username or password")
        if row["role"] not in {"waiter", "admin"}:
            raise AuthError("User profile has no valid role")

        logger.info("sign_in username=%s role=%s", username, row["role"])
        return Identity(id=row["id"], display_name=row["username"], role=row["role"])

    def sign_up(self, username: str, password: str) -> Identity:
        """Create a waiter account and return its identity."""
        username = username.strip()
        if not username or not password:
            raise AuthError("Username and password are required")
        if self.store.find_user_credentials(username) is not None:
            raise AuthError(f"Username {username!r} is already taken")

        account = self.store.insert_user(username, generate_password_hash(password, method="scrypt"))
        logger.info("sign_up username=%s", username)
        return Identity(id=account.id, display_name=account.username, role=account.role)

    def ensure_admin(self, username: str, password: str) -> None:
        """Create the initial admin account on an empty users table."""
        if self.store.count_users() > 0:
            return
        self.store.insert_user(username, generate_password_hash(password, method="scrypt"), role="admin")
        logger.info("seeded_admin username=%s", username)
