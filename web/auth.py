"""Authentication utilities for the staff panel.

Staff sign in with a single shared admin password. The password comes from
configuration and is kept only as a werkzeug hash once the app starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import jsonify
from flask_login import LoginManager, UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from core import get_logger

logger = get_logger(__name__)

ADMIN_USER_ID = "admin"


@dataclass
class AdminCredentials:
    """Hashed admin password for the staff panel."""
    password_hash: str


login_manager = LoginManager()


class AdminUser(UserMixin):
    """Represents an authenticated staff panel session."""
    def __init__(self, user_id: str = ADMIN_USER_ID) -> None:
        self.id = user_id


def _is_hashed(value: str) -> bool:
    return value.startswith(("pbkdf2:", "scrypt:"))


def init_login_manager(app, password: str) -> AdminCredentials:
    """Initialize Flask-Login and store the hashed admin password.

    Args:
        app: Flask application instance
        password: Plain or already hashed admin password

    Returns:
        Credentials holding the password hash
    """
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str) -> Optional[AdminUser]:
        if user_id == ADMIN_USER_ID:
            return AdminUser(user_id)
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentication required"}), 401

    if _is_hashed(password):
        credentials = AdminCredentials(password_hash=password)
    else:
        credentials = AdminCredentials(password_hash=generate_password_hash(password))
        logger.info("Admin password hashed at startup")

    app.config["ADMIN_CREDENTIALS"] = credentials
    return credentials


def validate_password(credentials: AdminCredentials, password: object) -> bool:
    """Check a submitted admin password."""
    if not isinstance(password, str) or not password:
        return False
    result = check_password_hash(credentials.password_hash, password)
    logger.info(f"Admin password check result: {result}")
    return result
