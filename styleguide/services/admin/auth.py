"""Admin password check and the signed-session flag that gates blog admin routes."""

import hmac
import logging
from datetime import timedelta
from functools import wraps
from typing import Callable

from flask import jsonify, session

import config

logger = logging.getLogger(__name__)

SESSION_KEY = "admin_blog_session"
UNAUTHORIZED_MESSAGE = "Unauthorized - Please log in"


class AdminConfigError(RuntimeError):
    """ADMIN_BLOG_PASSWORD is not configured."""


def session_lifetime() -> timedelta:
    return timedelta(days=config.ADMIN_SESSION_DAYS)


def verify_admin_password(password: object) -> bool:
    """Constant-time comparison. AdminConfigError when no password is configured."""
    expected = config.ADMIN_BLOG_PASSWORD
    if not expected:
        raise AdminConfigError("Admin password not configured")
    if not isinstance(password, str) or not password:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def login_admin() -> None:
    session.permanent = True
    session[SESSION_KEY] = "authenticated"


def logout_admin() -> None:
    session.pop(SESSION_KEY, None)


def is_admin() -> bool:
    return session.get(SESSION_KEY) == "authenticated"


def admin_required(view: Callable[..., tuple]) -> Callable[..., tuple]:
    @wraps(view)
    def wrapper(*args, **kwargs) -> tuple:
        if not is_admin():
            logger.info("Rejected unauthenticated admin request")
            return jsonify({"success": False, "error": UNAUTHORIZED_MESSAGE}), 401
        return view(*args, **kwargs)

    return wrapper
