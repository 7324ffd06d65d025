# modules/users/context.py
from flask import g, request

from exceptions import UnauthorizedError
from extensions import db
from .models import User

USER_HEADER = "X-User-Id"


def require_user():
    """
    before_request hook: resolves the caller named by the X-User-Id header
    (set by the auth proxy in front of the API) into g.user_id.
    """
    raw = (request.headers.get(USER_HEADER) or "").strip()
    if not raw.isdigit():
        raise UnauthorizedError()

    user = db.session.get(User, int(raw))
    if user is None or not user.is_active:
        raise UnauthorizedError("Unknown or disabled user")

    g.user_id = user.id


def current_user_id():
    return g.user_id
