"""Resolves the caller once per request and guards member-only views."""
from functools import wraps
from flask import current_app, g, request

from models import db
from models.user import User
from security.session import get_session_from_request
from services.errors import Unauthorized


def load_current_user():
    sess = get_session_from_request()
    user = db.session.get(User, sess.user_id) if sess else None
    # a session whose user row is gone counts as logged out
    g.session = sess if user is not None else None
    g.user = user


def current_user():
    return getattr(g, "user", None)


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            current_app.logger.debug("Unauthenticated %s %s", request.method, request.path)
            raise Unauthorized()
        return fn(*args, **kwargs)
    return wrapper
