import hashlib
import secrets
from datetime import datetime
from flask import request, current_app

from models import db
from models.session import Session


def _hash_token(token: str) -> str:
    # Raw tokens are random; a plain SHA-256 is enough to keep them out of the DB
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def session_cookie_name() -> str:
    return current_app.config.get("AUTH_COOKIE_NAME", "sauna_session")


def create_session(user_id: int) -> str:
    """
    Open a server-side session and return the RAW token for the cookie.
    Only its hash is stored.
    """
    raw_token = secrets.token_urlsafe(32)
    row = Session.open(
        user_id,
        _hash_token(raw_token),
        now=datetime.now(),
        lifetime_seconds=current_app.config.get("SESSION_LIFETIME_SECONDS", 28800),
        ip=request.headers.get("X-Forwarded-For", request.remote_addr),
        user_agent=request.headers.get("User-Agent"),
    )
    db.session.add(row)
    db.session.commit()
    return raw_token


def _find(raw_token: str):
    if not raw_token:
        return None
    return Session.query.filter_by(token_hash=_hash_token(raw_token)).first()


def get_session_from_request():
    sess = _find(request.cookies.get(session_cookie_name()))
    now = datetime.now()
    if sess is None or not sess.is_usable(now, current_app.config.get("IDLE_TIMEOUT_SECONDS", 1200)):
        return None

    sess.touch(now)
    db.session.commit()
    return sess


def revoke_session(raw_token: str) -> bool:
    sess = _find(raw_token)
    if sess is None:
        return False
    sess.revoked = True
    db.session.commit()
    return True
