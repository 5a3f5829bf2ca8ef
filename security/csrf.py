"""Double-submit CSRF check for state-changing requests made with a session cookie."""
import secrets
from flask import request, jsonify, current_app, g

CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"

UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
# Called before any session exists
EXEMPT_PATHS = frozenset({"/auth/login", "/auth/register", "/health"})


def issue_csrf_token(resp):
    resp.set_cookie(
        CSRF_COOKIE,
        secrets.token_urlsafe(32),
        httponly=False,  # the client echoes it back in the header
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        path="/",
    )
    return resp


def tokens_match(cookie_token, header_token) -> bool:
    if not cookie_token or not header_token:
        return False
    return secrets.compare_digest(cookie_token.encode("utf-8"), header_token.encode("utf-8"))


def needs_csrf_check() -> bool:
    if not current_app.config.get("CSRF_ENABLED", True):
        return False
    if request.method not in UNSAFE_METHODS or request.path in EXEMPT_PATHS:
        return False
    # anonymous requests carry no session cookie to forge
    return getattr(g, "user", None) is not None


def csrf_protect():
    """before_request hook; returns a 403 response when the tokens differ."""
    if not needs_csrf_check():
        return None
    if tokens_match(request.cookies.get(CSRF_COOKIE), request.headers.get(CSRF_HEADER)):
        return None
    current_app.logger.warning("CSRF rejected %s %s user=%s", request.method, request.path, g.user.id)
    return jsonify(error="CSRF validation failed"), 403
