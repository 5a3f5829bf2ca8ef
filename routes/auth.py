from flask import Blueprint, request, jsonify, current_app, g

from models import db
from models.user import User
from security.password import hash_password, verify_password
from security.session import create_session, revoke_session, session_cookie_name
from security.csrf import issue_csrf_token
from services.entitlements import find_eligible_membership
from utils.audit import log_event
from utils.auth_context import login_required
from utils.payload import json_object
from datetime import datetime


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _is_valid_email(email: str) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


def _str_field(data, key):
    value = data.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


@auth_bp.post("/register")
def register():
    data = json_object()
    email = (_str_field(data, "email") or "").lower()
    password = data.get("password") or ""
    first_name = _str_field(data, "firstName")
    phone = _str_field(data, "phone")

    if not email or not password or not first_name or not phone:
        return jsonify(error="Email, password, first name, and phone are required"), 400
    if not _is_valid_email(email):
        return jsonify(error="Invalid email"), 400

    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 8)
    if not isinstance(password, str) or len(password) < min_length:
        return jsonify(error=f"Password must be at least {min_length} characters"), 400

    if User.query.filter_by(email=email).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": email})
        return jsonify(error="An account with this email already exists"), 400

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=_str_field(data, "lastName"),
        phone=phone,
        role="member",
    )
    db.session.add(user)
    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id)

    return jsonify(id=user.id, email=user.email, firstName=user.first_name), 201


@auth_bp.post("/login")
def login():
    data = json_object()
    email = (_str_field(data, "email") or "").lower()
    password = data.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    raw_token = create_session(user.id)
    cookie_name = session_cookie_name()

    resp = jsonify(message="Login OK")
    resp.set_cookie(
        cookie_name,
        raw_token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 8 * 60 * 60),
        path="/",
    )
    resp = issue_csrf_token(resp)

    log_event("LOGIN_SUCCESS", user_id=user.id)
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    membership = find_eligible_membership(g.user.id, datetime.now())
    return jsonify(
        id=g.user.id,
        email=g.user.email,
        firstName=g.user.first_name,
        lastName=g.user.last_name,
        phone=g.user.phone,
        role=g.user.role,
        membership=membership.to_dict() if membership else None,
    ), 200


@auth_bp.post("/logout")
@login_required
def logout():
    cookie_name = session_cookie_name()
    revoke_session(request.cookies.get(cookie_name))
    log_event("LOGOUT", user_id=g.user.id)

    resp = jsonify(message="Logged out")
    resp.delete_cookie(cookie_name, path="/")
    return resp, 200
