"""First-party session endpoints (signup, signin, refresh, logout, profile)."""

from __future__ import annotations

from flask import Blueprint

from app.api.deps import authenticated_identity, json_response, load_body, require_auth, timing
from app.container import get_services
from app.schemas import (
    LogoutSchema,
    PasswordUpdateSchema,
    RefreshSchema,
    SigninSchema,
    SignupSchema,
    TokenBundleSchema,
    UserOutSchema,
)
from app.services.session.dto import SigninIn, SignupIn

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
signin_schema = SigninSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
password_schema = PasswordUpdateSchema()
user_schema = UserOutSchema()
bundle_schema = TokenBundleSchema()


@bp.post("/signup")
@timing
def signup():
    """Register a new account; no tokens are issued."""

    data = load_body(signup_schema)
    user = get_services().sessions.signup(SignupIn(**data))
    return json_response(user_schema.dump(user), status=201)


@bp.post("/signin")
@timing
def signin():
    """Authenticate credentials and issue a token bundle."""

    data = load_body(signin_schema)
    bundle = get_services().sessions.signin(SigninIn(**data))
    return json_response(bundle_schema.dump(bundle))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new token bundle."""

    data = load_body(refresh_schema)
    bundle = get_services().sessions.refresh(data["refresh_token"])
    return json_response(bundle_schema.dump(bundle))


@bp.post("/logout")
@timing
def logout():
    """Revoke the given refresh token; always 200."""

    token = (load_body(logout_schema).get("refresh_token") or "").strip()
    if token:
        get_services().sessions.logout(token)
    return json_response({"message": "Logged out successfully"})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    identity = authenticated_identity()
    user = get_services().sessions.get_current_user(identity.user_id)
    return json_response(user_schema.dump(user))


@bp.put("/password")
@require_auth
@timing
def update_password():
    data = load_body(password_schema)
    identity = authenticated_identity()
    get_services().sessions.update_password(identity.user_id, data["new_password"])
    return json_response({"message": "Password updated successfully"})
