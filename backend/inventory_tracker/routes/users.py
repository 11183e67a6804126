# Overview: Flask API routes for login and user administration; parses input and returns JSON responses.

# backend/inventory_tracker/routes/users.py
"""
Authentication and user administration routes.

SECURITY:
- login and resetPassword are public
- logout resolves the token optionally and always succeeds
- logincheck requires authentication
- listing, adding and deleting users require an admin
"""

from datetime import timedelta

from flask import Blueprint, g, jsonify, current_app

from ..services import get_services
from ..errors import UnauthorizedError, UserNotFoundError, error_response
from ..validation import required_arg, json_body, body_str
from ..decorators import require_auth, require_admin, optional_auth, TOKEN_COOKIE_NAME


users_bp = Blueprint("users", __name__, url_prefix="/api")


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes"}


@users_bp.post("/user/login")
def login_route():
    """
    Exchange username and password for the account token.

    The token is returned in the body and also set as the "token" cookie.

    Request body:
    - username: str (required)
    - password: str (required)
    """
    data = json_body()
    username = body_str(data, "username")
    password = body_str(data, "password")

    identity = get_services().users.check_credentials(username, password)
    if not identity.valid:
        current_app.logger.info("Failed login for username %r", username)
        return error_response(UnauthorizedError("incorrect username or password"))

    response = jsonify({"user": identity.to_dict(), "token": identity.token})
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        identity.token,
        max_age=int(timedelta(days=current_app.config["TOKEN_COOKIE_DAYS"]).total_seconds()),
        path="/",
        httponly=True,
        samesite="Lax",
    )
    return response


@users_bp.get("/user/logincheck")
@require_auth
def login_check_route():
    """Validate the current token and return the user it belongs to."""
    return jsonify({"user": g.current_user.to_dict()})


@users_bp.post("/user/logout")
@optional_auth
def logout_route():
    """
    Clear the token cookie.

    The account token itself is long-lived and is not rotated here.
    """
    if g.current_user.valid:
        current_app.logger.info("User %s logged out", g.current_user.id)
    response = jsonify({"success": True})
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return response


@users_bp.get("/users")
@require_auth
@require_admin
def list_users_route():
    users = get_services().users.list_users()
    return jsonify([user.to_dict() for user in users])


@users_bp.post("/user/add")
@require_auth
@require_admin
def add_user_route():
    """
    Create a user.

    Request body:
    - username: str (required)
    - email: str (required)
    - password: str (required)
    - is_admin: bool (optional, default false)
    """
    data = json_body()
    identity = get_services().users.add_user(
        username=data.get("username"),
        email=data.get("email"),
        password=data.get("password"),
        is_admin=_truthy(data.get("is_admin", False)),
        actor=g.current_user,
    )
    return jsonify({"user": identity.to_dict()}), 201


@users_bp.delete("/user/delete")
@require_auth
@require_admin
def delete_user_route():
    """
    Deactivate a user by username.

    Query params:
    - u: str (required) - username to delete
    """
    username = required_arg("u")
    users = get_services().users

    target = users.check_by_username(username, g.current_user.id)
    if not target.valid:
        raise UserNotFoundError()

    users.delete_user(target.id, g.current_user.id)
    return jsonify({"success": True})


@users_bp.get("/user/resetPassword")
def reset_password_route():
    """
    Email a new password to the user if the email matches the one on file.

    Query params:
    - username: str (required)
    - email: str (required)
    """
    username = required_arg("username")
    email = required_arg("email")
    get_services().users.reset_password(username, email)
    return jsonify({"success": True})
