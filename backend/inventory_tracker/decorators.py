# Overview: Access policies for API routes built on the authentication gate.

from functools import wraps
from flask import request, g, current_app

from .errors import UnauthorizedError, error_response
from .services import get_services


TOKEN_COOKIE_NAME = "token"


def request_token() -> str:
    """
    Token for the current request.

    Read from "Authorization: Bearer <token>", falling back to the cookie
    set by login.
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(TOKEN_COOKIE_NAME, "")


def _resolve_current_user():
    g.current_user = get_services().auth.resolve(request_token())
    return g.current_user


def require_auth(f):
    """
    Required policy: reject with 401 unless the token resolves to an active user.

    Sets g.current_user to the resolved Identity.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = _resolve_current_user()
        if not identity.valid:
            current_app.logger.info("Rejected unauthenticated request to %s", request.path)
            return error_response(UnauthorizedError())
        return f(*args, **kwargs)

    return decorated_function


def optional_auth(f):
    """Optional policy: resolve the token and always continue; the route decides."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _resolve_current_user()
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated user to be an admin. Must follow @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = getattr(g, "current_user", None)
        if identity is None or not identity.valid:
            return error_response(UnauthorizedError())
        if not identity.is_admin:
            current_app.logger.info("Rejected non-admin user %s on %s", identity.id, request.path)
            return error_response(UnauthorizedError("you are not authorized to perform this action"))
        return f(*args, **kwargs)

    return decorated_function
