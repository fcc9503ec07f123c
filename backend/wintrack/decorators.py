# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .permissions import validate_permission_code
from .services import session_service, permission_service
from .services.permission_service import PermissionDeniedError


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user')


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1]


def require_auth(f):
    """
    Require a valid bearer token.

    Sets g.current_user to the authenticated User. Returns 401 when the
    header is missing, the token is invalid/expired, or the user is no
    longer active.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        user = session_service.validate_session(token)
        if not user:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """
    Require a role permission (no record ownership check).

    Record-level checks happen in the route once the record is loaded.
    """
    if not validate_permission_code(permission_code):
        raise ValueError(f"Unknown permission code: {permission_code}")

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            try:
                permission_service.require_permission(
                    g.current_user,
                    permission_code,
                    resource=request.path,
                    ip_address=request.remote_addr,
                    user_agent=request.headers.get("User-Agent"),
                )
            except PermissionDeniedError as e:
                return permission_denied_response(permission_code, e)

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def permission_denied_response(permission_code: str, exc: PermissionDeniedError):
    return jsonify({
        "error": "Permission denied",
        "required_permission": permission_code,
        "message": str(exc),
    }), 403
