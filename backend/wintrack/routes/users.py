# Overview: Flask API routes for user administration; parses input and returns JSON responses.

"""
User management.

- list / view users (VIEW_USERS)
- create (CREATE_USER), edit and toggle status (UPDATE_USER), delete (DELETE_USER)
- permission catalogue and role table (VIEW_USERS)
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..models import User
from ..permissions import (
    Permission,
    PermissionCategory,
    PERMISSION_DEFINITIONS,
    ROLE_PERMISSIONS,
    get_permission_definition,
    get_permissions_by_category,
)
from ..services import auth_service, permission_service
from ..services.auth_service import PasswordValidationError
from ..decorators import require_auth, require_permission

users_bp = Blueprint("users", __name__, url_prefix="/api")


def _log(event_type: str, target: User, reason: str | None = None) -> None:
    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type=event_type,
        success=True,
        resource=request.path,
        action=f"user:{target.id}",
        reason=reason,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )


@users_bp.get("/users")
@require_auth
@require_permission(Permission.VIEW_USERS)
def list_users():
    """Query params: role, status."""
    users = auth_service.list_users({
        "role": request.args.get("role"),
        "status": request.args.get("status"),
    })
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@users_bp.get("/users/<int:user_id>")
@require_auth
@require_permission(Permission.VIEW_USERS)
def get_user(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404
    return jsonify({"user": user.to_dict()})


@users_bp.post("/users")
@require_auth
@require_permission(Permission.CREATE_USER)
def create_user():
    """
    Request body:
    - username, password, fullname: str (required)
    - role: str (default "staff"), status: str (default "active")
    - area, franchise_name: str (optional)
    - assigned_collectors: list[str] (optional, cashiers)
    """
    data = request.get_json(silent=True) or {}
    if not all([data.get("username"), data.get("password"), data.get("fullname")]):
        return jsonify({"error": "username, password, and fullname required"}), 400

    try:
        user = auth_service.create_user(
            username=data["username"],
            password=data["password"],
            fullname=data["fullname"],
            role=data.get("role") or "staff",
            status=data.get("status") or "active",
            area=data.get("area"),
            franchise_name=data.get("franchise_name"),
            assigned_collectors=data.get("assigned_collectors"),
        )
    except (ValueError, PasswordValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500

    _log("USER_CREATED", user, reason=f"role={user.role}")
    return jsonify({"user": user.to_dict()}), 201


@users_bp.patch("/users/<int:user_id>")
@require_auth
@require_permission(Permission.UPDATE_USER)
def update_user(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404

    data = request.get_json(silent=True) or {}
    try:
        auth_service.update_user(user, data)
    except (ValueError, PasswordValidationError) as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400

    _log("USER_UPDATED", user)
    return jsonify({"user": user.to_dict()})


@users_bp.post("/users/<int:user_id>/toggle-status")
@require_auth
@require_permission(Permission.UPDATE_USER)
def toggle_user_status(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404
    if user.id == g.current_user.id:
        return jsonify({"error": "Cannot change your own status"}), 400

    auth_service.toggle_status(user)
    _log("USER_STATUS_CHANGED", user, reason=f"status={user.status}")
    return jsonify({"user": user.to_dict()})


@users_bp.delete("/users/<int:user_id>")
@require_auth
@require_permission(Permission.DELETE_USER)
def delete_user(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404
    if user.id == g.current_user.id:
        return jsonify({"error": "Cannot delete your own account"}), 400

    _log("USER_DELETED", user, reason=f"username={user.username}")
    auth_service.delete_user(user)
    return jsonify({"success": True})


@users_bp.get("/permissions")
@require_auth
@require_permission(Permission.VIEW_USERS)
def list_permissions():
    """Permission catalogue and the role -> permission table."""
    return jsonify({
        "permissions": [get_permission_definition(perm[0]) for perm in PERMISSION_DEFINITIONS],
        "categories": {
            category: [perm[0] for perm in get_permissions_by_category(category)]
            for category in (
                PermissionCategory.UNCLAIMED,
                PermissionCategory.USERS,
                PermissionCategory.REPORTS,
                PermissionCategory.DEPOSITS,
                PermissionCategory.AREAS,
            )
        },
        "roles": {
            role.value: sorted(codes) for role, codes in ROLE_PERMISSIONS.items()
        },
    })
