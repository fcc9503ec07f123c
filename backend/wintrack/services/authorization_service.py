# Overview: Role-based authorization checks over the static role -> permission table.

"""
Authorization engine.

Answers whether a user may perform an action, and for record-level actions
whether they may perform it on a specific record. Total functions: absent
users, missing or unknown roles simply resolve to no permissions.

Users and records may be ORM objects or plain mappings (e.g. a decoded JSON
payload), so the same checks serve routes and services.
"""

from __future__ import annotations

from ..permissions import (
    Permission,
    Role,
    ROLE_PERMISSIONS,
    COLLECTED_STATUS,
    COLLECTED_STATUS_BY_ROLE,
)


def field_of(obj, name: str):
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def resolve_role(user) -> Role | None:
    """Role of the user, or None if absent or not a known role."""
    return Role.parse(field_of(user, "role"))


def get_role_permissions(role) -> frozenset[str]:
    """Permission set for a role; unknown roles get an empty set."""
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(parsed, frozenset())


def get_user_permissions(user) -> frozenset[str]:
    if not user or not field_of(user, "role"):
        return frozenset()
    return get_role_permissions(field_of(user, "role"))


def has_permission(user, permission: str) -> bool:
    """True if the user's role grants `permission`."""
    return permission in get_user_permissions(user)


def can_perform_action(user, permission: str, item=None) -> bool:
    """
    Permission check with record ownership.

    Collectors may only update records already attributed to them
    (item.collector == user.fullname, exact match). Every other
    role/permission combination is not ownership-checked.
    """
    if not has_permission(user, permission):
        return False

    if (
        item is not None
        and resolve_role(user) is Role.COLLECTOR
        and permission == Permission.UPDATE_UNCLAIMED
    ):
        return field_of(item, "collector") == field_of(user, "fullname")

    return True


def is_scoped_to_own_records(user) -> bool:
    """Collectors only ever see records attributed to themselves."""
    return resolve_role(user) is Role.COLLECTOR


def collected_status_for(user) -> str:
    """Terminal status written when `user` marks a record collected."""
    role = resolve_role(user)
    return COLLECTED_STATUS_BY_ROLE.get(role, COLLECTED_STATUS)
