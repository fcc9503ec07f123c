# Overview: Permission enforcement with security event logging.

"""
Permission enforcement.

Decisions come from authorization_service (static role table); this module
raises on denial and records the denial in the security_events audit trail.

DESIGN PRINCIPLES:
- Fail closed: unknown roles have no permissions
- Log denials only: permission grants are not logged
"""

from ..extensions import db
from ..models import SecurityEvent
from .authorization_service import can_perform_action, field_of, has_permission
from wintrack.time_utils import utcnow


class PermissionDeniedError(Exception):
    """Raised when user lacks required permission."""
    pass


def log_security_event(
    user_id: int | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> SecurityEvent:
    """
    Append a security event to the audit trail.

    event_type examples:
    - PERMISSION_DENIED
    - LOGIN_FAILED
    - LOGOUT
    - USER_CREATED
    - USER_DELETED
    """
    event = SecurityEvent(
        user_id=user_id,
        event_type=event_type,
        resource=resource,
        action=action,
        success=success,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
        occurred_at=utcnow()
    )

    db.session.add(event)
    db.session.commit()

    return event


def require_permission(
    user,
    permission_code: str,
    item=None,
    resource: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """
    Require user to be allowed `permission_code` (on `item` when given).

    Raises PermissionDeniedError and logs the denial otherwise.

    Usage:
        require_permission(g.current_user, Permission.UPDATE_UNCLAIMED, item=record)
    """
    if can_perform_action(user, permission_code, item):
        return

    if has_permission(user, permission_code):
        reason = f"Not the assigned collector for {permission_code}"
    else:
        reason = f"Missing permission: {permission_code}"

    log_security_event(
        user_id=field_of(user, "id"),
        event_type="PERMISSION_DENIED",
        success=False,
        resource=resource,
        action=permission_code,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    raise PermissionDeniedError(f"Permission denied: {permission_code}")
