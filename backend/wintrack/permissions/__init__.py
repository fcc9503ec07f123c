# Overview: Permission system package.
# Re-exports all public APIs for the routes and services.

from .categories import PermissionCategory
from .definitions import (
    Permission,
    PERMISSION_DEFINITIONS,
    UNCLAIMED_PERMISSIONS,
    USER_PERMISSIONS,
    REPORT_PERMISSIONS,
    DEPOSIT_PERMISSIONS,
    AREA_PERMISSIONS,
)
from .roles import Role, ROLE_PERMISSIONS, COLLECTED_STATUS, COLLECTED_STATUS_BY_ROLE
from .helpers import (
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    validate_permission_code,
)

__all__ = [
    "PermissionCategory",
    "Permission",
    "PERMISSION_DEFINITIONS",
    "UNCLAIMED_PERMISSIONS",
    "USER_PERMISSIONS",
    "REPORT_PERMISSIONS",
    "DEPOSIT_PERMISSIONS",
    "AREA_PERMISSIONS",
    "Role",
    "ROLE_PERMISSIONS",
    "COLLECTED_STATUS",
    "COLLECTED_STATUS_BY_ROLE",
    "get_all_permission_codes",
    "get_permissions_by_category",
    "get_permission_definition",
    "validate_permission_code",
]
