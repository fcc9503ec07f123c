# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


class Permission:
    """Permission codes checked by routes and services."""
    VIEW_UNCLAIMED = "VIEW_UNCLAIMED"
    CREATE_UNCLAIMED = "CREATE_UNCLAIMED"
    UPDATE_UNCLAIMED = "UPDATE_UNCLAIMED"
    DELETE_UNCLAIMED = "DELETE_UNCLAIMED"
    MARK_AS_COLLECTED = "MARK_AS_COLLECTED"

    VIEW_USERS = "VIEW_USERS"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"

    VIEW_REPORTS = "VIEW_REPORTS"
    EXPORT_REPORTS = "EXPORT_REPORTS"

    VERIFY_DEPOSIT = "VERIFY_DEPOSIT"
    MANAGE_AREAS = "MANAGE_AREAS"


# -- UNCLAIMED --

UNCLAIMED_PERMISSIONS = [
    (
        Permission.VIEW_UNCLAIMED,
        "View Unclaimed",
        "View unclaimed and pending winnings",
        PermissionCategory.UNCLAIMED,
    ),
    (
        Permission.CREATE_UNCLAIMED,
        "Create Unclaimed",
        "Record a new unclaimed win",
        PermissionCategory.UNCLAIMED,
    ),
    (
        Permission.UPDATE_UNCLAIMED,
        "Update Unclaimed",
        "Edit an unclaimed record (collectors: own records only)",
        PermissionCategory.UNCLAIMED,
    ),
    (
        Permission.DELETE_UNCLAIMED,
        "Delete Unclaimed",
        "Delete an unclaimed record and its collection/report rows",
        PermissionCategory.UNCLAIMED,
    ),
    (
        Permission.MARK_AS_COLLECTED,
        "Mark As Collected",
        "Mark an unclaimed win as returned by the agent",
        PermissionCategory.UNCLAIMED,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        Permission.VIEW_USERS,
        "View Users",
        "View user accounts",
        PermissionCategory.USERS,
    ),
    (
        Permission.CREATE_USER,
        "Create User",
        "Create user accounts",
        PermissionCategory.USERS,
    ),
    (
        Permission.UPDATE_USER,
        "Update User",
        "Edit user accounts and toggle their status",
        PermissionCategory.USERS,
    ),
    (
        Permission.DELETE_USER,
        "Delete User",
        "Delete user accounts",
        PermissionCategory.USERS,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        Permission.VIEW_REPORTS,
        "View Reports",
        "View collections and distribution reports",
        PermissionCategory.REPORTS,
    ),
    (
        Permission.EXPORT_REPORTS,
        "Export Reports",
        "Download distribution reports",
        PermissionCategory.REPORTS,
    ),
]


# -- DEPOSITS --

DEPOSIT_PERMISSIONS = [
    (
        Permission.VERIFY_DEPOSIT,
        "Verify Deposit",
        "Verify a cash deposit and close the record as Collected",
        PermissionCategory.DEPOSITS,
    ),
]


# -- AREAS --

AREA_PERMISSIONS = [
    (
        Permission.MANAGE_AREAS,
        "Manage Areas",
        "Create, edit and delete service areas",
        PermissionCategory.AREAS,
    ),
]


PERMISSION_DEFINITIONS = (
    UNCLAIMED_PERMISSIONS
    + USER_PERMISSIONS
    + REPORT_PERMISSIONS
    + DEPOSIT_PERMISSIONS
    + AREA_PERMISSIONS
)
