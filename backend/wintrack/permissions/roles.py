# Overview: Closed role enumeration and the static role -> permission table.

from enum import Enum

from .definitions import Permission


class Role(str, Enum):
    ADMIN = "admin"
    SPECIALIST = "specialist"
    COLLECTOR = "collector"
    CHECKER = "checker"
    STAFF = "staff"
    GENERAL_MANAGER = "general manager"
    CASHIER = "cashier"

    @classmethod
    def parse(cls, value) -> "Role | None":
        """Case-insensitive lookup; None for anything that is not a known role."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


# Single source of truth for what each role may do.
ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.ADMIN: frozenset({
        Permission.CREATE_UNCLAIMED,
        Permission.UPDATE_UNCLAIMED,
        Permission.DELETE_UNCLAIMED,
        Permission.MARK_AS_COLLECTED,
        Permission.VIEW_UNCLAIMED,
        Permission.CREATE_USER,
        Permission.UPDATE_USER,
        Permission.DELETE_USER,
        Permission.VIEW_USERS,
        Permission.VIEW_REPORTS,
        Permission.EXPORT_REPORTS,
        Permission.VERIFY_DEPOSIT,
        Permission.MANAGE_AREAS,
    }),
    Role.SPECIALIST: frozenset({
        Permission.CREATE_UNCLAIMED,
        Permission.UPDATE_UNCLAIMED,
        Permission.DELETE_UNCLAIMED,
        Permission.MARK_AS_COLLECTED,
        Permission.VIEW_UNCLAIMED,
        Permission.VIEW_REPORTS,
        Permission.EXPORT_REPORTS,
        Permission.VERIFY_DEPOSIT,
    }),
    Role.COLLECTOR: frozenset({
        Permission.CREATE_UNCLAIMED,
        Permission.UPDATE_UNCLAIMED,
        Permission.VIEW_UNCLAIMED,
        Permission.MARK_AS_COLLECTED,
    }),
    Role.CHECKER: frozenset({
        Permission.CREATE_UNCLAIMED,
        Permission.VIEW_UNCLAIMED,
    }),
    Role.STAFF: frozenset({
        Permission.VIEW_UNCLAIMED,
        Permission.VIEW_REPORTS,
    }),
    Role.GENERAL_MANAGER: frozenset({
        Permission.VIEW_UNCLAIMED,
        Permission.VIEW_USERS,
        Permission.VIEW_REPORTS,
        Permission.EXPORT_REPORTS,
    }),
    Role.CASHIER: frozenset({
        Permission.CREATE_UNCLAIMED,
        Permission.VIEW_UNCLAIMED,
        Permission.MARK_AS_COLLECTED,
    }),
}


# Status written when a role marks a record collected. Cashiers hand the cash
# over for deposit verification instead of closing the record.
COLLECTED_STATUS = "Collected"
COLLECTED_STATUS_BY_ROLE: dict[Role, str] = {
    Role.CASHIER: "Uncollected",
}
