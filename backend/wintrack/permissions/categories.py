# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    UNCLAIMED = "UNCLAIMED"
    USERS = "USERS"
    REPORTS = "REPORTS"
    DEPOSITS = "DEPOSITS"
    AREAS = "AREAS"
