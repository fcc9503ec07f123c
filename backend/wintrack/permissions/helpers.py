# Overview: Lookups over the permission catalogue.

from .definitions import PERMISSION_DEFINITIONS


_BY_CODE = {perm[0]: perm for perm in PERMISSION_DEFINITIONS}


def get_all_permission_codes() -> list[str]:
    """Every permission code, in catalogue order."""
    return list(_BY_CODE)


def get_permissions_by_category(category) -> list[tuple]:
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code) -> dict | None:
    perm = _BY_CODE.get(code)
    if perm is None:
        return None
    code, name, description, category = perm
    return {"code": code, "name": name, "description": description, "category": category}


def validate_permission_code(code) -> bool:
    return code in _BY_CODE
