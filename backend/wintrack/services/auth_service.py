# Overview: Service-layer operations for users and authentication.

"""
User accounts and password authentication.

Passwords are hashed with bcrypt (cost factor 12) and must meet the strength
rules below. Roles must be one of the Role enumeration values; statuses one of
active / inactive / suspended. Only active users can log in.
"""

import re

import bcrypt

from ..extensions import db
from ..models import User, USER_STATUSES
from ..permissions import Role
from wintrack.time_utils import utcnow


USER_FIELDS = ("username", "fullname", "role", "status", "area", "franchise_name", "assigned_collectors")


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _normalize_role(role) -> str:
    parsed = Role.parse(role)
    if parsed is None:
        allowed = ", ".join(r.value for r in Role)
        raise ValueError(f"Unknown role {role!r}; expected one of: {allowed}")
    return parsed.value


def _normalize_status(status) -> str:
    if status not in USER_STATUSES:
        raise ValueError(f"Unknown status {status!r}; expected one of: {', '.join(USER_STATUSES)}")
    return status


def create_user(
    username: str,
    password: str,
    fullname: str,
    role: str = "staff",
    status: str = "active",
    area: str | None = None,
    franchise_name: str | None = None,
    assigned_collectors: list[str] | None = None,
) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises:
        ValueError: duplicate username, unknown role or status
        PasswordValidationError: weak password
    """
    if not username or not fullname:
        raise ValueError("username and fullname are required")

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ValueError("Username already exists")

    user = User(
        username=username,
        fullname=fullname,
        password_hash=hash_password(password),
        role=_normalize_role(role),
        status=_normalize_status(status),
        area=area,
        franchise_name=franchise_name,
        assigned_collectors=assigned_collectors,
    )

    db.session.add(user)
    db.session.commit()
    return user


def update_user(user: User, updates: dict) -> User:
    """Apply a partial update; `password` is re-hashed when present."""
    for key, value in updates.items():
        if key == "password":
            if value:
                user.password_hash = hash_password(value)
            continue
        if key not in USER_FIELDS:
            continue
        if key == "role":
            value = _normalize_role(value)
        elif key == "status":
            value = _normalize_status(value)
        elif key == "username" and value != user.username:
            clash = db.session.query(User).filter_by(username=value).first()
            if clash:
                raise ValueError("Username already exists")
        setattr(user, key, value)

    db.session.commit()
    return user


def toggle_status(user: User) -> User:
    """active <-> inactive. Suspended users are reactivated."""
    user.status = "inactive" if user.status == "active" else "active"
    db.session.commit()
    return user


def delete_user(user: User) -> None:
    db.session.delete(user)
    db.session.commit()


def list_users(filters: dict | None = None) -> list[User]:
    filters = filters or {}
    query = db.session.query(User)
    if filters.get("role"):
        query = query.filter(User.role == filters["role"])
    if filters.get("status"):
        query = query.filter(User.status == filters["status"])
    return query.order_by(User.id.asc()).all()


def authenticate(username: str, password: str) -> User | None:
    """
    Authenticate an active user by username and password.

    Updates last_login_at on success.
    """
    user = db.session.query(User).filter(
        User.username == username,
        User.status == "active",
    ).first()

    if not user:
        return None

    if verify_password(password, user.password_hash):
        user.last_login_at = utcnow()
        db.session.commit()
        return user

    return None
