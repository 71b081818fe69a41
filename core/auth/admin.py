# core/auth/admin.py
from core.sa.models import User


class AdminRequiredError(Exception):
    """Raised when an operation needs an admin user."""


def is_admin(user: User | None) -> bool:
    return user is not None and user.is_admin is True


def require_admin(user: User | None) -> User:
    if not is_admin(user):
        raise AdminRequiredError("Unauthorized: Admin access required")
    return user
