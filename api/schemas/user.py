# api/schemas/user.py
from datetime import datetime
from typing import Any, Optional

from .base import CamelModel


class User(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    username: Optional[str] = None
    is_admin: bool = False


class SessionResponse(CamelModel):
    user: Optional[User] = None


class PublicUser(CamelModel):
    username: str
    name: Optional[str] = None
    image: Optional[str] = None


class UsernameUpdate(CamelModel):
    # Left untyped so the username validator reports shape errors itself
    username: Any = None


class UsernameResponse(CamelModel):
    username: str


class AdminUser(User):
    created_at: datetime
    library_count: int = 0
    last_import_at: Optional[datetime] = None
