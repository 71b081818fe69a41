# core/sa/repositories/user.py
from typing import List, Optional, Tuple
from datetime import datetime, UTC
from sqlalchemy import func, desc, asc, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from core.sa.models import User, LibraryEntry, SyncHistory

SORTABLE_COLUMNS = {
    "email": User.email,
    "name": User.name,
    "createdAt": User.created_at,
}

class UserRepository:
    """Repository for managing User entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID.

        Args:
            user_id: The ID of the user

        Returns:
            The User object if found, None otherwise
        """
        return self.session.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(func.lower(User.email) == email.lower()).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).first()

    def create_user(self, email: str, name: Optional[str] = None, image: Optional[str] = None,
                    is_admin: bool = False) -> User:
        """Create a new user.

        Args:
            email: The user's email address
            name: Display name from the identity provider
            image: Avatar URL from the identity provider
            is_admin: Whether the user starts with admin rights

        Returns:
            The created User object

        Raises:
            ValueError: If a user with the given email already exists
        """
        if self.get_by_email(email):
            raise ValueError(f"User with email '{email}' already exists")

        user = User(email=email, name=name, image=image, is_admin=is_admin)
        self.session.add(user)
        try:
            self.session.commit()
            return user
        except IntegrityError:
            self.session.rollback()
            raise ValueError(f"User with email '{email}' already exists")

    def upsert_oauth_user(self, email: str, name: Optional[str], image: Optional[str],
                          promote_admin: bool = False) -> Tuple[User, bool]:
        """Find the user for a sign-in, creating it on first sign-in.

        Profile fields are refreshed from the identity provider. The admin flag is
        only ever raised here, never cleared.

        Args:
            email: Verified email from the identity provider
            name: Display name
            image: Avatar URL
            promote_admin: Grant admin rights (configured admin email)

        Returns:
            Tuple of (user, created)
        """
        user = self.get_by_email(email)
        if user is None:
            return self.create_user(email, name=name, image=image, is_admin=promote_admin), True

        user.name = name or user.name
        user.image = image or user.image
        if promote_admin:
            user.is_admin = True
        self.session.commit()
        return user, False

    def set_username(self, user_id: str, username: str) -> Optional[User]:
        """Claim a public username for a user.

        Args:
            user_id: The ID of the user
            username: An already validated username

        Returns:
            The updated User object, or None if the user does not exist

        Raises:
            ValueError: If another user already owns the username
        """
        user = self.get_by_id(user_id)
        if not user:
            return None

        owner = self.get_by_username(username)
        if owner and owner.id != user_id:
            raise ValueError(f"Username '{username}' is already taken")

        user.username = username
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ValueError(f"Username '{username}' is already taken")
        return user

    def set_admin(self, email: str, is_admin: bool) -> Optional[User]:
        user = self.get_by_email(email)
        if not user:
            return None
        user.is_admin = is_admin
        self.session.commit()
        return user

    def count_users(self, query: Optional[str] = None) -> int:
        q = self.session.query(func.count(User.id))
        if query:
            q = q.filter(or_(User.email.ilike(f"%{query}%"), User.name.ilike(f"%{query}%")))
        return q.scalar()

    def list_all(self) -> List[User]:
        return self.session.query(User).order_by(User.created_at).all()

    def search_users(
        self,
        query: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> List[Tuple[User, int, Optional[datetime]]]:
        """Search users for the admin console.

        Args:
            query: Optional substring matched against email and name
            limit: Maximum number of results to return
            offset: Number of results to skip
            sort_by: One of email, name, createdAt
            sort_order: asc or desc

        Returns:
            List of (user, library entry count, last sync time) tuples
        """
        library_counts = (
            self.session.query(
                LibraryEntry.user_id.label("user_id"),
                func.count(LibraryEntry.id).label("library_count"),
            )
            .group_by(LibraryEntry.user_id)
            .subquery()
        )
        last_syncs = (
            self.session.query(
                SyncHistory.user_id.label("user_id"),
                func.max(SyncHistory.synced_at).label("last_import_at"),
            )
            .group_by(SyncHistory.user_id)
            .subquery()
        )

        q = (
            self.session.query(
                User,
                func.coalesce(library_counts.c.library_count, 0),
                last_syncs.c.last_import_at,
            )
            .outerjoin(library_counts, library_counts.c.user_id == User.id)
            .outerjoin(last_syncs, last_syncs.c.user_id == User.id)
        )
        if query:
            q = q.filter(or_(User.email.ilike(f"%{query}%"), User.name.ilike(f"%{query}%")))

        column = SORTABLE_COLUMNS.get(sort_by, User.created_at)
        direction = asc if sort_order == "asc" else desc
        q = q.order_by(direction(column), User.id)

        rows = q.offset(offset).limit(limit).all()
        return [(user, count, _as_utc(last)) for user, count, last in rows]


def _as_utc(value):
    # SQLite may hand back naive values or strings from aggregates
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value
