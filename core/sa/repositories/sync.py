# core/sa/repositories/sync.py

from typing import List, Optional
from datetime import datetime
from sqlalchemy import desc, func
from sqlalchemy.orm import Session
from core.sa.models import SyncToken, SyncHistory

class SyncRepository:
    """Repository for sync tokens and sync history."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create_token(self, jti: str, user_id: str, expires_at: datetime) -> SyncToken:
        """Record an issued sync token.

        Args:
            jti: Unique token id embedded in the signed token
            user_id: The user the token was issued to
            expires_at: Expiry matching the signed token's exp claim

        Returns:
            The created SyncToken object
        """
        token = SyncToken(jti=jti, user_id=user_id, expires_at=expires_at, used=False)
        self.session.add(token)
        self.session.commit()
        return token

    def get_token(self, jti: str) -> Optional[SyncToken]:
        return self.session.query(SyncToken).filter(SyncToken.jti == jti).first()

    def mark_used(self, jti: str) -> bool:
        """Mark a token as redeemed.

        The update only matches unused tokens so two concurrent redemptions
        cannot both succeed.

        Args:
            jti: The token id

        Returns:
            True if this call redeemed the token, False if it was missing or already used
        """
        updated = (
            self.session.query(SyncToken)
            .filter(SyncToken.jti == jti, SyncToken.used.is_(False))
            .update({SyncToken.used: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated == 1

    def record_history(
        self,
        user_id: str,
        titles_imported: int,
        new_to_catalog: int,
        library_count: int,
        wishlist_count: int,
        warnings: Optional[List[str]] = None,
        success: bool = True,
    ) -> SyncHistory:
        entry = SyncHistory(
            user_id=user_id,
            titles_imported=titles_imported,
            new_to_catalog=new_to_catalog,
            library_count=library_count,
            wishlist_count=wishlist_count,
            warnings=list(warnings or []),
            success=success,
        )
        self.session.add(entry)
        self.session.commit()
        return entry

    def get_history(self, user_id: str, limit: int = 5) -> List[SyncHistory]:
        """Get a user's most recent syncs, newest first.

        Args:
            user_id: The ID of the user
            limit: Maximum number of entries to return (default: 5)

        Returns:
            List of SyncHistory objects
        """
        return (
            self.session.query(SyncHistory)
            .filter(SyncHistory.user_id == user_id)
            .order_by(desc(SyncHistory.synced_at), desc(SyncHistory.id))
            .limit(limit)
            .all()
        )

    def get_last_sync(self, user_id: str) -> Optional[SyncHistory]:
        history = self.get_history(user_id, limit=1)
        return history[0] if history else None

    def has_synced(self, user_id: str) -> bool:
        count = (
            self.session.query(func.count(SyncHistory.id))
            .filter(SyncHistory.user_id == user_id)
            .scalar()
        )
        return count > 0
