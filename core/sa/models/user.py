# core/sa/models/user.py
from datetime import datetime
from sqlalchemy import String, Boolean, ForeignKey, Integer, JSON, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, SafeDateTime, new_id, utcnow

class User(Base, TimestampMixin):
    __tablename__ = 'user'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    username: Mapped[str | None] = mapped_column(String(30), nullable=True, unique=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    library_entries = relationship('LibraryEntry', back_populates='user', cascade='all, delete-orphan')
    lists = relationship('List', back_populates='user', cascade='all, delete-orphan')
    sync_tokens = relationship('SyncToken', back_populates='user', cascade='all, delete-orphan')
    sync_history = relationship('SyncHistory', back_populates='user', cascade='all, delete-orphan',
                                order_by='desc(SyncHistory.synced_at)')

class SyncToken(Base):
    """Single-use credential the browser extension redeems for one import."""
    __tablename__ = 'sync_token'

    jti: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)

    user = relationship('User', back_populates='sync_tokens')

    __table_args__ = (
        Index('idx_sync_token_user_id', 'user_id'),
    )

class SyncHistory(Base):
    """Append-only record of each completed sync."""
    __tablename__ = 'sync_history'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    titles_imported: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_to_catalog: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    library_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wishlist_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    warnings: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    synced_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)

    user = relationship('User', back_populates='sync_history')

    __table_args__ = (
        Index('idx_sync_history_user_synced', 'user_id', 'synced_at'),
    )
