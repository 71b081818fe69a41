# core/sa/models/library.py
from enum import Enum
from sqlalchemy import Integer, String, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id

class LibrarySource(str, Enum):
    LIBRARY = "LIBRARY"    # Owned titles
    WISHLIST = "WISHLIST"  # Titles on the Audible wishlist

class LibraryEntry(Base, TimestampMixin):
    """A user's reference to one title ASIN. Title metadata lives upstream."""
    __tablename__ = 'library_entry'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    title_asin: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Not Started")
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default=LibrarySource.LIBRARY.value)

    # Relationships
    user = relationship('User', back_populates='library_entries')

    __table_args__ = (
        UniqueConstraint('user_id', 'title_asin', name='uix_library_entry_user_asin'),
        Index('idx_library_entry_title_asin', 'title_asin'),
        Index('idx_library_entry_user_source', 'user_id', 'source'),
    )
