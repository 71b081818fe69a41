# core/sa/models/list.py
from datetime import datetime
from enum import Enum
from sqlalchemy import Integer, String, Text, ForeignKey, Index, UniqueConstraint, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, SafeDateTime, new_id

class ListType(str, Enum):
    RECOMMENDATION = "RECOMMENDATION"  # Ranked list
    TIER = "TIER"                      # Items grouped under tier labels

class ImageStatus(str, Enum):
    NONE = "NONE"
    GENERATING = "GENERATING"
    READY = "READY"
    FAILED = "FAILED"

class List(Base, TimestampMixin):
    __tablename__ = 'list'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=ListType.RECOMMENDATION.value)
    tiers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Share image state. Keys are only meaningful while image_status is READY.
    image_template_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    image_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_status: Mapped[str] = mapped_column(String(20), nullable=False, default=ImageStatus.NONE.value)
    image_og_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image_square_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image_generated_at: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    image_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user = relationship('User', back_populates='lists')
    items = relationship('ListItem', back_populates='list', cascade='all, delete-orphan',
                         order_by='ListItem.position')

    __table_args__ = (
        Index('idx_list_user_id', 'user_id'),
        Index('idx_list_updated_at', 'updated_at'),
    )

class ListItem(Base):
    __tablename__ = 'list_item'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    list_id: Mapped[str] = mapped_column(ForeignKey('list.id', ondelete='CASCADE'), nullable=False)
    title_asin: Mapped[str] = mapped_column(String(20), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tier: Mapped[str | None] = mapped_column(String(20), nullable=True)

    list = relationship('List', back_populates='items')

    __table_args__ = (
        UniqueConstraint('list_id', 'title_asin', name='uix_list_item_list_asin'),
        Index('idx_list_item_title_asin', 'title_asin'),
    )
