# core/sa/models/base.py
import uuid
from datetime import datetime, UTC
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy.types import DateTime, TypeDecorator


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return uuid.uuid4().hex


class SafeDateTime(TypeDecorator):
    """DateTime that treats empty strings as None and always hands back aware UTC values.

    SQLite drops tzinfo on the way in, so naive values read back are assumed to be UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value == '':
            return None
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone(UTC)
        return value

    def process_result_value(self, value, dialect):
        if value == '':
            return None
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Base(DeclarativeBase):
    """Base class for all models"""
    pass


class TimestampMixin:
    """Mixin to add created_at and updated_at columns"""
    created_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow, onupdate=utcnow)
