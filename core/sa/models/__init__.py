# core/sa/models/__init__.py
from .base import Base, TimestampMixin, SafeDateTime
from .user import User, SyncToken, SyncHistory
from .library import LibraryEntry, LibrarySource
from .list import List, ListItem, ListType, ImageStatus

__all__ = [
    'Base',
    'TimestampMixin',
    'SafeDateTime',
    'User',
    'SyncToken',
    'SyncHistory',
    'LibraryEntry',
    'LibrarySource',
    'List',
    'ListItem',
    'ListType',
    'ImageStatus',
]
