# core/sa/__init__.py
from .database import Database
from .models import (
    Base, User, SyncToken, SyncHistory,
    LibraryEntry, List, ListItem
)

__all__ = [
    'Database',
    'Base',
    'User',
    'SyncToken',
    'SyncHistory',
    'LibraryEntry',
    'List',
    'ListItem',
]
