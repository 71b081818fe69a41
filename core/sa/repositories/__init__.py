# core/sa/repositories/__init__.py
from .user import UserRepository
from .library import LibraryRepository
from .list import ListRepository
from .sync import SyncRepository

__all__ = ['UserRepository', 'LibraryRepository', 'ListRepository', 'SyncRepository']
