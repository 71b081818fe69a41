# api/schemas/admin.py
from typing import Dict, List, Optional

from .base import CamelModel, Pagination
from .library import LibraryEntry, TitleSummary
from .user import AdminUser


class AdminUsersResponse(CamelModel):
    users: List[AdminUser]
    pagination: Pagination


class LibrarySummary(CamelModel):
    total: int
    by_source: Dict[str, int]
    by_status: Dict[str, int]


class AdminUserDetail(CamelModel):
    user: AdminUser
    library: List[LibraryEntry]
    summary: LibrarySummary


class AdminTitle(CamelModel):
    asin: str
    user_count: int
    list_count: int
    title: Optional[TitleSummary] = None


class AdminTitlesResponse(CamelModel):
    titles: List[AdminTitle]
    pagination: Pagination


class TitleUsage(CamelModel):
    user_count: int
    library_entry_count: int
    list_count: int


class AdminTitleDetail(CamelModel):
    asin: str
    title: Optional[TitleSummary] = None
    usage: TitleUsage


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_count: int
