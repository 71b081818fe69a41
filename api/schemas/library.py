# api/schemas/library.py
from datetime import datetime
from typing import List, Optional

from .base import CamelModel, Pagination


class TitleSummary(CamelModel):
    asin: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    authors: List[str] = []
    narrators: List[str] = []
    image: Optional[str] = None
    runtime_length_min: Optional[int] = None


class LibraryEntry(CamelModel):
    id: str
    title_asin: str
    status: str
    progress: int
    user_rating: int
    source: str
    created_at: datetime
    updated_at: datetime
    title: Optional[TitleSummary] = None


class LibraryPage(CamelModel):
    items: List[LibraryEntry]
    pagination: Pagination


class LibraryStats(CamelModel):
    total: int
    library: int
    wishlist: int
    total_duration: int = 0
    last_sync: Optional[datetime] = None
