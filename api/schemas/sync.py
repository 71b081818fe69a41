# api/schemas/sync.py
from datetime import datetime
from typing import List, Optional

from .base import CamelModel


class SyncTokenResponse(CamelModel):
    success: bool = True
    token: str
    audible_url: str
    expires_at: datetime
    has_synced_before: bool
    last_synced_at: Optional[datetime] = None


class SyncImportResponse(CamelModel):
    success: bool = True
    imported: int
    new_to_catalog: int
    library_count: int
    wishlist_count: int
    warnings: List[str] = []


class SyncHistoryEntry(CamelModel):
    id: str
    titles_imported: int
    new_to_catalog: int
    library_count: int
    wishlist_count: int
    warnings: List[str] = []
    success: bool
    synced_at: datetime


class SyncHistoryResponse(CamelModel):
    history: List[SyncHistoryEntry]
