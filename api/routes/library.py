# api/routes/library.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.sa.models import User, LibrarySource
from core.sa.repositories import LibraryRepository, SyncRepository
from core.services import metadata
from api.dependencies import get_current_user
from api.routes.sync import read_import_titles, run_import
from api.schemas.base import Pagination
from api.schemas.library import LibraryEntry, LibraryPage, LibraryStats, TitleSummary
from api.schemas.sync import SyncImportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/library", tags=["library"])


@router.get("", response_model=LibraryPage)
def get_library(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(1000, ge=1, le=1000, description="Items per page"),
    source: Optional[LibrarySource] = Query(None, description="Filter by LIBRARY or WISHLIST"),
    search: Optional[str] = Query(None, description="Filter by ASIN substring"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get a page of the signed-in user's library, newest first.

    Args:
        page: Page number (1-based)
        limit: Number of entries per page
        source: Optional source filter
        search: Optional ASIN search
        user: Signed-in user
        db: Database session

    Returns:
        LibraryPage with entries enriched with title metadata
    """
    entries, total = LibraryRepository(db).get_user_entries(
        user.id,
        source=source.value if source else None,
        search=search,
        limit=limit,
        offset=(page - 1) * limit,
    )

    cards = metadata.title_cards([entry.title_asin for entry in entries])
    items = [
        LibraryEntry.model_validate(entry).model_copy(update={"title": TitleSummary.model_validate(card)})
        for entry, card in zip(entries, cards)
    ]
    return LibraryPage(items=items, pagination=Pagination.build(page, limit, total))


@router.get("/lookup", response_model=TitleSummary)
def lookup_title(
    asin: Optional[str] = Query(None, description="ASIN to look up"),
    user: User = Depends(get_current_user),
):
    """Resolve one title from the metadata API."""
    asin = (asin or "").strip()
    if not asin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ASIN is required")

    data = metadata.fetch_title_metadata(asin)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Title not found. Please check the ASIN and try again.",
        )
    return TitleSummary.model_validate({**metadata.summarize(data), "asin": data.get("asin") or asin})


@router.get("/stats", response_model=LibraryStats)
def get_library_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return entry counts per source, total listening minutes and the time of the last sync."""
    repo = LibraryRepository(db)
    stats = repo.get_stats(user.id)
    # Durations come from Audnexus; unknown titles count as zero minutes
    titles = metadata.fetch_title_metadata_batch(sorted(repo.get_user_asins(user.id)))
    total_duration = sum((t or {}).get("runtimeLengthMin") or 0 for t in titles)
    last_sync = SyncRepository(db).get_last_sync(user.id)
    return LibraryStats(
        **stats,
        total_duration=total_duration,
        last_sync=last_sync.synced_at if last_sync else None,
    )


@router.delete("/{entry_id}")
def delete_library_entry(entry_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Remove one entry from the signed-in user's library.

    Args:
        entry_id: ID of the library entry
        user: Signed-in user
        db: Database session

    Returns:
        {"success": true}

    Raises:
        HTTPException: 404 if the entry is missing, 403 if it belongs to someone else
    """
    repo = LibraryRepository(db)
    entry = repo.get_by_id(entry_id)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    if entry.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    repo.delete_entry(entry_id)
    logger.info(f"User {user.id} removed {entry.title_asin} from their library")
    return {"success": True}


@router.post("/upload", response_model=SyncImportResponse)
async def upload_library(request: Request, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Import a library export file uploaded from the browser, replacing the current library."""
    titles = await read_import_titles(request)
    result = run_import(db, user.id, titles)
    return SyncImportResponse(
        imported=result.imported,
        new_to_catalog=result.new_to_catalog,
        library_count=result.library_count,
        wishlist_count=result.wishlist_count,
        warnings=result.warnings,
    )
