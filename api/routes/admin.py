# api/routes/admin.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from core.images import render_template_preview, TemplateNotFoundError, UnsupportedSizeError
from core.sa.database import get_db
from core.sa.models import User, LibrarySource
from core.sa.repositories import LibraryRepository, SyncRepository, UserRepository
from core.services import metadata
from api.dependencies import get_admin_user
from api.schemas.admin import (
    AdminTitle,
    AdminTitleDetail,
    AdminTitlesResponse,
    AdminUserDetail,
    AdminUsersResponse,
    DeleteResponse,
    LibrarySummary,
    TitleUsage,
)
from api.schemas.base import Pagination
from api.schemas.library import LibraryEntry, TitleSummary
from api.schemas.user import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

DELETE_ALL_TITLES_CONFIRMATION = "DELETE_ALL_TITLES"


def _admin_user(user: User, library_count: int, last_import_at) -> AdminUser:
    return AdminUser.model_validate(user).model_copy(
        update={"library_count": library_count, "last_import_at": last_import_at}
    )


@router.get("/users", response_model=AdminUsersResponse)
def get_users(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Users per page"),
    search: Optional[str] = Query(None, description="Filter by email or name"),
    sort_by: str = Query("createdAt", alias="sortBy", description="email, name or createdAt"),
    sort_order: str = Query("desc", alias="sortOrder", description="asc or desc"),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """
    Get a paginated list of users with library counts and last import time.

    Args:
        page: Page number (1-based)
        limit: Number of users per page
        search: Optional substring matched against email and name
        sort_by: Sort column
        sort_order: Sort direction
        admin: Signed-in admin
        db: Database session

    Returns:
        AdminUsersResponse with users and pagination
    """
    repo = UserRepository(db)
    rows = repo.search_users(
        query=search,
        limit=limit,
        offset=(page - 1) * limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    total = repo.count_users(search)
    return AdminUsersResponse(
        users=[_admin_user(user, count, last) for user, count, last in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/users/{user_id}", response_model=AdminUserDetail)
def get_user_detail(
    user_id: str,
    source: Optional[LibrarySource] = Query(None, description="Filter by LIBRARY or WISHLIST"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by listening status"),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """Return one user with their (optionally filtered) library and a library summary."""
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    library_repo = LibraryRepository(db)
    entries, _ = library_repo.get_user_entries(
        user.id,
        source=source.value if source else None,
        status=status_filter,
    )
    summary = library_repo.get_summary(user.id)
    last_sync = SyncRepository(db).get_last_sync(user.id)

    cards = metadata.title_cards([entry.title_asin for entry in entries])
    library = [
        LibraryEntry.model_validate(entry).model_copy(update={"title": TitleSummary.model_validate(card)})
        for entry, card in zip(entries, cards)
    ]
    return AdminUserDetail(
        user=_admin_user(user, summary["total"], last_sync.synced_at if last_sync else None),
        library=library,
        summary=LibrarySummary.model_validate(summary),
    )


@router.delete("/users/{user_id}/library", response_model=DeleteResponse)
def delete_user_library(
    user_id: str,
    confirm: Optional[str] = Query(None, description='Must be "true"'),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """Delete every library entry of a user."""
    if confirm != "true":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Confirmation required. Add "?confirm=true" query parameter to proceed.',
        )

    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    deleted = LibraryRepository(db).delete_all_for_user(user.id)
    logger.warning(f"Admin {admin.id} deleted {deleted} library entries of user {user.id}")
    return DeleteResponse(
        message=f"Successfully deleted {deleted} library entries for user {user.email}",
        deleted_count=deleted,
    )


@router.get("/titles", response_model=AdminTitlesResponse)
def get_titles(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Titles per page"),
    search: Optional[str] = Query(None, description="Filter by ASIN substring"),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """Page through every ASIN referenced by a library or a list, with usage counts."""
    rows, total = LibraryRepository(db).search_titles(search, limit=limit, offset=(page - 1) * limit)
    cards = metadata.title_cards([row["asin"] for row in rows])
    return AdminTitlesResponse(
        titles=[
            AdminTitle(asin=row["asin"], user_count=row["userCount"], list_count=row["listCount"],
                       title=TitleSummary.model_validate(card))
            for row, card in zip(rows, cards)
        ],
        pagination=Pagination.build(page, limit, total),
    )


@router.delete("/titles", response_model=DeleteResponse)
def delete_all_titles(
    confirm: Optional[str] = Query(None, description=f'Must be "{DELETE_ALL_TITLES_CONFIRMATION}"'),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """Remove every library entry and list item."""
    if confirm != DELETE_ALL_TITLES_CONFIRMATION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Confirmation required. Add "?confirm={DELETE_ALL_TITLES_CONFIRMATION}" query parameter to proceed.',
        )

    entries, items = LibraryRepository(db).delete_all_titles()
    metadata.clear_cache()
    logger.warning(f"Admin {admin.id} dropped all titles ({entries} library entries, {items} list items)")
    return DeleteResponse(
        message=f"Successfully deleted {entries} library entries and {items} list items",
        deleted_count=entries + items,
    )


@router.get("/titles/{asin}", response_model=AdminTitleDetail)
def get_title_detail(asin: str, admin: User = Depends(get_admin_user), db: Session = Depends(get_db)):
    """Return a title's metadata (null when upstream has none) and where it is used."""
    usage = LibraryRepository(db).get_title_usage(asin)
    if usage is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Title not found")

    summary = metadata.summarize_or_none(metadata.fetch_title_metadata(asin))
    return AdminTitleDetail(
        asin=asin,
        title=TitleSummary.model_validate({**summary, "asin": asin}) if summary else None,
        usage=TitleUsage.model_validate(usage),
    )


@router.post("/titles/{asin}/refresh")
def refresh_title(asin: str, admin: User = Depends(get_admin_user)):
    """Drop the cached metadata for a title and fetch it again."""
    metadata.evict(asin)
    data = metadata.fetch_title_metadata(asin)
    if not data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Title not found in Audnexus")

    logger.info(f"Admin {admin.id} refreshed metadata for {asin}")
    return {"success": True, "title": metadata.summarize(data)}


@router.delete("/titles/{asin}", response_model=DeleteResponse)
def delete_title(
    asin: str,
    confirm: Optional[str] = Query(None, description='Must be "true"'),
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    """Remove every library entry and list item referencing an ASIN."""
    if confirm != "true":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Confirmation required. Add "?confirm=true" query parameter to proceed.',
        )

    repo = LibraryRepository(db)
    if repo.get_title_usage(asin) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Title not found")

    entries, items = repo.delete_title(asin)
    metadata.evict(asin)
    logger.warning(f"Admin {admin.id} deleted title {asin} ({entries} library entries, {items} list items)")
    return DeleteResponse(
        message=f"Successfully deleted {asin} from {entries} libraries and {items} lists",
        deleted_count=entries + items,
    )


@router.get("/templates/{template_id}/preview")
def preview_template(
    template_id: str,
    size: str = Query("og", description="og or square"),
    admin: User = Depends(get_admin_user),
):
    """Render a template with placeholder covers as a PNG."""
    try:
        result = render_template_preview(template_id, size)
    except TemplateNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    except UnsupportedSizeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Invalid size. Use "og" or "square"')

    return Response(
        content=result.buffer,
        media_type=result.content_type,
        headers={"Cache-Control": "private, max-age=3600"},
    )
