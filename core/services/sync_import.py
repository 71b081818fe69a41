# core/services/sync_import.py
"""
Full-replace import of a user's Audible library export.

The same processor backs the extension upload, the manual file upload and the
`sync import` CLI command.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.sa.models import LibraryEntry, LibrarySource
from core.sa.repositories import LibraryRepository

logger = logging.getLogger(__name__)

VALID_SOURCES = (LibrarySource.LIBRARY.value, LibrarySource.WISHLIST.value)


@dataclass
class SyncImportResult:
    imported: int = 0
    new_to_catalog: int = 0
    library_count: int = 0
    wishlist_count: int = 0
    warnings: list[str] = field(default_factory=list)
    failed: int = 0

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "success": True,
            "imported": self.imported,
            "newToCatalog": self.new_to_catalog,
            "libraryCount": self.library_count,
            "wishlistCount": self.wishlist_count,
            "warnings": self.warnings,
        }


def validate_import_payload(body) -> Optional[str]:
    """Check the shape of an import payload.

    Args:
        body: Decoded JSON body

    Returns:
        An error message for the first problem found, or None if the payload is valid
    """
    if not isinstance(body, dict) or not isinstance(body.get("titles"), list):
        return "Missing or invalid titles array"

    for i, title in enumerate(body["titles"]):
        if not isinstance(title, dict):
            return f"Title at index {i} must be an object"
        if not title.get("asin") or not isinstance(title["asin"], str):
            return f"Title at index {i} missing required field: asin"
        if not title.get("title") or not isinstance(title["title"], str):
            return f"Title at index {i} missing required field: title"
        if not isinstance(title.get("authors"), list):
            return f"Title at index {i} missing required field: authors (array)"
        if title.get("source") not in VALID_SOURCES:
            return f"Title at index {i} missing or invalid source (must be LIBRARY or WISHLIST)"
        if not title.get("dateAdded"):
            return f"Title at index {i} missing required field: dateAdded"

    return None


def listening_status(progress) -> str:
    if progress == 100:
        return "Finished"
    if progress and progress > 0:
        return "In Progress"
    return "Not Started"


def _upsert_entry(session: Session, user_id: str, title: dict) -> None:
    asin = title["asin"]
    progress = int(title.get("listeningProgress") or 0)
    rating = int(title.get("personalRating") or 0)

    entry = (
        session.query(LibraryEntry)
        .filter(LibraryEntry.user_id == user_id, LibraryEntry.title_asin == asin)
        .first()
    )
    if entry is None:
        entry = LibraryEntry(user_id=user_id, title_asin=asin)
        session.add(entry)

    entry.status = listening_status(progress)
    entry.progress = progress
    entry.user_rating = rating
    entry.source = title["source"]
    session.flush()


def process_sync_import(session: Session, user_id: str, titles: list[dict]) -> SyncImportResult:
    """Replace a user's library with the given titles.

    Each row is written inside its own SAVEPOINT, so a failing row is rolled back
    and reported as a warning without aborting the batch. Failure to clear the
    existing library propagates.

    Args:
        session: Active database session
        user_id: Owner of the library
        titles: Validated title dicts (see validate_import_payload)

    Returns:
        SyncImportResult with counts and warnings
    """
    repo = LibraryRepository(session)
    result = SyncImportResult()

    deleted = repo.delete_all_for_user(user_id, commit=False)
    logger.info(f"Cleared {deleted} library entries for user {user_id}")

    imported_asins = []
    for title in titles:
        asin = title.get("asin")
        savepoint = session.begin_nested()
        try:
            _upsert_entry(session, user_id, title)
            savepoint.commit()
        except (SQLAlchemyError, ValueError, TypeError) as e:
            savepoint.rollback()
            logger.warning(f"Failed to import {asin} for user {user_id}: {e}")
            result.warnings.append(f"Failed to import {asin}: {e}")
            result.failed += 1
            continue

        result.imported += 1
        imported_asins.append(asin)

    result.new_to_catalog = len(set(imported_asins) - repo.get_asins_held_by_others(user_id, imported_asins))
    result.library_count = sum(1 for t in titles if t.get("source") == LibrarySource.LIBRARY.value)
    result.wishlist_count = sum(1 for t in titles if t.get("source") == LibrarySource.WISHLIST.value)

    session.commit()
    logger.info(
        f"Imported {result.imported}/{len(titles)} titles for user {user_id} "
        f"({result.new_to_catalog} new to catalog, {result.failed} failed)"
    )
    return result
