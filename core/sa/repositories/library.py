# core/sa/repositories/library.py

from typing import List, Optional, Tuple
from sqlalchemy import func, desc, distinct, select, union
from sqlalchemy.orm import Session
from core.sa.models import LibraryEntry, LibrarySource, ListItem

class LibraryRepository:
    """Repository for managing LibraryEntry entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, entry_id: str) -> Optional[LibraryEntry]:
        """Get a library entry by its ID.

        Args:
            entry_id: The ID of the library entry to retrieve

        Returns:
            The LibraryEntry object if found, None otherwise
        """
        return self.session.query(LibraryEntry).filter(LibraryEntry.id == entry_id).first()

    def get_user_entries(
        self,
        user_id: str,
        source: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[LibraryEntry], int]:
        """Get a page of a user's library, newest first.

        Args:
            user_id: Owner of the entries
            source: Optional LIBRARY or WISHLIST filter
            search: Optional ASIN substring
            status: Optional listening status filter
            limit: Page size, or None for everything
            offset: Number of entries to skip

        Returns:
            Tuple of (entries, total matching count)
        """
        q = self.session.query(LibraryEntry).filter(LibraryEntry.user_id == user_id)
        if source:
            q = q.filter(LibraryEntry.source == source)
        if status:
            q = q.filter(LibraryEntry.status == status)
        if search:
            q = q.filter(LibraryEntry.title_asin.ilike(f"%{search.strip()}%"))

        total = q.count()
        q = q.order_by(desc(LibraryEntry.created_at), LibraryEntry.id).offset(offset)
        if limit is not None:
            q = q.limit(limit)
        return q.all(), total

    def get_user_asins(self, user_id: str) -> set[str]:
        rows = (
            self.session.query(LibraryEntry.title_asin)
            .filter(LibraryEntry.user_id == user_id)
            .all()
        )
        return {row[0] for row in rows}

    def get_stats(self, user_id: str) -> dict:
        """Count a user's entries per source.

        Args:
            user_id: The ID of the user

        Returns:
            Dictionary with total, library and wishlist counts
        """
        rows = (
            self.session.query(LibraryEntry.source, func.count(LibraryEntry.id))
            .filter(LibraryEntry.user_id == user_id)
            .group_by(LibraryEntry.source)
            .all()
        )
        counts = {source: count for source, count in rows}
        library = counts.get(LibrarySource.LIBRARY.value, 0)
        wishlist = counts.get(LibrarySource.WISHLIST.value, 0)
        return {"total": sum(counts.values()), "library": library, "wishlist": wishlist}

    def get_summary(self, user_id: str) -> dict:
        """Summarize a user's library by source and by status."""
        by_source = dict(
            self.session.query(LibraryEntry.source, func.count(LibraryEntry.id))
            .filter(LibraryEntry.user_id == user_id)
            .group_by(LibraryEntry.source)
            .all()
        )
        by_status = dict(
            self.session.query(LibraryEntry.status, func.count(LibraryEntry.id))
            .filter(LibraryEntry.user_id == user_id)
            .group_by(LibraryEntry.status)
            .all()
        )
        return {
            "total": sum(by_source.values()),
            "bySource": by_source,
            "byStatus": by_status,
        }

    def delete_entry(self, entry_id: str) -> bool:
        """Delete a library entry.

        Args:
            entry_id: The ID of the library entry to delete

        Returns:
            True if the entry was deleted, False if not found
        """
        entry = self.get_by_id(entry_id)
        if not entry:
            return False

        self.session.delete(entry)
        self.session.commit()
        return True

    def delete_all_for_user(self, user_id: str, commit: bool = True) -> int:
        deleted = (
            self.session.query(LibraryEntry)
            .filter(LibraryEntry.user_id == user_id)
            .delete(synchronize_session=False)
        )
        if commit:
            self.session.commit()
        return deleted

    def get_asins_held_by_others(self, user_id: str, asins: List[str]) -> set[str]:
        """Return which of the given ASINs appear in another user's library.

        Args:
            user_id: The user to exclude
            asins: Candidate ASINs

        Returns:
            Set of ASINs some other user already has
        """
        held = set()
        unique = list(dict.fromkeys(asins))
        # Chunked to stay under SQLite's bound parameter limit
        for start in range(0, len(unique), 500):
            chunk = unique[start:start + 500]
            rows = (
                self.session.query(LibraryEntry.title_asin)
                .filter(LibraryEntry.user_id != user_id, LibraryEntry.title_asin.in_(chunk))
                .distinct()
                .all()
            )
            held.update(row[0] for row in rows)
        return held

    # Titles are not stored locally; a "title" is any ASIN referenced by a library or list.

    def _all_asins(self):
        return union(
            select(LibraryEntry.title_asin.label("asin")),
            select(ListItem.title_asin.label("asin")),
        ).subquery()

    def search_titles(self, query: Optional[str] = None, limit: int = 20,
                      offset: int = 0) -> Tuple[List[dict], int]:
        """Page through every referenced ASIN with usage counts.

        Args:
            query: Optional ASIN substring
            limit: Page size
            offset: Number of ASINs to skip

        Returns:
            Tuple of ([{asin, userCount, listCount}], total)
        """
        asins = self._all_asins()
        q = self.session.query(asins.c.asin)
        if query:
            q = q.filter(asins.c.asin.ilike(f"%{query.strip()}%"))

        total = q.count()
        page = [row[0] for row in q.order_by(asins.c.asin).offset(offset).limit(limit).all()]
        if not page:
            return [], total

        user_counts = dict(
            self.session.query(LibraryEntry.title_asin, func.count(distinct(LibraryEntry.user_id)))
            .filter(LibraryEntry.title_asin.in_(page))
            .group_by(LibraryEntry.title_asin)
            .all()
        )
        list_counts = dict(
            self.session.query(ListItem.title_asin, func.count(distinct(ListItem.list_id)))
            .filter(ListItem.title_asin.in_(page))
            .group_by(ListItem.title_asin)
            .all()
        )
        return [
            {"asin": asin, "userCount": user_counts.get(asin, 0), "listCount": list_counts.get(asin, 0)}
            for asin in page
        ], total

    def get_title_usage(self, asin: str) -> Optional[dict]:
        """Usage counts for one ASIN, or None when nothing references it."""
        user_count = (
            self.session.query(func.count(distinct(LibraryEntry.user_id)))
            .filter(LibraryEntry.title_asin == asin)
            .scalar()
        )
        entry_count = (
            self.session.query(func.count(LibraryEntry.id))
            .filter(LibraryEntry.title_asin == asin)
            .scalar()
        )
        list_count = (
            self.session.query(func.count(distinct(ListItem.list_id)))
            .filter(ListItem.title_asin == asin)
            .scalar()
        )
        if not entry_count and not list_count:
            return None
        return {"userCount": user_count, "libraryEntryCount": entry_count, "listCount": list_count}

    def delete_title(self, asin: str) -> Tuple[int, int]:
        """Remove every library entry and list item referencing an ASIN.

        Returns:
            Tuple of (library entries deleted, list items deleted)
        """
        entries = (
            self.session.query(LibraryEntry)
            .filter(LibraryEntry.title_asin == asin)
            .delete(synchronize_session=False)
        )
        items = (
            self.session.query(ListItem)
            .filter(ListItem.title_asin == asin)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return entries, items

    def delete_all_titles(self) -> Tuple[int, int]:
        entries = self.session.query(LibraryEntry).delete(synchronize_session=False)
        items = self.session.query(ListItem).delete(synchronize_session=False)
        self.session.commit()
        return entries, items
