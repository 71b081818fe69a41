# core/sa/repositories/list.py

from typing import Iterable, Optional, Tuple
from sqlalchemy import func, desc, case
from sqlalchemy.orm import Session
from core.sa.models import List, ListItem, ListType, ImageStatus
from core.sa.models.base import utcnow

class ListRepository:
    """Repository for managing List and ListItem entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, list_id: str) -> Optional[List]:
        """Get a list by its ID.

        Args:
            list_id: The ID of the list to retrieve

        Returns:
            The List object if found, None otherwise
        """
        return self.session.query(List).filter(List.id == list_id).first()

    def get_user_lists(self, user_id: str) -> list[Tuple[List, int]]:
        """Get a user's lists with their item counts, most recently updated first.

        Args:
            user_id: Owner of the lists

        Returns:
            List of (list, item count) tuples
        """
        item_counts = (
            self.session.query(ListItem.list_id.label("list_id"), func.count(ListItem.id).label("item_count"))
            .group_by(ListItem.list_id)
            .subquery()
        )
        return (
            self.session.query(List, func.coalesce(item_counts.c.item_count, 0))
            .outerjoin(item_counts, item_counts.c.list_id == List.id)
            .filter(List.user_id == user_id)
            .order_by(desc(List.updated_at), List.id)
            .all()
        )

    def create_list(
        self,
        user_id: str,
        name: str,
        list_type: str = ListType.RECOMMENDATION.value,
        description: Optional[str] = None,
        tiers: Optional[list[str]] = None,
        image_template_id: Optional[str] = None,
    ) -> List:
        """Create a new list.

        Args:
            user_id: Owner of the list
            name: Display name, already validated
            list_type: RECOMMENDATION or TIER
            description: Optional description
            tiers: Tier labels (TIER lists only)
            image_template_id: Optional share image template

        Returns:
            The created List object
        """
        new_list = List(
            user_id=user_id,
            name=name,
            type=list_type,
            description=description,
            tiers=list(tiers or []),
            image_template_id=image_template_id,
        )
        self.session.add(new_list)
        self.session.commit()
        return new_list

    def update_list(self, list_id: str, **fields) -> Optional[List]:
        """Update the editable columns of a list.

        Args:
            list_id: The ID of the list to update
            fields: Column values to set (name, description, tiers, image_template_id)

        Returns:
            The updated List object if found, None otherwise

        Raises:
            ValueError: If an unknown or immutable column is given
        """
        lst = self.get_by_id(list_id)
        if not lst:
            return None

        for key, value in fields.items():
            if key not in ("name", "description", "tiers", "image_template_id"):
                raise ValueError(f"Cannot update list field '{key}'")
            setattr(lst, key, value)
        lst.updated_at = utcnow()
        self.session.commit()
        return lst

    def delete_list(self, list_id: str) -> bool:
        lst = self.get_by_id(list_id)
        if not lst:
            return False
        self.session.delete(lst)
        self.session.commit()
        return True

    def get_items(self, list_id: str) -> list[ListItem]:
        """Get a list's items in position order.

        Args:
            list_id: The ID of the list

        Returns:
            List of ListItem objects
        """
        return (
            self.session.query(ListItem)
            .filter(ListItem.list_id == list_id)
            .order_by(ListItem.position)
            .all()
        )

    def replace_items(self, list_id: str, items: Iterable[dict]) -> list[ListItem]:
        """Replace all items of a list in one transaction.

        Args:
            list_id: The ID of the list
            items: Dicts with titleAsin, optional position and optional tier

        Returns:
            The new ListItem objects in position order
        """
        self.session.query(ListItem).filter(ListItem.list_id == list_id).delete(synchronize_session=False)

        new_items = []
        for index, item in enumerate(items):
            position = item.get("position")
            new_items.append(ListItem(
                list_id=list_id,
                title_asin=item["titleAsin"],
                position=index if position is None else position,
                tier=item.get("tier"),
            ))
        self.session.add_all(new_items)

        lst = self.get_by_id(list_id)
        if lst:
            self.session.expire(lst, ["items"])
            lst.updated_at = utcnow()
        self.session.commit()
        return sorted(new_items, key=lambda i: i.position)

    def tier_order(self, lst: List):
        """SQL expression ordering items by the list's own tier order."""
        whens = [(ListItem.tier == tier, index) for index, tier in enumerate(lst.tiers or [])]
        if not whens:
            return ListItem.position
        return case(*whens, else_=len(whens))

    def get_items_in_tier_order(self, lst: List) -> list[ListItem]:
        return (
            self.session.query(ListItem)
            .filter(ListItem.list_id == lst.id)
            .order_by(self.tier_order(lst), ListItem.position)
            .all()
        )

    def set_image_status(self, lst: List, status: ImageStatus, error: Optional[str] = None) -> List:
        lst.image_status = status.value
        lst.image_error = error
        self.session.commit()
        return lst
