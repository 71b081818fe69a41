# core/services/list_images.py
"""
Share image lifecycle for a list: NONE -> GENERATING -> READY or FAILED.

Every regeneration renders under a new version so stored objects are never
overwritten and can be cached forever.
"""

import logging
import math
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.orm import Session

from core import config
from core.images import ListImageBook, ListImageInput, generate_list_images
from core.sa.database import Database, db
from core.sa.models import List, ListType, ImageStatus
from core.sa.repositories import ListRepository
from core.services.metadata import fetch_title_metadata_batch
from core.storage.s3 import image_key, upload_image

logger = logging.getLogger(__name__)


class MissingTemplateError(Exception):
    """Raised when a list has no image template selected."""


def cooldown_remaining(lst: List, now: Optional[datetime] = None) -> int:
    """Seconds until the list may be regenerated again, 0 if it may be now."""
    if lst.image_generated_at is None:
        return 0
    now = now or datetime.now(UTC)
    elapsed = (now - lst.image_generated_at).total_seconds()
    remaining = config.IMAGE_REGENERATE_COOLDOWN_SECONDS - elapsed
    return math.ceil(remaining) if remaining > 0 else 0


def display_name(lst: List) -> str:
    user = lst.user
    return (user.username or user.name or "Unknown") if user else "Unknown"


def mark_generating(session: Session, lst: List) -> List:
    lst.image_status = ImageStatus.GENERATING.value
    lst.image_error = None
    session.commit()
    return lst


def build_image_input(session: Session, lst: List) -> ListImageInput:
    items = ListRepository(session).get_items_in_tier_order(lst)
    asins = [item.title_asin for item in items]
    metadata = fetch_title_metadata_batch(asins) if asins else []

    books = [
        ListImageBook(
            asin=item.title_asin,
            cover_image_url=(meta or {}).get("image"),
            title=(meta or {}).get("title") or item.title_asin,
            tier=item.tier,
        )
        for item, meta in zip(items, metadata)
    ]
    tiers = list(lst.tiers or []) if lst.type == ListType.TIER.value else None

    return ListImageInput(
        list_id=lst.id,
        title=lst.name,
        description=lst.description,
        username=display_name(lst),
        template_id=lst.image_template_id,
        books=books,
        tiers=tiers or None,
    )


def regenerate_list_images(session: Session, lst: List) -> List:
    """Render and upload a new version of a list's share images.

    Args:
        session: Active database session the list belongs to
        lst: The list to render

    Returns:
        The list, now READY with fresh keys

    Raises:
        MissingTemplateError: If no template is selected
        Exception: Whatever failed during rendering or upload, after the list is marked FAILED
    """
    if not lst.image_template_id:
        raise MissingTemplateError("No template selected. Choose a template first.")

    version = lst.image_version + 1
    lst.image_version = version
    mark_generating(session, lst)
    logger.info(f"Generating images v{version} for list {lst.id} with template {lst.image_template_id}")

    try:
        images = generate_list_images(build_image_input(session, lst))

        keys = {}
        for size, result in images.items():
            keys[size] = upload_image(image_key(lst.id, version, size), result.buffer)

        lst.image_og_key = keys.get("og")
        lst.image_square_key = keys.get("square")
        lst.image_status = ImageStatus.READY.value
        lst.image_generated_at = datetime.now(UTC)
        lst.image_error = None
        session.commit()
    except Exception as e:
        logger.exception(f"Image regeneration failed for list {lst.id}")
        session.rollback()
        lst.image_status = ImageStatus.FAILED.value
        lst.image_error = str(e) or e.__class__.__name__
        session.commit()
        raise

    logger.info(f"List {lst.id} images ready at v{version}")
    return lst


def regenerate_list_images_task(list_id: str, database: Optional[Database] = None) -> None:
    """Background entry point: regenerate with a session of its own."""
    session = (database or db).get_session()
    try:
        lst = ListRepository(session).get_by_id(list_id)
        if lst is None:
            logger.warning(f"List {list_id} disappeared before image generation")
            return
        regenerate_list_images(session, lst)
    except Exception:
        # Already recorded on the list as FAILED
        logger.error(f"Background image generation failed for list {list_id}")
    finally:
        session.close()
