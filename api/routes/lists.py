# api/routes/lists.py

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from core import config
from core.images import get_template
from core.sa.database import get_db
from core.sa.models import User, List as ListModel, ListType, ImageStatus
from core.sa.repositories import LibraryRepository, ListRepository
from core.services.list_images import (
    cooldown_remaining,
    mark_generating,
    regenerate_list_images,
    regenerate_list_images_task,
)
from core.services.metadata import title_cards
from core.storage.s3 import get_signed_image_url, StorageError
from core.validation import (
    validate_list_description,
    validate_list_items,
    validate_list_name,
    validate_list_type,
    validate_tiers,
)
from api.dependencies import get_current_user
from api.schemas.list import (
    ListCreate,
    ListDetail,
    ListItem,
    ListItemsUpdate,
    ListSummary,
    ListsResponse,
    ListUpdate,
    RegenerateImagesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lists", tags=["lists"])


def _bad_request(message) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _check(result) -> None:
    if not result.valid:
        raise _bad_request(result.error)


def get_owned_list(db: Session, list_id: str, user: User) -> ListModel:
    lst = ListRepository(db).get_by_id(list_id)
    if not lst:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
    if lst.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return lst


def image_urls(lst: ListModel) -> dict:
    """Stable proxy paths for a list's share images, only while they are READY."""
    ready = lst.image_status == ImageStatus.READY.value
    return {
        "image_og_url": f"/api/lists/{lst.id}/og-image" if ready and lst.image_og_key else None,
        "image_square_url": f"/api/lists/{lst.id}/square-image" if ready and lst.image_square_key else None,
    }


def list_summary(lst: ListModel, item_count: int) -> ListSummary:
    return ListSummary.model_validate(lst).model_copy(update={"item_count": item_count})


def list_detail(lst: ListModel, items: list, with_metadata: bool = True, schema=ListDetail, **extra):
    """Serialize a list with its items, optionally resolving title metadata."""
    cards = title_cards([item.title_asin for item in items]) if with_metadata else [None] * len(items)
    serialized = []
    for item, card in zip(items, cards):
        data = ListItem.model_validate(item).model_dump()
        data["title"] = card
        serialized.append(data)

    detail = ListDetail.model_validate(lst).model_dump()
    detail.update(image_urls(lst))
    detail.update(item_count=len(items), items=serialized, **extra)
    return schema.model_validate(detail)


def validate_template_choice(template_id: Optional[str], list_type: str) -> None:
    if template_id is None:
        return
    template = get_template(template_id)
    if template is None:
        raise _bad_request(f"Unknown template: {template_id}")
    if not template.supports(list_type):
        raise _bad_request(f"Template {template_id} does not support {list_type} lists")


@router.get("", response_model=ListsResponse)
def get_lists(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return the signed-in user's lists, most recently updated first."""
    rows = ListRepository(db).get_user_lists(user.id)
    return ListsResponse(lists=[list_summary(lst, count) for lst, count in rows])


@router.post("", response_model=ListDetail, status_code=status.HTTP_201_CREATED)
def create_list(body: ListCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Create a list.

    Args:
        body: Name, type and optional description, tiers and image template
        user: Signed-in user
        db: Database session

    Returns:
        The created list

    Raises:
        HTTPException: 400 if any field is invalid
    """
    _check(validate_list_name(body.name))
    if body.description is not None:
        _check(validate_list_description(body.description))
    _check(validate_list_type(body.type))

    tiers = []
    if body.type == ListType.TIER.value:
        tiers = body.tiers if body.tiers is not None else list(config.DEFAULT_TIERS)
        _check(validate_tiers(tiers))
        tiers = [tier.strip() for tier in tiers]

    validate_template_choice(body.image_template_id, body.type)

    lst = ListRepository(db).create_list(
        user.id,
        body.name.strip(),
        list_type=body.type,
        description=(body.description.strip() or None) if body.description else None,
        tiers=tiers,
        image_template_id=body.image_template_id,
    )
    logger.info(f"User {user.id} created {lst.type} list {lst.id}")
    return list_detail(lst, [], with_metadata=False)


@router.get("/{list_id}", response_model=ListDetail)
def get_list(list_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return one of the user's lists with items in position order."""
    lst = get_owned_list(db, list_id, user)
    return list_detail(lst, ListRepository(db).get_items(lst.id))


@router.put("/{list_id}", response_model=ListDetail)
def update_list(
    list_id: str,
    body: ListUpdate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a list's name, description, tiers or image template.

    The list type cannot change. With regenerateImage the list is marked
    GENERATING and its share images are rendered after the response is sent.

    Raises:
        HTTPException: 404/403 for missing or foreign lists, 400 for invalid fields
    """
    lst = get_owned_list(db, list_id, user)
    provided = body.model_fields_set
    fields = {}

    if "type" in provided:
        raise _bad_request("List type is immutable and cannot be changed")

    if "name" in provided:
        _check(validate_list_name(body.name))
        fields["name"] = body.name.strip()

    if "description" in provided:
        if body.description is None:
            fields["description"] = None
        else:
            _check(validate_list_description(body.description))
            fields["description"] = body.description.strip() or None

    if "tiers" in provided:
        if lst.type != ListType.TIER.value:
            raise _bad_request("Tiers can only be set on TIER lists")
        _check(validate_tiers(body.tiers))
        fields["tiers"] = [tier.strip() for tier in body.tiers]

    if "image_template_id" in provided:
        validate_template_choice(body.image_template_id, lst.type)
        fields["image_template_id"] = body.image_template_id

    repo = ListRepository(db)
    if fields:
        lst = repo.update_list(lst.id, **fields)

    if body.regenerate_image:
        if not lst.image_template_id:
            raise _bad_request("No template selected. Choose a template first.")
        mark_generating(db, lst)
        background_tasks.add_task(regenerate_list_images_task, lst.id)
        logger.info(f"Queued image generation for list {lst.id}")

    return list_detail(lst, repo.get_items(lst.id), with_metadata=False)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(list_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    lst = get_owned_list(db, list_id, user)
    ListRepository(db).delete_list(lst.id)
    logger.info(f"User {user.id} deleted list {lst.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{list_id}/items", response_model=ListDetail)
def replace_list_items(
    list_id: str,
    body: ListItemsUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace every item of a list.

    Args:
        list_id: ID of the list
        body: {"items": [{"titleAsin", "position", "tier"}]}
        user: Signed-in user
        db: Database session

    Returns:
        The list with its new items

    Raises:
        HTTPException: 400 with "missing" when ASINs are not in the user's library,
            or when tiers do not match the list type
    """
    lst = get_owned_list(db, list_id, user)
    items = body.items
    _check(validate_list_items(items))

    for item in items:
        position = item.get("position")
        if position is not None and (not isinstance(position, int) or isinstance(position, bool)):
            raise _bad_request(f"Position must be an integer (ASIN: {item['titleAsin']})")

    asins = [item["titleAsin"] for item in items]
    owned = LibraryRepository(db).get_user_asins(user.id)
    missing = [asin for asin in asins if asin not in owned]
    if missing:
        raise _bad_request({"error": "Some ASINs are not in your library", "missing": missing})

    tiers = lst.tiers or []
    for item in items:
        tier = item.get("tier")
        if lst.type == ListType.TIER.value:
            if not tier:
                raise _bad_request(f"Tier is required for TIER list items (ASIN: {item['titleAsin']})")
            if tier not in tiers:
                raise _bad_request(
                    f'Invalid tier "{tier}" for ASIN {item["titleAsin"]}. Valid tiers: {", ".join(tiers)}'
                )
        elif tier:
            raise _bad_request(
                f"Tier must not be set for RECOMMENDATION list items (ASIN: {item['titleAsin']})"
            )

    repo = ListRepository(db)
    repo.replace_items(lst.id, [
        {"titleAsin": item["titleAsin"], "position": item.get("position"), "tier": item.get("tier") or None}
        for item in items
    ])
    return list_detail(lst, repo.get_items(lst.id))


@router.post("/{list_id}/regenerate-images", response_model=RegenerateImagesResponse)
def regenerate_images(list_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Render and upload a fresh version of the list's share images.

    Raises:
        HTTPException: 400 without a template, 429 inside the cooldown,
            500 if generation fails (the list is left FAILED)
    """
    lst = get_owned_list(db, list_id, user)
    if not lst.image_template_id:
        raise _bad_request("No template selected. Choose a template first.")

    retry_after = cooldown_remaining(lst)
    if retry_after:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"error": "Please wait before regenerating", "retryAfter": retry_after},
        )

    try:
        regenerate_list_images(db, lst)
    except Exception:
        # Already logged and recorded on the list
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Image generation failed")

    return RegenerateImagesResponse(image_version=lst.image_version, image_status=lst.image_status)


def redirect_to_image(db: Session, list_id: str, variant: str) -> RedirectResponse:
    lst = ListRepository(db).get_by_id(list_id)
    if not lst:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")

    key = lst.image_og_key if variant == "og" else lst.image_square_key
    if lst.image_status != ImageStatus.READY.value or not key:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No image available")

    try:
        url = get_signed_image_url(key, expires_in=config.URL_EXPIRY_SECONDS)
    except StorageError:
        logger.error(f"Failed to sign {variant} image for list {list_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to serve image")

    return RedirectResponse(
        url,
        status_code=status.HTTP_302_FOUND,
        headers={"Cache-Control": f"public, max-age={config.URL_EXPIRY_SECONDS}"},
    )


@router.get("/{list_id}/og-image")
def get_og_image(list_id: str, db: Session = Depends(get_db)):
    """Public: redirect social crawlers to the list's Open Graph image."""
    return redirect_to_image(db, list_id, "og")


@router.get("/{list_id}/square-image")
def get_square_image(list_id: str, db: Session = Depends(get_db)):
    """Public: redirect to the list's square share image."""
    return redirect_to_image(db, list_id, "square")
