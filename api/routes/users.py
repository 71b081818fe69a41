# api/routes/users.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.sa.models import User
from core.sa.repositories import ListRepository, UserRepository
from core.services.share import public_list_url, share_urls
from core.validation import validate_username
from api.dependencies import get_current_user
from api.routes.lists import list_detail, list_summary
from api.schemas.list import PublicListDetail, PublicListsResponse
from api.schemas.user import PublicUser, UsernameResponse, UsernameUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def get_public_user(db: Session, username: str) -> User:
    user = UserRepository(db).get_by_username(username)
    if not user or not user.username:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/me/username", response_model=UsernameResponse)
def set_username(body: UsernameUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Claim a public username for the signed-in user.

    Args:
        body: {"username": "..."}
        user: Signed-in user
        db: Database session

    Returns:
        The username now set

    Raises:
        HTTPException: 400 if the username is invalid, 409 if another user has it
    """
    result = validate_username(body.username)
    if not result.valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    try:
        updated = UserRepository(db).set_username(user.id, body.username)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This username is already taken")
    if updated is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    logger.info(f"User {user.id} is now @{updated.username}")
    return UsernameResponse(username=updated.username)


@router.get("/{username}/lists", response_model=PublicListsResponse)
def get_user_lists(username: str, db: Session = Depends(get_db)):
    """Public index of a user's lists."""
    user = get_public_user(db, username)
    rows = ListRepository(db).get_user_lists(user.id)
    return PublicListsResponse(
        user=PublicUser.model_validate(user),
        lists=[list_summary(lst, count) for lst, count in rows],
    )


@router.get("/{username}/lists/{list_id}", response_model=PublicListDetail)
def get_user_list(username: str, list_id: str, db: Session = Depends(get_db)):
    """
    Public view of one list, items grouped by tier then position.

    Returns:
        The list with title metadata, image proxy URLs and social share links

    Raises:
        HTTPException: 404 if the user or the list does not exist, or the list is someone else's
    """
    user = get_public_user(db, username)
    repo = ListRepository(db)
    lst = repo.get_by_id(list_id)
    if not lst or lst.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")

    return list_detail(
        lst,
        repo.get_items_in_tier_order(lst),
        schema=PublicListDetail,
        user=PublicUser.model_validate(user),
        share_urls=share_urls(public_list_url(user.username, lst.id), lst.name),
    )
