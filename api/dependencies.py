# api/dependencies.py
"""Request-scoped authentication dependencies."""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from core import config
from core.auth import decode_session_token, extract_bearer_token, require_admin, AdminRequiredError, SessionError
from core.sa.database import get_db
from core.sa.models import User
from core.sa.repositories import UserRepository

logger = logging.getLogger(__name__)


def session_token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if token:
        return token
    return extract_bearer_token(request.headers.get("Authorization"))


def read_session_claims(request: Request) -> Optional[dict]:
    token = session_token_from_request(request)
    if not token:
        return None
    try:
        return decode_session_token(token)
    except SessionError as e:
        logger.debug(f"Ignoring session token: {e}")
        return None


def get_session_claims(request: Request) -> Optional[dict]:
    """Claims of the caller's session, or None when signed out."""
    return read_session_claims(request)


def get_optional_user(
    claims: Optional[dict] = Depends(get_session_claims),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if not claims:
        return None
    return UserRepository(db).get_by_id(claims["sub"])


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """The signed-in user.

    Raises:
        HTTPException: 401 if there is no valid session or the user no longer exists
    """
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    """The signed-in user, who must be an admin in the database.

    Raises:
        HTTPException: 401 without a session, 403 for non-admins
    """
    try:
        return require_admin(user)
    except AdminRequiredError:
        logger.warning(f"Non-admin user {user.id} denied admin access")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
