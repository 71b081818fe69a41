# api/routes/auth.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from core import config
from core.auth import create_session_token, SessionError
from core.auth.oauth import (
    OAuthError,
    build_authorization_url,
    exchange_code,
    is_configured_admin,
    verify_id_token,
)
from core.auth.session import sign_state, verify_state
from core.sa.database import get_db
from core.sa.models import User as UserModel
from core.sa.repositories import UserRepository
from api.dependencies import get_optional_user
from api.schemas.user import SessionResponse, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _safe_callback(callback_url: Optional[str]) -> str:
    # Only same-site relative paths are honoured
    if callback_url and callback_url.startswith("/") and not callback_url.startswith("//"):
        return callback_url
    return "/dashboard"


def set_session_cookie(response, user: UserModel) -> None:
    token = create_session_token(user.id, user.email, user.is_admin)
    response.set_cookie(
        config.SESSION_COOKIE_NAME,
        token,
        max_age=config.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=config.PUBLIC_BASE_URL.startswith("https"),
        path="/",
    )


@router.get("/signin")
def signin(callback_url: Optional[str] = Query(None, alias="callbackUrl", description="Where to land after sign-in")):
    """Start sign-in with the only configured provider."""
    return signin_google(callback_url)


@router.get("/signin/google")
def signin_google(callback_url: Optional[str] = Query(None, alias="callbackUrl", description="Where to land after sign-in")):
    """
    Redirect to Google's consent screen.

    Args:
        callback_url: Relative path to return to once signed in

    Returns:
        302 redirect to Google
    """
    state = sign_state(_safe_callback(callback_url))
    try:
        url = build_authorization_url(state)
    except OAuthError as e:
        logger.error(f"Sign-in unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/callback/google")
def callback_google(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    state: Optional[str] = Query(None, description="Signed state issued at sign-in"),
    db: Session = Depends(get_db),
):
    """
    Finish Google sign-in: verify the identity, upsert the user and set the session cookie.

    Args:
        code: Authorization code
        state: Signed state carrying the callback URL
        db: Database session

    Returns:
        302 redirect to the callback URL
    """
    if not code or not state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing code or state")

    try:
        callback_url = _safe_callback(verify_state(state))
    except SessionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        identity = verify_id_token(exchange_code(code))
    except OAuthError as e:
        logger.warning(f"Google sign-in rejected: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign-in failed")

    user, created = UserRepository(db).upsert_oauth_user(
        identity.email,
        identity.name,
        identity.image,
        promote_admin=is_configured_admin(identity.email),
    )
    if created:
        logger.info(f"Created user {user.id} on first sign-in")

    response = RedirectResponse(callback_url, status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, user)
    return response


@router.get("/session", response_model=SessionResponse)
def get_session(user: Optional[UserModel] = Depends(get_optional_user)):
    """Return the signed-in user, or null."""
    return SessionResponse(user=User.model_validate(user) if user else None)


@router.post("/signout")
def signout():
    response = JSONResponse({"success": True})
    response.delete_cookie(config.SESSION_COOKIE_NAME, path="/")
    return response
