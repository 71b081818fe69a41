# core/auth/sync_token.py
"""Single-use tokens the browser extension uses to upload a library export."""

import logging
import uuid
from datetime import datetime, timedelta, UTC
from typing import Optional, Tuple

import jwt

from core import config

logger = logging.getLogger(__name__)


class SyncTokenError(Exception):
    """Raised when a sync token is expired, malformed or out of scope."""


def generate_sync_token(user_id: str, now: Optional[datetime] = None) -> Tuple[str, str, datetime]:
    """Sign a sync token for a user.

    Args:
        user_id: The user the token authorizes an import for
        now: Issue time (defaults to the current time)

    Returns:
        Tuple of (token, jti, expires_at). The caller records jti and expires_at.
    """
    issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
    expires_at = issued_at + timedelta(seconds=config.SYNC_TOKEN_TTL_SECONDS)
    jti = str(uuid.uuid4())

    payload = {
        "sub": user_id,
        "jti": jti,
        "scope": config.SYNC_TOKEN_SCOPE,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, config.JWT_SECRET, algorithm="HS256")
    logger.info(f"Issued sync token {jti} for user {user_id}, expires {expires_at.isoformat()}")
    return token, jti, expires_at


def verify_sync_token(token: str) -> dict:
    """Verify signature, expiry and scope of a sync token.

    Args:
        token: The encoded token

    Returns:
        The decoded payload

    Raises:
        SyncTokenError: "Token expired", "Invalid token" or "Invalid token scope"
    """
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=["HS256"],
            options={"require": ["sub", "jti", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise SyncTokenError("Token expired")
    except jwt.InvalidTokenError:
        raise SyncTokenError("Invalid token")

    if payload.get("scope") != config.SYNC_TOKEN_SCOPE:
        raise SyncTokenError("Invalid token scope")

    return payload


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Return the token from an "Authorization: Bearer <token>" header value."""
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None

    return parts[1]
