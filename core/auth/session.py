# core/auth/session.py
"""Signed session tokens carried in the session cookie or a Bearer header."""

from datetime import datetime, timedelta, UTC
from typing import Optional

import jwt

from core import config


class SessionError(Exception):
    """Raised when a session token cannot be trusted."""


def create_session_token(user_id: str, email: str, is_admin: bool = False,
                         now: Optional[datetime] = None) -> str:
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "isAdmin": bool(is_admin),
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=config.SESSION_MAX_AGE_SECONDS),
    }
    return jwt.encode(payload, config.SESSION_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """Decode and verify a session token.

    Args:
        token: The encoded session token

    Returns:
        The claims dict (sub, email, isAdmin, iat, exp)

    Raises:
        SessionError: If the token is expired, tampered with or incomplete
    """
    try:
        return jwt.decode(
            token,
            config.SESSION_SECRET,
            algorithms=["HS256"],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise SessionError("Session expired") from e
    except jwt.InvalidTokenError as e:
        raise SessionError("Invalid session") from e


def sign_state(callback_url: str) -> str:
    """Sign the OAuth state parameter so the callback can trust its redirect target."""
    now = datetime.now(UTC)
    payload = {"callbackUrl": callback_url, "iat": now, "exp": now + timedelta(minutes=10)}
    return jwt.encode(payload, config.SESSION_SECRET, algorithm="HS256")


def verify_state(state: str) -> str:
    try:
        payload = jwt.decode(state, config.SESSION_SECRET, algorithms=["HS256"])
    except jwt.InvalidTokenError as e:
        raise SessionError("Invalid OAuth state") from e
    return payload.get("callbackUrl") or "/dashboard"
