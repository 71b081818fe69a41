# core/auth/oauth.py
"""Google sign-in: authorization redirect, code exchange and id_token verification."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import urlencode

import jwt
import requests
from jwt import PyJWKClient

from core import config

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")


class OAuthError(Exception):
    """Raised when the identity provider rejects or fails a sign-in."""


@dataclass(frozen=True)
class OAuthIdentity:
    subject: str
    email: str
    name: Optional[str]
    image: Optional[str]


def build_authorization_url(state: str) -> str:
    if not config.GOOGLE_CLIENT_ID:
        raise OAuthError("Google OAuth is not configured")
    params = {
        "client_id": config.GOOGLE_CLIENT_ID,
        "redirect_uri": config.OAUTH_REDIRECT_URL,
        "response_type": "code",
        "scope": "openid email profile",
        "state": state,
        "prompt": "select_account",
    }
    return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"


@lru_cache
def _get_jwk_client(jwks_url: str) -> PyJWKClient:
    return PyJWKClient(jwks_url)


def exchange_code(code: str) -> str:
    """Exchange an authorization code for the id_token.

    Args:
        code: The code Google appended to the callback URL

    Returns:
        The raw id_token

    Raises:
        OAuthError: If the exchange fails
    """
    try:
        response = requests.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": config.GOOGLE_CLIENT_ID,
                "client_secret": config.GOOGLE_CLIENT_SECRET,
                "redirect_uri": config.OAUTH_REDIRECT_URL,
                "grant_type": "authorization_code",
            },
            timeout=10,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Google token exchange failed: {e}")
        raise OAuthError("Token exchange failed") from e

    id_token = response.json().get("id_token")
    if not id_token:
        raise OAuthError("Token response missing id_token")
    return id_token


def verify_id_token(id_token: str) -> OAuthIdentity:
    """Verify a Google id_token against Google's signing keys.

    Raises:
        OAuthError: If the signature, audience, issuer or email checks fail
    """
    try:
        signing_key = _get_jwk_client(GOOGLE_JWKS_URL).get_signing_key_from_jwt(id_token)
        payload = jwt.decode(
            id_token,
            signing_key.key,
            algorithms=["RS256"],
            audience=config.GOOGLE_CLIENT_ID,
            options={"verify_iss": False},
        )
    except jwt.PyJWTError as e:
        raise OAuthError("Identity token validation failed") from e

    if payload.get("iss") not in GOOGLE_ISSUERS:
        raise OAuthError("Unexpected identity token issuer")

    email = payload.get("email")
    if not isinstance(email, str) or not email.strip():
        raise OAuthError("Identity token missing email")
    if payload.get("email_verified") is False:
        raise OAuthError("Email address is not verified")

    return OAuthIdentity(
        subject=str(payload.get("sub") or ""),
        email=email.strip().lower(),
        name=payload.get("name"),
        image=payload.get("picture"),
    )


def is_configured_admin(email: str) -> bool:
    return bool(config.ADMIN_EMAIL) and email.lower() == config.ADMIN_EMAIL.strip().lower()
