# api/middleware.py
"""Redirect rules for page routes. API routes answer 401/403 themselves."""

from typing import Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from api.dependencies import read_session_claims

PROTECTED_PREFIXES = ("/dashboard", "/library")


def _signin_redirect(base: str, path: str) -> str:
    return f"{base}?{urlencode({'callbackUrl': path})}"


def page_gate_redirect(path: str, claims: Optional[dict]) -> Optional[str]:
    """Where a page request should be sent instead, or None to let it through.

    Args:
        path: Request path
        claims: Session claims, None when signed out

    Returns:
        Redirect target or None
    """
    if path.startswith("/api"):
        return None

    if path.startswith("/admin"):
        if not claims:
            return _signin_redirect("/api/auth/signin", path)
        if not claims.get("isAdmin"):
            return "/library"
        return None

    if not claims and any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES):
        return _signin_redirect("/signin", path)

    if path == "/signin" and claims:
        return "/dashboard"

    return None


class PageGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        target = page_gate_redirect(request.url.path, read_session_claims(request))
        if target:
            return RedirectResponse(target, status_code=302)
        return await call_next(request)
