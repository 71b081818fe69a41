# api/routes/sync.py

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core import config
from core.auth import extract_bearer_token, generate_sync_token, verify_sync_token, SyncTokenError
from core.sa.database import get_db
from core.sa.models import User
from core.sa.repositories import SyncRepository
from core.services.sync_import import process_sync_import, validate_import_payload, SyncImportResult
from api.dependencies import get_current_user
from api.schemas.sync import SyncHistoryEntry, SyncHistoryResponse, SyncTokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync", tags=["sync"])

# The extension posts from its own origin
EXTENSION_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
    "Access-Control-Max-Age": "86400",
}


def _bad_request(message: str, headers: dict | None = None) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message, headers=headers)


async def read_import_titles(request: Request, headers: dict | None = None) -> list[dict]:
    """Read and validate an import payload from the request body.

    Args:
        request: Incoming request
        headers: Extra headers for error responses

    Returns:
        The validated titles

    Raises:
        HTTPException: 400 for oversized, malformed or invalid payloads
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > config.MAX_SYNC_PAYLOAD_BYTES:
        raise _bad_request("Payload too large (max 50MB)", headers)

    raw = await request.body()
    if len(raw) > config.MAX_SYNC_PAYLOAD_BYTES:
        raise _bad_request("Payload too large (max 50MB)", headers)

    try:
        body = json.loads(raw)
    except ValueError:
        raise _bad_request("Invalid JSON payload", headers)

    error = validate_import_payload(body)
    if error:
        raise _bad_request(error, headers)
    return body["titles"]


def run_import(db: Session, user_id: str, titles: list[dict], headers: dict | None = None) -> SyncImportResult:
    """Run the import processor and append a sync history record."""
    try:
        result = process_sync_import(db, user_id, titles)
    except SQLAlchemyError:
        logger.exception(f"Library import failed for user {user_id}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import library",
            headers=headers,
        )

    SyncRepository(db).record_history(
        user_id,
        titles_imported=result.imported,
        new_to_catalog=result.new_to_catalog,
        library_count=result.library_count,
        wishlist_count=result.wishlist_count,
        warnings=result.warnings,
        success=result.success,
    )
    return result


@router.post("/token", response_model=SyncTokenResponse)
def create_sync_token(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Issue a single-use sync token for the browser extension.

    Args:
        user: Signed-in user
        db: Database session

    Returns:
        The token, the Audible URL that hands it to the extension and the user's sync state
    """
    repo = SyncRepository(db)
    last_sync = repo.get_last_sync(user.id)

    token, jti, expires_at = generate_sync_token(user.id)
    repo.create_token(jti, user.id, expires_at)

    return SyncTokenResponse(
        token=token,
        audible_url=f"{config.AUDIBLE_LIBRARY_URL}#token={token}",
        expires_at=expires_at,
        has_synced_before=repo.has_synced(user.id),
        last_synced_at=last_sync.synced_at if last_sync else None,
    )


@router.options("/import")
def import_preflight():
    return JSONResponse({}, headers=EXTENSION_CORS_HEADERS)


@router.post("/import")
async def import_library(request: Request, db: Session = Depends(get_db)):
    """
    Replace the token owner's library with the uploaded export.

    The sync token is checked before the payload and marked used before the
    import runs, so a token can never be redeemed twice.

    Returns:
        Import counts and per-title warnings
    """
    headers = EXTENSION_CORS_HEADERS

    def unauthorized(message: str) -> HTTPException:
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message, headers=headers)

    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise unauthorized("Missing or invalid Authorization header")

    try:
        payload = verify_sync_token(token)
    except SyncTokenError as e:
        logger.info(f"Rejected sync token: {e}")
        raise unauthorized("Invalid or expired token")

    user_id, jti = payload["sub"], payload["jti"]
    repo = SyncRepository(db)
    sync_token = repo.get_token(jti)
    if sync_token is None:
        raise unauthorized("Token not found")
    if sync_token.used:
        raise unauthorized("Token already used")
    if sync_token.user_id != user_id:
        raise unauthorized("Token user mismatch")

    titles = await read_import_titles(request, headers)

    if not repo.mark_used(jti):
        raise unauthorized("Token already used")

    result = run_import(db, user_id, titles, headers)
    return JSONResponse(result.to_dict(), headers=headers)


@router.get("/history", response_model=SyncHistoryResponse)
def get_sync_history(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return the user's most recent syncs, newest first."""
    history = SyncRepository(db).get_history(user.id, limit=config.SYNC_HISTORY_LIMIT)
    return SyncHistoryResponse(history=[SyncHistoryEntry.model_validate(h) for h in history])
