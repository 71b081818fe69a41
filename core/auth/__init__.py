# core/auth/__init__.py
from .session import create_session_token, decode_session_token, SessionError
from .sync_token import (
    generate_sync_token,
    verify_sync_token,
    extract_bearer_token,
    SyncTokenError,
)
from .admin import is_admin, require_admin, AdminRequiredError

__all__ = [
    'create_session_token',
    'decode_session_token',
    'SessionError',
    'generate_sync_token',
    'verify_sync_token',
    'extract_bearer_token',
    'SyncTokenError',
    'is_admin',
    'require_admin',
    'AdminRequiredError',
]
