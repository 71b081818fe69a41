# core/config.py
"""
Configuration for the audioshelf backend.

All settings are read from environment variables once at import time.
Defaults are meant for local development only.
"""

import os


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_list(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///audioshelf.db")

# Sessions
SESSION_SECRET = os.getenv("SESSION_SECRET", "dev-session-secret-change-in-production")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "audioshelf_session")
SESSION_MAX_AGE_SECONDS = _env_int("SESSION_MAX_AGE_SECONDS", 30 * 24 * 60 * 60)  # 30 days

# Sync tokens (browser extension handshake)
JWT_SECRET = os.getenv("JWT_SECRET", "fallback-secret-change-in-production")
SYNC_TOKEN_TTL_SECONDS = 15 * 60
SYNC_TOKEN_SCOPE = "sync:upload"
AUDIBLE_LIBRARY_URL = "https://www.audible.com/lib"
SYNC_HISTORY_LIMIT = 5
MAX_SYNC_PAYLOAD_BYTES = 50 * 1024 * 1024  # 50MB

# Google OAuth
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
OAUTH_REDIRECT_URL = os.getenv("OAUTH_REDIRECT_URL", "http://localhost:8000/api/auth/callback/google")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")

# Title metadata (Audnexus)
AUDNEXUS_URL = os.getenv("AUDNEXUS_URL", "http://localhost:3001")
METADATA_CACHE_TTL_SECONDS = 10 * 60
METADATA_RETRIES = 3
METADATA_RETRY_DELAY_SECONDS = 1.0
METADATA_BATCH_CONCURRENCY = 25
METADATA_TIMEOUT_SECONDS = 10

# Object storage
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
S3_BUCKET = os.getenv("S3_BUCKET", "audioshlf-lists")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None
URL_EXPIRY_SECONDS = 3600  # 1 hour for presigned URLs

# Image generation
IMAGE_FONT_PATH = os.getenv("IMAGE_FONT_PATH") or None
IMAGE_FONT_BOLD_PATH = os.getenv("IMAGE_FONT_BOLD_PATH") or None
IMAGE_REGENERATE_COOLDOWN_SECONDS = 30
COVER_FETCH_CONCURRENCY = 6
COVER_FETCH_TIMEOUT_SECONDS = 8
BRAND_NAME = "audioshlf"

# Lists
MAX_LIST_ITEMS = 100
DEFAULT_TIERS = ["S", "A", "B", "C", "D"]

# HTTP
# Browser extensions call the sync import endpoint from their own origins
EXTENSION_ORIGIN_REGEX = os.getenv("EXTENSION_ORIGIN_REGEX", r"^(chrome|moz|safari-web)-extension://.*$")
CORS_ORIGINS = _env_list(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
